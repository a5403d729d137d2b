"""
Shared value objects and enumerations used across the Play Developer API.
"""

import re
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum, IntEnum
from typing import Any

from playbilling.models.base import Entity, scalar

# RFC 3339 fraction: Google emits 0, 3, 6 or 9 digits, datetime takes at most 6
_FRACTION = re.compile(r"\.(\d{6})\d+")


def millis_to_datetime(value: str | int | None) -> datetime | None:
    """Convert an epoch-milliseconds field (sent as a string) to a UTC datetime."""
    if value is None:
        return None
    return datetime.fromtimestamp(int(value) / 1000, tz=UTC)


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an RFC 3339 timestamp such as "2024-01-01T00:00:00.123Z"."""
    if value is None:
        return None
    normalized = _FRACTION.sub(r".\1", value)
    if normalized.endswith(("Z", "z")):
        normalized = normalized[:-1] + "+00:00"
    return datetime.fromisoformat(normalized)


class AcknowledgementState(IntEnum):
    """v1 acknowledgementState."""

    PENDING = 0
    ACKNOWLEDGED = 1


class PurchaseState(IntEnum):
    """One-time product purchaseState."""

    PURCHASED = 0
    CANCELED = 1
    PENDING = 2


class ConsumptionState(IntEnum):
    """One-time product consumptionState."""

    YET_TO_BE_CONSUMED = 0
    CONSUMED = 1


class PurchaseType(IntEnum):
    """purchaseType - only present for purchases not made with real money."""

    TEST = 0
    PROMO = 1
    REWARDED = 2


class PaymentState(IntEnum):
    """v1 subscription paymentState."""

    PENDING = 0
    RECEIVED = 1
    FREE_TRIAL = 2
    PENDING_DEFERRED = 3


class CancelReason(IntEnum):
    """v1 subscription cancelReason."""

    USER = 0
    SYSTEM = 1
    REPLACED = 2
    DEVELOPER = 3


class SubscriptionState(str, Enum):
    """v2 subscriptionState."""

    UNSPECIFIED = "SUBSCRIPTION_STATE_UNSPECIFIED"
    PENDING = "SUBSCRIPTION_STATE_PENDING"
    ACTIVE = "SUBSCRIPTION_STATE_ACTIVE"
    PAUSED = "SUBSCRIPTION_STATE_PAUSED"
    IN_GRACE_PERIOD = "SUBSCRIPTION_STATE_IN_GRACE_PERIOD"
    ON_HOLD = "SUBSCRIPTION_STATE_ON_HOLD"
    CANCELED = "SUBSCRIPTION_STATE_CANCELED"
    EXPIRED = "SUBSCRIPTION_STATE_EXPIRED"
    PENDING_PURCHASE_CANCELED = "SUBSCRIPTION_STATE_PENDING_PURCHASE_CANCELED"


class AcknowledgementStateV2(str, Enum):
    """v2 acknowledgementState."""

    UNSPECIFIED = "ACKNOWLEDGEMENT_STATE_UNSPECIFIED"
    PENDING = "ACKNOWLEDGEMENT_STATE_PENDING"
    ACKNOWLEDGED = "ACKNOWLEDGEMENT_STATE_ACKNOWLEDGED"


def matches(value: Any, member: Enum) -> bool:
    """
    Compare a raw field against an enum member.

    Raw values are kept verbatim, so integer states may arrive as strings.
    """
    if value is None:
        return False
    if isinstance(member, IntEnum):
        try:
            return int(value) == member.value
        except (TypeError, ValueError):
            return False
    return bool(value == member.value)


@dataclass(frozen=True)
class Money(Entity):
    """
    Represents an amount of money with its currency type.

    units is an int64 and is sent as a string.
    """

    schema = {
        "currency_code": scalar("currencyCode"),
        "units": scalar("units"),
        "nanos": scalar("nanos"),
    }

    currency_code: str | None = None
    units: str | None = None
    nanos: int | None = None

    def amount(self) -> Decimal:
        """Units and nanos combined as a Decimal."""
        units = Decimal(self.units or 0)
        nanos = Decimal(self.nanos or 0) / Decimal(1_000_000_000)
        return units + nanos


@dataclass(frozen=True)
class EmptyResponse(Entity):
    """Body of endpoints that return nothing (acknowledge, cancel, refund...)."""

    schema = {}
