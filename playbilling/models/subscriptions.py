"""
Subscription purchases, v1 API (purchases.subscriptions).

@see https://developers.google.com/android-publisher/api-ref/rest/v3/purchases.subscriptions
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import IntEnum
from typing import Any

from playbilling.models.base import Entity, nested, scalar
from playbilling.models.common import (
    AcknowledgementState,
    CancelReason,
    PaymentState,
    PurchaseType,
    matches,
    millis_to_datetime,
)


@dataclass(frozen=True)
class Price(Entity):
    """Definition of a price, i.e. currency and units."""

    schema = {
        "price_micros": scalar("priceMicros"),
        "currency": scalar("currency"),
    }

    price_micros: str | None = None
    currency: str | None = None

    def amount(self) -> Decimal | None:
        if self.price_micros is None:
            return None
        return Decimal(self.price_micros) / Decimal(1_000_000)


@dataclass(frozen=True)
class IntroductoryPriceInfo(Entity):
    """Contains the introductory price information for a subscription."""

    schema = {
        "introductory_price_currency_code": scalar("introductoryPriceCurrencyCode"),
        "introductory_price_amount_micros": scalar("introductoryPriceAmountMicros"),
        "introductory_price_period": scalar("introductoryPricePeriod"),
        "introductory_price_cycles": scalar("introductoryPriceCycles"),
    }

    introductory_price_currency_code: str | None = None
    introductory_price_amount_micros: str | None = None
    introductory_price_period: str | None = None  # ISO 8601, e.g. "P1W"
    introductory_price_cycles: int | None = None


@dataclass(frozen=True)
class SubscriptionCancelSurveyResult(Entity):
    """Information provided by the user when they complete the subscription cancellation flow."""

    schema = {
        "cancel_survey_reason": scalar("cancelSurveyReason"),
        "user_input_cancel_reason": scalar("userInputCancelReason"),
    }

    cancel_survey_reason: int | None = None
    user_input_cancel_reason: str | None = None


class PriceChangeState(IntEnum):
    """v1 priceChange.state."""

    OUTSTANDING = 0
    ACCEPTED = 1


@dataclass(frozen=True)
class SubscriptionPriceChange(Entity):
    """Contains the price change information for a subscription."""

    schema = {
        "new_price": nested("newPrice", Price),
        "state": scalar("state"),
    }

    new_price: Price | None = None
    state: int | None = None

    def is_accepted(self) -> bool:
        return matches(self.state, PriceChangeState.ACCEPTED)


@dataclass(frozen=True)
class SubscriptionPurchase(Entity):
    """A SubscriptionPurchase resource indicates the status of a user's subscription purchase."""

    schema = {
        "kind": scalar("kind"),
        "start_time_millis": scalar("startTimeMillis"),
        "expiry_time_millis": scalar("expiryTimeMillis"),
        "auto_resume_time_millis": scalar("autoResumeTimeMillis"),
        "auto_renewing": scalar("autoRenewing"),
        "price_currency_code": scalar("priceCurrencyCode"),
        "price_amount_micros": scalar("priceAmountMicros"),
        "introductory_price_info": nested("introductoryPriceInfo", IntroductoryPriceInfo),
        "country_code": scalar("countryCode"),
        "developer_payload": scalar("developerPayload"),
        "payment_state": scalar("paymentState"),
        "cancel_reason": scalar("cancelReason"),
        "user_cancellation_time_millis": scalar("userCancellationTimeMillis"),
        "cancel_survey_result": nested("cancelSurveyResult", SubscriptionCancelSurveyResult),
        "order_id": scalar("orderId"),
        "linked_purchase_token": scalar("linkedPurchaseToken"),
        "purchase_type": scalar("purchaseType"),
        "price_change": nested("priceChange", SubscriptionPriceChange),
        "profile_name": scalar("profileName"),
        "email_address": scalar("emailAddress"),
        "given_name": scalar("givenName"),
        "family_name": scalar("familyName"),
        "profile_id": scalar("profileId"),
        "acknowledgement_state": scalar("acknowledgementState"),
        "external_account_id": scalar("externalAccountId"),
        "promotion_type": scalar("promotionType"),
        "promotion_code": scalar("promotionCode"),
        "obfuscated_external_account_id": scalar("obfuscatedExternalAccountId"),
        "obfuscated_external_profile_id": scalar("obfuscatedExternalProfileId"),
    }

    kind: str | None = None
    start_time_millis: str | None = None
    expiry_time_millis: str | None = None
    auto_resume_time_millis: str | None = None
    auto_renewing: bool | None = None
    price_currency_code: str | None = None
    price_amount_micros: str | None = None
    introductory_price_info: IntroductoryPriceInfo | None = None
    country_code: str | None = None
    developer_payload: str | None = None
    payment_state: int | None = None
    cancel_reason: int | None = None
    user_cancellation_time_millis: str | None = None
    cancel_survey_result: SubscriptionCancelSurveyResult | None = None
    order_id: str | None = None
    linked_purchase_token: str | None = None
    purchase_type: int | None = None
    price_change: SubscriptionPriceChange | None = None
    profile_name: str | None = None
    email_address: str | None = None
    given_name: str | None = None
    family_name: str | None = None
    profile_id: str | None = None
    acknowledgement_state: int | None = None
    external_account_id: str | None = None
    promotion_type: int | None = None
    promotion_code: str | None = None
    obfuscated_external_account_id: str | None = None
    obfuscated_external_profile_id: str | None = None

    def is_acknowledged(self) -> bool:
        return matches(self.acknowledgement_state, AcknowledgementState.ACKNOWLEDGED)

    def is_auto_renewing(self) -> bool:
        return self.auto_renewing is True

    def is_test(self) -> bool:
        return matches(self.purchase_type, PurchaseType.TEST)

    def is_payment_received(self) -> bool:
        return matches(self.payment_state, PaymentState.RECEIVED)

    def is_free_trial(self) -> bool:
        return matches(self.payment_state, PaymentState.FREE_TRIAL)

    def is_canceled_by_user(self) -> bool:
        return matches(self.cancel_reason, CancelReason.USER)

    def start_time(self) -> datetime | None:
        return millis_to_datetime(self.start_time_millis)

    def expiry_time(self) -> datetime | None:
        return millis_to_datetime(self.expiry_time_millis)

    def is_expired(self, now: datetime) -> bool:
        """Whether the subscription expired before ``now`` (timezone-aware)."""
        expiry = self.expiry_time()
        return expiry is not None and expiry <= now


@dataclass(frozen=True)
class SubscriptionDeferralInfo:
    """
    Request body for purchases.subscriptions.defer.

    Both times are epoch milliseconds. The expected expiry must match the
    current one or Google rejects the request.
    """

    expected_expiry_time_millis: int
    desired_expiry_time_millis: int

    def __post_init__(self) -> None:
        """Validate deferral window."""
        if self.desired_expiry_time_millis <= self.expected_expiry_time_millis:
            raise ValueError("Desired expiry time must be after the expected expiry time")

    def to_body(self) -> dict[str, Any]:
        return {
            "deferralInfo": {
                "expectedExpiryTimeMillis": str(self.expected_expiry_time_millis),
                "desiredExpiryTimeMillis": str(self.desired_expiry_time_millis),
            }
        }


@dataclass(frozen=True)
class SubscriptionPurchasesDeferResponse(Entity):
    """Response for the purchases.subscriptions.defer API."""

    schema = {
        "new_expiry_time_millis": scalar("newExpiryTimeMillis"),
    }

    new_expiry_time_millis: str | None = None

    def new_expiry_time(self) -> datetime | None:
        return millis_to_datetime(self.new_expiry_time_millis)
