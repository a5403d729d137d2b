"""
Voided purchases (purchases.voidedpurchases).

@see https://developers.google.com/android-publisher/api-ref/rest/v3/purchases.voidedpurchases
"""

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum

from playbilling.models.base import Entity, nested, nested_list, scalar
from playbilling.models.common import millis_to_datetime


class VoidedSource(IntEnum):
    USER = 0
    DEVELOPER = 1
    GOOGLE = 2


class VoidedReason(IntEnum):
    OTHER = 0
    REMORSE = 1
    NOT_RECEIVED = 2
    DEFECTIVE = 3
    ACCIDENTAL_PURCHASE = 4
    FRAUD = 5
    FRIENDLY_FRAUD = 6
    CHARGEBACK = 7
    UNACKNOWLEDGED_PURCHASE = 8


class VoidedPurchaseType(IntEnum):
    """Value of the ``type`` query parameter."""

    IN_APP_ONLY = 0
    IN_APP_AND_SUBSCRIPTIONS = 1


@dataclass(frozen=True)
class VoidedPurchase(Entity):
    """A VoidedPurchase resource indicates a purchase that was either canceled/refunded/charged-back."""

    schema = {
        "kind": scalar("kind"),
        "purchase_token": scalar("purchaseToken"),
        "purchase_time_millis": scalar("purchaseTimeMillis"),
        "voided_time_millis": scalar("voidedTimeMillis"),
        "order_id": scalar("orderId"),
        "voided_source": scalar("voidedSource"),
        "voided_reason": scalar("voidedReason"),
        "voided_quantity": scalar("voidedQuantity"),
    }

    kind: str | None = None
    purchase_token: str | None = None
    purchase_time_millis: str | None = None
    voided_time_millis: str | None = None
    order_id: str | None = None
    voided_source: int | None = None
    voided_reason: int | None = None
    voided_quantity: int | None = None

    def purchase_time(self) -> datetime | None:
        return millis_to_datetime(self.purchase_time_millis)

    def voided_time(self) -> datetime | None:
        return millis_to_datetime(self.voided_time_millis)

    def is_partial_refund(self) -> bool:
        return self.voided_quantity is not None


@dataclass(frozen=True)
class PageInfo(Entity):
    """Information about the current page."""

    schema = {
        "total_results": scalar("totalResults"),
        "result_per_page": scalar("resultPerPage"),
        "start_index": scalar("startIndex"),
    }

    total_results: int | None = None
    result_per_page: int | None = None
    start_index: int | None = None


@dataclass(frozen=True)
class TokenPagination(Entity):
    """Pagination information returned by a List operation when token pagination is enabled."""

    schema = {
        "next_page_token": scalar("nextPageToken"),
        "previous_page_token": scalar("previousPageToken"),
    }

    next_page_token: str | None = None
    previous_page_token: str | None = None


@dataclass(frozen=True)
class VoidedPurchasesListResponse(Entity):
    """Response for the voidedpurchases.list API."""

    schema = {
        "page_info": nested("pageInfo", PageInfo),
        "token_pagination": nested("tokenPagination", TokenPagination),
        "voided_purchases": nested_list("voidedPurchases", VoidedPurchase),
    }

    page_info: PageInfo | None = None
    token_pagination: TokenPagination | None = None
    voided_purchases: tuple[VoidedPurchase, ...] | None = None

    def next_page_token(self) -> str | None:
        if self.token_pagination is None:
            return None
        return self.token_pagination.next_page_token
