"""
Orders (orders.get / orders.refund).

@see https://developers.google.com/android-publisher/api-ref/rest/v3/orders
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from playbilling.models.base import Entity, nested, nested_list, scalar
from playbilling.models.common import Money, parse_timestamp


class OrderState(str, Enum):
    UNSPECIFIED = "STATE_UNSPECIFIED"
    PENDING = "PENDING"
    PROCESSED = "PROCESSED"
    CANCELED = "CANCELED"
    PENDING_REFUND = "PENDING_REFUND"
    PARTIALLY_REFUNDED = "PARTIALLY_REFUNDED"
    REFUNDED = "REFUNDED"


@dataclass(frozen=True)
class BuyerAddress(Entity):
    """Address information for the customer, for use in tax computation."""

    schema = {
        "buyer_state": scalar("buyerState"),
        "buyer_country": scalar("buyerCountry"),
        "buyer_postcode": scalar("buyerPostcode"),
    }

    buyer_state: str | None = None
    buyer_country: str | None = None
    buyer_postcode: str | None = None


@dataclass(frozen=True)
class PointsDetails(Entity):
    """Details relating to any Play Points applied to an order."""

    schema = {
        "points_offer_id": scalar("pointsOfferId"),
        "points_coupon_value": nested("pointsCouponValue", Money),
        "points_discount_rate_micros": scalar("pointsDiscountRateMicros"),
        "points_spent": scalar("pointsSpent"),
    }

    points_offer_id: str | None = None
    points_coupon_value: Money | None = None
    points_discount_rate_micros: str | None = None
    points_spent: str | None = None


@dataclass(frozen=True)
class OneTimePurchaseDetails(Entity):
    schema = {
        "quantity": scalar("quantity"),
        "offer_id": scalar("offerId"),
        "purchase_option_id": scalar("purchaseOptionId"),
    }

    quantity: int | None = None
    offer_id: str | None = None
    purchase_option_id: str | None = None


@dataclass(frozen=True)
class SubscriptionDetails(Entity):
    schema = {
        "base_plan_id": scalar("basePlanId"),
        "offer_id": scalar("offerId"),
        "offer_phase": scalar("offerPhase"),
        "service_period_start_time": scalar("servicePeriodStartTime"),
        "service_period_end_time": scalar("servicePeriodEndTime"),
    }

    base_plan_id: str | None = None
    offer_id: str | None = None
    offer_phase: str | None = None
    service_period_start_time: str | None = None
    service_period_end_time: str | None = None


@dataclass(frozen=True)
class LineItem(Entity):
    """Details of a line item in an order."""

    schema = {
        "product_id": scalar("productId"),
        "product_title": scalar("productTitle"),
        "total": nested("total", Money),
        "tax": nested("tax", Money),
        "listing_price": nested("listingPrice", Money),
        "one_time_purchase_details": nested("oneTimePurchaseDetails", OneTimePurchaseDetails),
        "subscription_details": nested("subscriptionDetails", SubscriptionDetails),
    }

    product_id: str | None = None
    product_title: str | None = None
    total: Money | None = None
    tax: Money | None = None
    listing_price: Money | None = None
    one_time_purchase_details: OneTimePurchaseDetails | None = None
    subscription_details: SubscriptionDetails | None = None


@dataclass(frozen=True)
class RefundDetails(Entity):
    schema = {
        "total": nested("total", Money),
        "tax": nested("tax", Money),
    }

    total: Money | None = None
    tax: Money | None = None


@dataclass(frozen=True)
class ProcessedEvent(Entity):
    schema = {
        "event_time": scalar("eventTime"),
    }

    event_time: str | None = None


@dataclass(frozen=True)
class CancellationEvent(Entity):
    schema = {
        "event_time": scalar("eventTime"),
    }

    event_time: str | None = None


@dataclass(frozen=True)
class RefundEvent(Entity):
    schema = {
        "event_time": scalar("eventTime"),
        "refund_details": nested("refundDetails", RefundDetails),
        "refund_reason": scalar("refundReason"),
    }

    event_time: str | None = None
    refund_details: RefundDetails | None = None
    refund_reason: str | None = None


@dataclass(frozen=True)
class PartialRefundEvent(Entity):
    schema = {
        "create_time": scalar("createTime"),
        "process_time": scalar("processTime"),
        "state": scalar("state"),
        "refund_details": nested("refundDetails", RefundDetails),
    }

    create_time: str | None = None
    process_time: str | None = None
    state: str | None = None
    refund_details: RefundDetails | None = None


@dataclass(frozen=True)
class OrderHistory(Entity):
    """Details about events which modified the order."""

    schema = {
        "processed_event": nested("processedEvent", ProcessedEvent),
        "cancellation_event": nested("cancellationEvent", CancellationEvent),
        "refund_event": nested("refundEvent", RefundEvent),
        "partial_refund_events": nested_list("partialRefundEvents", PartialRefundEvent),
    }

    processed_event: ProcessedEvent | None = None
    cancellation_event: CancellationEvent | None = None
    refund_event: RefundEvent | None = None
    partial_refund_events: tuple[PartialRefundEvent, ...] | None = None


@dataclass(frozen=True)
class Order(Entity):
    """An Order resource encapsulates information about a Play purchase."""

    schema = {
        "order_id": scalar("orderId"),
        "purchase_token": scalar("purchaseToken"),
        "state": scalar("state"),
        "create_time": scalar("createTime"),
        "last_event_time": scalar("lastEventTime"),
        "buyer_address": nested("buyerAddress", BuyerAddress),
        "total": nested("total", Money),
        "tax": nested("tax", Money),
        "developer_revenue_in_buyer_currency": nested("developerRevenueInBuyerCurrency", Money),
        "points_details": nested("pointsDetails", PointsDetails),
        "order_history": nested("orderHistory", OrderHistory),
        "line_items": nested_list("lineItems", LineItem),
        "sales_channel": scalar("salesChannel"),
    }

    order_id: str | None = None
    purchase_token: str | None = None
    state: str | None = None
    create_time: str | None = None
    last_event_time: str | None = None
    buyer_address: BuyerAddress | None = None
    total: Money | None = None
    tax: Money | None = None
    developer_revenue_in_buyer_currency: Money | None = None
    points_details: PointsDetails | None = None
    order_history: OrderHistory | None = None
    line_items: tuple[LineItem, ...] | None = None
    sales_channel: str | None = None

    def is_refunded(self) -> bool:
        return self.state in (OrderState.REFUNDED.value, OrderState.PARTIALLY_REFUNDED.value)

    def created_at(self) -> datetime | None:
        return parse_timestamp(self.create_time)
