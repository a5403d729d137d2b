"""
Real-time developer notifications (RTDN).

Google publishes these to Cloud Pub/Sub; exactly one of the notification
fields is set per message.

@see https://developer.android.com/google/play/billing/rtdn-reference
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum, IntEnum

from playbilling.models.base import Entity, nested, scalar
from playbilling.models.common import matches, millis_to_datetime


class SubscriptionNotificationType(IntEnum):
    RECOVERED = 1  # Recovered from account hold
    RENEWED = 2
    CANCELED = 3  # Voluntarily or involuntarily canceled
    PURCHASED = 4
    ON_HOLD = 5
    IN_GRACE_PERIOD = 6
    RESTARTED = 7  # Restored from Play > Account > Subscriptions before expiry
    PRICE_CHANGE_CONFIRMED = 8  # deprecated
    DEFERRED = 9
    PAUSED = 10
    PAUSE_SCHEDULE_CHANGED = 11
    REVOKED = 12
    EXPIRED = 13
    PRICE_CHANGE_UPDATED = 19
    PENDING_PURCHASE_CANCELED = 20
    PRICE_STEP_UP_CONSENT_UPDATED = 22


class OneTimeNotificationType(IntEnum):
    PURCHASED = 1
    CANCELED = 2


class VoidedProductType(IntEnum):
    SUBSCRIPTION = 1
    ONE_TIME = 2


class VoidedRefundType(IntEnum):
    FULL_REFUND = 1
    QUANTITY_BASED_PARTIAL_REFUND = 2


class NotificationKind(str, Enum):
    SUBSCRIPTION = "subscription"
    ONE_TIME_PRODUCT = "one_time_product"
    VOIDED_PURCHASE = "voided_purchase"
    TEST = "test"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class SubscriptionNotification(Entity):
    schema = {
        "version": scalar("version"),
        "notification_type": scalar("notificationType"),
        "purchase_token": scalar("purchaseToken"),
        "subscription_id": scalar("subscriptionId"),
    }

    version: str | None = None
    notification_type: int | None = None
    purchase_token: str | None = None
    subscription_id: str | None = None  # deprecated by Google, still sent

    def event_type(self) -> SubscriptionNotificationType | None:
        """notificationType as an enum, None when absent or not yet known to the SDK."""
        if self.notification_type is None:
            return None
        try:
            return SubscriptionNotificationType(int(self.notification_type))
        except ValueError:
            return None


@dataclass(frozen=True)
class OneTimeProductNotification(Entity):
    schema = {
        "version": scalar("version"),
        "notification_type": scalar("notificationType"),
        "purchase_token": scalar("purchaseToken"),
        "sku": scalar("sku"),
    }

    version: str | None = None
    notification_type: int | None = None
    purchase_token: str | None = None
    sku: str | None = None

    def is_purchased(self) -> bool:
        return matches(self.notification_type, OneTimeNotificationType.PURCHASED)

    def is_canceled(self) -> bool:
        return matches(self.notification_type, OneTimeNotificationType.CANCELED)


@dataclass(frozen=True)
class VoidedPurchaseNotification(Entity):
    schema = {
        "purchase_token": scalar("purchaseToken"),
        "order_id": scalar("orderId"),
        "product_type": scalar("productType"),
        "refund_type": scalar("refundType"),
    }

    purchase_token: str | None = None
    order_id: str | None = None
    product_type: int | None = None
    refund_type: int | None = None

    def is_subscription(self) -> bool:
        return matches(self.product_type, VoidedProductType.SUBSCRIPTION)

    def is_full_refund(self) -> bool:
        return matches(self.refund_type, VoidedRefundType.FULL_REFUND)


@dataclass(frozen=True)
class TestNotification(Entity):
    """Sent from the Play Console to check the Pub/Sub wiring."""

    __test__ = False  # not a pytest class

    schema = {
        "version": scalar("version"),
    }

    version: str | None = None


@dataclass(frozen=True)
class DeveloperNotification(Entity):
    """Top-level RTDN payload."""

    schema = {
        "version": scalar("version"),
        "package_name": scalar("packageName"),
        "event_time_millis": scalar("eventTimeMillis"),
        "subscription_notification": nested("subscriptionNotification", SubscriptionNotification),
        "one_time_product_notification": nested(
            "oneTimeProductNotification", OneTimeProductNotification
        ),
        "voided_purchase_notification": nested(
            "voidedPurchaseNotification", VoidedPurchaseNotification
        ),
        "test_notification": nested("testNotification", TestNotification),
    }

    version: str | None = None
    package_name: str | None = None
    event_time_millis: str | None = None
    subscription_notification: SubscriptionNotification | None = None
    one_time_product_notification: OneTimeProductNotification | None = None
    voided_purchase_notification: VoidedPurchaseNotification | None = None
    test_notification: TestNotification | None = None

    def notification_kind(self) -> NotificationKind:
        if self.subscription_notification is not None:
            return NotificationKind.SUBSCRIPTION
        if self.one_time_product_notification is not None:
            return NotificationKind.ONE_TIME_PRODUCT
        if self.voided_purchase_notification is not None:
            return NotificationKind.VOIDED_PURCHASE
        if self.test_notification is not None:
            return NotificationKind.TEST
        return NotificationKind.UNKNOWN

    def is_test(self) -> bool:
        return self.notification_kind() is NotificationKind.TEST

    def event_time(self) -> datetime | None:
        return millis_to_datetime(self.event_time_millis)

    def purchase_token(self) -> str | None:
        """Purchase token of whichever notification is set."""
        for notification in (
            self.subscription_notification,
            self.one_time_product_notification,
            self.voided_purchase_notification,
        ):
            if notification is not None:
                return notification.purchase_token
        return None
