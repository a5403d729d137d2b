"""
One-time product purchases (purchases.products).

@see https://developers.google.com/android-publisher/api-ref/rest/v3/purchases.products
"""

from dataclasses import dataclass
from datetime import datetime

from playbilling.models.base import Entity, scalar
from playbilling.models.common import (
    AcknowledgementState,
    ConsumptionState,
    PurchaseState,
    PurchaseType,
    matches,
    millis_to_datetime,
)


@dataclass(frozen=True)
class ProductPurchase(Entity):
    """A ProductPurchase resource indicates the status of a user's inapp product purchase."""

    schema = {
        "kind": scalar("kind"),
        "purchase_time_millis": scalar("purchaseTimeMillis"),
        "purchase_state": scalar("purchaseState"),
        "consumption_state": scalar("consumptionState"),
        "developer_payload": scalar("developerPayload"),
        "order_id": scalar("orderId"),
        "purchase_type": scalar("purchaseType"),
        "acknowledgement_state": scalar("acknowledgementState"),
        "purchase_token": scalar("purchaseToken"),
        "product_id": scalar("productId"),
        "quantity": scalar("quantity"),
        "obfuscated_external_account_id": scalar("obfuscatedExternalAccountId"),
        "obfuscated_external_profile_id": scalar("obfuscatedExternalProfileId"),
        "region_code": scalar("regionCode"),
        "refundable_quantity": scalar("refundableQuantity"),
    }

    kind: str | None = None
    purchase_time_millis: str | None = None
    purchase_state: int | None = None
    consumption_state: int | None = None
    developer_payload: str | None = None
    order_id: str | None = None
    purchase_type: int | None = None
    acknowledgement_state: int | None = None
    purchase_token: str | None = None
    product_id: str | None = None
    quantity: int | None = None
    obfuscated_external_account_id: str | None = None
    obfuscated_external_profile_id: str | None = None
    region_code: str | None = None
    refundable_quantity: int | None = None

    def is_purchased(self) -> bool:
        return matches(self.purchase_state, PurchaseState.PURCHASED)

    def is_pending(self) -> bool:
        return matches(self.purchase_state, PurchaseState.PENDING)

    def is_acknowledged(self) -> bool:
        return matches(self.acknowledgement_state, AcknowledgementState.ACKNOWLEDGED)

    def is_consumed(self) -> bool:
        return matches(self.consumption_state, ConsumptionState.CONSUMED)

    def is_test(self) -> bool:
        """Check if this is a test purchase (license tester account)."""
        return matches(self.purchase_type, PurchaseType.TEST)

    def purchase_time(self) -> datetime | None:
        return millis_to_datetime(self.purchase_time_millis)
