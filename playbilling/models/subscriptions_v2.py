"""
Subscription purchases, v2 API (purchases.subscriptionsv2).

Each documented object has its own schema; nothing is shared between
unrelated shapes.

@see https://developers.google.com/android-publisher/api-ref/rest/v3/purchases.subscriptionsv2
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from playbilling.models.base import Entity, nested, nested_list, scalar
from playbilling.models.common import (
    AcknowledgementStateV2,
    Money,
    SubscriptionState,
    matches,
    parse_timestamp,
)


@dataclass(frozen=True)
class SubscriptionItemPriceChangeDetails(Entity):
    """Price change related information of a subscription item."""

    schema = {
        "new_price": nested("newPrice", Money),
        "price_change_mode": scalar("priceChangeMode"),
        "price_change_state": scalar("priceChangeState"),
        "expected_new_price_charge_time": scalar("expectedNewPriceChargeTime"),
    }

    new_price: Money | None = None
    price_change_mode: str | None = None  # PRICE_DECREASE, PRICE_INCREASE, OPT_OUT_PRICE_INCREASE
    price_change_state: str | None = None  # OUTSTANDING, CONFIRMED, APPLIED
    expected_new_price_charge_time: str | None = None


@dataclass(frozen=True)
class InstallmentPlan(Entity):
    """Information to a installment plan."""

    schema = {
        "initial_committed_payments_count": scalar("initialCommittedPaymentsCount"),
        "subsequent_committed_payments_count": scalar("subsequentCommittedPaymentsCount"),
        "remaining_committed_payments_count": scalar("remainingCommittedPaymentsCount"),
        "pending_cancellation": scalar("pendingCancellation"),
    }

    initial_committed_payments_count: int | None = None
    subsequent_committed_payments_count: int | None = None
    remaining_committed_payments_count: int | None = None
    pending_cancellation: dict[str, Any] | None = None

    def is_pending_cancellation(self) -> bool:
        return self.pending_cancellation is not None


@dataclass(frozen=True)
class AutoRenewingPlan(Entity):
    """Information related to an auto renewing plan."""

    schema = {
        "auto_renew_enabled": scalar("autoRenewEnabled"),
        "recurring_price": nested("recurringPrice", Money),
        "price_change_details": nested("priceChangeDetails", SubscriptionItemPriceChangeDetails),
        "installment_details": nested("installmentDetails", InstallmentPlan),
    }

    auto_renew_enabled: bool | None = None
    recurring_price: Money | None = None
    price_change_details: SubscriptionItemPriceChangeDetails | None = None
    installment_details: InstallmentPlan | None = None


@dataclass(frozen=True)
class PrepaidPlan(Entity):
    """Information related to a prepaid plan."""

    schema = {
        "allow_extend_after_time": scalar("allowExtendAfterTime"),
    }

    allow_extend_after_time: str | None = None


@dataclass(frozen=True)
class OfferDetails(Entity):
    """Offer details information related to a purchase line item."""

    schema = {
        "offer_tags": scalar("offerTags"),
        "base_plan_id": scalar("basePlanId"),
        "offer_id": scalar("offerId"),
    }

    offer_tags: list[str] | None = None
    base_plan_id: str | None = None
    offer_id: str | None = None


@dataclass(frozen=True)
class DeferredItemReplacement(Entity):
    """Information related to deferred item replacement."""

    schema = {
        "product_id": scalar("productId"),
    }

    product_id: str | None = None


@dataclass(frozen=True)
class SubscriptionPurchaseLineItem(Entity):
    """Item-level info for a subscription purchase."""

    schema = {
        "product_id": scalar("productId"),
        "expiry_time": scalar("expiryTime"),
        "auto_renewing_plan": nested("autoRenewingPlan", AutoRenewingPlan),
        "prepaid_plan": nested("prepaidPlan", PrepaidPlan),
        "offer_details": nested("offerDetails", OfferDetails),
        "deferred_item_replacement": nested("deferredItemReplacement", DeferredItemReplacement),
        "latest_successful_order_id": scalar("latestSuccessfulOrderId"),
    }

    product_id: str | None = None
    expiry_time: str | None = None
    auto_renewing_plan: AutoRenewingPlan | None = None
    prepaid_plan: PrepaidPlan | None = None
    offer_details: OfferDetails | None = None
    deferred_item_replacement: DeferredItemReplacement | None = None
    latest_successful_order_id: str | None = None

    def expiry_datetime(self) -> datetime | None:
        return parse_timestamp(self.expiry_time)

    def is_auto_renewing(self) -> bool:
        return self.auto_renewing_plan is not None and self.auto_renewing_plan.auto_renew_enabled is True

    def is_prepaid(self) -> bool:
        return self.prepaid_plan is not None


@dataclass(frozen=True)
class CancelSurveyResult(Entity):
    """Result of the cancel survey when the subscription was canceled by the user."""

    schema = {
        "reason": scalar("reason"),
        "reason_user_input": scalar("reasonUserInput"),
    }

    reason: str | None = None  # CANCEL_SURVEY_REASON_*
    reason_user_input: str | None = None


@dataclass(frozen=True)
class UserInitiatedCancellation(Entity):
    """Information specific to cancellations initiated by users."""

    schema = {
        "cancel_survey_result": nested("cancelSurveyResult", CancelSurveyResult),
        "cancel_time": scalar("cancelTime"),
    }

    cancel_survey_result: CancelSurveyResult | None = None
    cancel_time: str | None = None


@dataclass(frozen=True)
class SystemInitiatedCancellation(Entity):
    """Canceled by the system, e.g. because of a billing problem."""

    schema = {}


@dataclass(frozen=True)
class DeveloperInitiatedCancellation(Entity):
    """Canceled by the developer through the API."""

    schema = {}


@dataclass(frozen=True)
class ReplacementCancellation(Entity):
    """Canceled because it was replaced by a new subscription."""

    schema = {}


@dataclass(frozen=True)
class CanceledStateContext(Entity):
    """Information specific to a subscription in the SUBSCRIPTION_STATE_CANCELED or
    SUBSCRIPTION_STATE_EXPIRED state. Exactly one reason is set."""

    schema = {
        "user_initiated_cancellation": nested("userInitiatedCancellation", UserInitiatedCancellation),
        "system_initiated_cancellation": nested(
            "systemInitiatedCancellation", SystemInitiatedCancellation
        ),
        "developer_initiated_cancellation": nested(
            "developerInitiatedCancellation", DeveloperInitiatedCancellation
        ),
        "replacement_cancellation": nested("replacementCancellation", ReplacementCancellation),
    }

    user_initiated_cancellation: UserInitiatedCancellation | None = None
    system_initiated_cancellation: SystemInitiatedCancellation | None = None
    developer_initiated_cancellation: DeveloperInitiatedCancellation | None = None
    replacement_cancellation: ReplacementCancellation | None = None


@dataclass(frozen=True)
class PausedStateContext(Entity):
    """Information specific to a subscription in paused state."""

    schema = {
        "auto_resume_time": scalar("autoResumeTime"),
    }

    auto_resume_time: str | None = None


@dataclass(frozen=True)
class ExternalAccountIdentifiers(Entity):
    """User account identifier in the third-party service."""

    schema = {
        "external_account_id": scalar("externalAccountId"),
        "obfuscated_external_account_id": scalar("obfuscatedExternalAccountId"),
        "obfuscated_external_profile_id": scalar("obfuscatedExternalProfileId"),
    }

    external_account_id: str | None = None
    obfuscated_external_account_id: str | None = None
    obfuscated_external_profile_id: str | None = None


@dataclass(frozen=True)
class SubscribeWithGoogleInfo(Entity):
    """Information associated with purchases made with 'Subscribe with Google'."""

    schema = {
        "profile_id": scalar("profileId"),
        "profile_name": scalar("profileName"),
        "email_address": scalar("emailAddress"),
        "given_name": scalar("givenName"),
        "family_name": scalar("familyName"),
    }

    profile_id: str | None = None
    profile_name: str | None = None
    email_address: str | None = None
    given_name: str | None = None
    family_name: str | None = None


@dataclass(frozen=True)
class TestPurchase(Entity):
    """Present only when the subscription was bought by a license tester."""

    __test__ = False  # not a pytest class

    schema = {}


@dataclass(frozen=True)
class SubscriptionPurchaseV2(Entity):
    """Indicates the status of a user's subscription purchase."""

    schema = {
        "kind": scalar("kind"),
        "region_code": scalar("regionCode"),
        "line_items": nested_list("lineItems", SubscriptionPurchaseLineItem),
        "start_time": scalar("startTime"),
        "subscription_state": scalar("subscriptionState"),
        "latest_order_id": scalar("latestOrderId"),
        "linked_purchase_token": scalar("linkedPurchaseToken"),
        "paused_state_context": nested("pausedStateContext", PausedStateContext),
        "canceled_state_context": nested("canceledStateContext", CanceledStateContext),
        "test_purchase": nested("testPurchase", TestPurchase),
        "acknowledgement_state": scalar("acknowledgementState"),
        "external_account_identifiers": nested(
            "externalAccountIdentifiers", ExternalAccountIdentifiers
        ),
        "subscribe_with_google_info": nested("subscribeWithGoogleInfo", SubscribeWithGoogleInfo),
    }

    kind: str | None = None
    region_code: str | None = None
    line_items: tuple[SubscriptionPurchaseLineItem, ...] | None = None
    start_time: str | None = None
    subscription_state: str | None = None
    latest_order_id: str | None = None
    linked_purchase_token: str | None = None
    paused_state_context: PausedStateContext | None = None
    canceled_state_context: CanceledStateContext | None = None
    test_purchase: TestPurchase | None = None
    acknowledgement_state: str | None = None
    external_account_identifiers: ExternalAccountIdentifiers | None = None
    subscribe_with_google_info: SubscribeWithGoogleInfo | None = None

    def state(self) -> SubscriptionState | None:
        """subscriptionState as an enum, None when absent or not yet known to the SDK."""
        try:
            return SubscriptionState(self.subscription_state)
        except ValueError:
            return None

    def is_active(self) -> bool:
        """Active or in grace period - the user should have access."""
        return self.subscription_state in (
            SubscriptionState.ACTIVE.value,
            SubscriptionState.IN_GRACE_PERIOD.value,
        )

    def is_test(self) -> bool:
        return self.test_purchase is not None

    def is_acknowledged(self) -> bool:
        return matches(self.acknowledgement_state, AcknowledgementStateV2.ACKNOWLEDGED)

    def latest_expiry_time(self) -> datetime | None:
        """Latest expiry across all line items."""
        expiries = [
            expiry
            for expiry in (item.expiry_datetime() for item in self.line_items or ())
            if expiry is not None
        ]
        return max(expiries, default=None)


class RevocationKind(str, Enum):
    """Refund applied when revoking a v2 subscription."""

    PRORATED_REFUND = "proratedRefund"
    FULL_REFUND = "fullRefund"


@dataclass(frozen=True)
class RevocationContext:
    """Request body for purchases.subscriptionsv2.revoke."""

    kind: RevocationKind = RevocationKind.PRORATED_REFUND

    def to_body(self) -> dict[str, Any]:
        return {"revocationContext": {self.kind.value: {}}}
