"""
Typed value objects for Play Developer API responses.
"""

from playbilling.models.base import Entity, FieldSpec, RawResponse, nested, nested_list, scalar
from playbilling.models.common import EmptyResponse, Money
from playbilling.models.notifications import DeveloperNotification
from playbilling.models.orders import Order
from playbilling.models.products import ProductPurchase
from playbilling.models.subscriptions import (
    SubscriptionDeferralInfo,
    SubscriptionPurchase,
    SubscriptionPurchasesDeferResponse,
)
from playbilling.models.subscriptions_v2 import (
    RevocationContext,
    RevocationKind,
    SubscriptionPurchaseLineItem,
    SubscriptionPurchaseV2,
)
from playbilling.models.voided import VoidedPurchase, VoidedPurchasesListResponse

__all__ = [
    "DeveloperNotification",
    "EmptyResponse",
    "Entity",
    "FieldSpec",
    "Money",
    "Order",
    "ProductPurchase",
    "RawResponse",
    "RevocationContext",
    "RevocationKind",
    "SubscriptionDeferralInfo",
    "SubscriptionPurchase",
    "SubscriptionPurchaseLineItem",
    "SubscriptionPurchaseV2",
    "SubscriptionPurchasesDeferResponse",
    "VoidedPurchase",
    "VoidedPurchasesListResponse",
    "nested",
    "nested_list",
    "scalar",
]
