"""
Pytest Configuration and Centralized Fixtures.

Provides reusable mocks and payloads for testing:
- androidpublisher resource with canned responses
- Sample API response bodies for every endpoint
- Settings instances independent of the environment
"""

import base64
import json
import os
from typing import Any
from unittest.mock import MagicMock

import pytest

# Keep the developer's environment out of the tests
os.environ.setdefault("PLAY_PACKAGE_NAME", "com.example.app")
os.environ.setdefault("PLAY_LOG_FORMAT", "console")

from playbilling.config import Settings

PACKAGE_NAME = "com.example.app"
PURCHASE_TOKEN = "purchase-token-1234567890"

# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture
def settings() -> Settings:
    """Settings with inline service account JSON."""
    return Settings(
        package_name=PACKAGE_NAME,
        service_account_json=json.dumps(
            {"type": "service_account", "client_email": "sdk@example.iam.gserviceaccount.com"}
        ),
        _env_file=None,
    )


# ============================================================================
# androidpublisher Resource Fixtures
# ============================================================================


@pytest.fixture
def service() -> MagicMock:
    """Mock androidpublisher resource; every request executes to {}."""
    resource = MagicMock()
    for collection in ("products", "subscriptions", "subscriptionsv2", "voidedpurchases"):
        methods = getattr(resource.purchases.return_value, collection).return_value
        for method in ("get", "acknowledge", "consume", "cancel", "defer", "refund", "revoke", "list"):
            getattr(methods, method).return_value.execute.return_value = {}
    for method in ("get", "refund"):
        getattr(resource.orders.return_value, method).return_value.execute.return_value = {}
    return resource


def respond(method: MagicMock, body: Any) -> MagicMock:
    """Make a resource method's request execute to ``body``."""
    method.return_value.execute.return_value = body
    return method


def pubsub_push(notification: Any, message_id: str = "136969346945") -> bytes:
    """Wrap a notification the way a Pub/Sub push subscription delivers it."""
    data = base64.b64encode(json.dumps(notification).encode()).decode()
    envelope = {
        "message": {"data": data, "messageId": message_id, "attributes": {}},
        "subscription": "projects/example/subscriptions/play-rtdn",
    }
    return json.dumps(envelope).encode()


# ============================================================================
# Response Payload Fixtures
# ============================================================================


@pytest.fixture
def product_purchase_body() -> dict[str, Any]:
    return {
        "kind": "androidpublisher#productPurchase",
        "purchaseTimeMillis": "1700000000000",
        "purchaseState": 0,
        "consumptionState": 0,
        "developerPayload": "",
        "orderId": "GPA.1234-5678-9012-34567",
        "purchaseType": 0,
        "acknowledgementState": 1,
        "productId": "credits_100",
        "quantity": 1,
        "regionCode": "US",
    }


@pytest.fixture
def subscription_v1_body() -> dict[str, Any]:
    return {
        "kind": "androidpublisher#subscriptionPurchase",
        "startTimeMillis": "1700000000000",
        "expiryTimeMillis": "1702592000000",
        "autoRenewing": True,
        "priceCurrencyCode": "USD",
        "priceAmountMicros": "4990000",
        "introductoryPriceInfo": {
            "introductoryPriceCurrencyCode": "USD",
            "introductoryPriceAmountMicros": "990000",
            "introductoryPricePeriod": "P1W",
            "introductoryPriceCycles": 1,
        },
        "countryCode": "US",
        "paymentState": 1,
        "orderId": "GPA.3333-4444-5555-66666",
        "acknowledgementState": 0,
        "priceChange": {"newPrice": {"priceMicros": "5990000", "currency": "USD"}, "state": 0},
    }


@pytest.fixture
def subscription_v2_body() -> dict[str, Any]:
    return {
        "kind": "androidpublisher#subscriptionPurchaseV2",
        "regionCode": "US",
        "startTime": "2023-11-14T22:13:20.123Z",
        "subscriptionState": "SUBSCRIPTION_STATE_ACTIVE",
        "latestOrderId": "GPA.1111-2222-3333-44444",
        "acknowledgementState": "ACKNOWLEDGEMENT_STATE_ACKNOWLEDGED",
        "externalAccountIdentifiers": {"obfuscatedExternalAccountId": "user-42"},
        "lineItems": [
            {
                "productId": "premium_monthly",
                "expiryTime": "2024-01-01T00:00:00Z",
                "autoRenewingPlan": {
                    "autoRenewEnabled": True,
                    "recurringPrice": {"currencyCode": "USD", "units": "4", "nanos": 990000000},
                    "priceChangeDetails": {
                        "newPrice": {"currencyCode": "USD", "units": "5", "nanos": 990000000},
                        "priceChangeMode": "PRICE_INCREASE",
                        "priceChangeState": "OUTSTANDING",
                        "expectedNewPriceChargeTime": "2024-02-01T00:00:00Z",
                    },
                },
                "offerDetails": {"basePlanId": "monthly", "offerTags": ["intro"]},
                "latestSuccessfulOrderId": "GPA.1111-2222-3333-44444",
            },
            {
                "productId": "addon_yearly",
                "expiryTime": "2024-06-01T00:00:00.123456789Z",
                "prepaidPlan": {"allowExtendAfterTime": "2024-05-01T00:00:00Z"},
            },
        ],
    }


@pytest.fixture
def voided_list_body() -> dict[str, Any]:
    return {
        "pageInfo": {"totalResults": 2, "resultPerPage": 2, "startIndex": 0},
        "tokenPagination": {"nextPageToken": "next-page"},
        "voidedPurchases": [
            {
                "kind": "androidpublisher#voidedPurchase",
                "purchaseToken": "token-a",
                "purchaseTimeMillis": "1700000000000",
                "voidedTimeMillis": "1700086400000",
                "orderId": "GPA.0000-0000-0000-00001",
                "voidedSource": 0,
                "voidedReason": 1,
            },
            {
                "purchaseToken": "token-b",
                "voidedTimeMillis": "1700172800000",
                "orderId": "GPA.0000-0000-0000-00002",
                "voidedSource": 2,
                "voidedReason": 7,
                "voidedQuantity": 1,
            },
        ],
    }


@pytest.fixture
def order_body() -> dict[str, Any]:
    return {
        "orderId": "GPA.1234-5678-9012-34567",
        "purchaseToken": PURCHASE_TOKEN,
        "state": "PROCESSED",
        "createTime": "2024-03-01T12:00:00Z",
        "buyerAddress": {"buyerCountry": "US", "buyerState": "CA"},
        "total": {"currencyCode": "USD", "units": "4", "nanos": 990000000},
        "tax": {"currencyCode": "USD", "units": "0", "nanos": 450000000},
        "orderHistory": {"processedEvent": {"eventTime": "2024-03-01T12:00:01Z"}},
        "lineItems": [
            {
                "productId": "credits_100",
                "productTitle": "100 Credits",
                "total": {"currencyCode": "USD", "units": "4", "nanos": 990000000},
                "oneTimePurchaseDetails": {"quantity": 1},
            }
        ],
    }
