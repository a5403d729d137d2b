"""
Play Developer API endpoint clients.

Each client wraps one androidpublisher resource and returns typed entities.
Requests go through execute_request(), so every method raises
TransportError or MalformedResponseError and never returns a partial object.
"""

from typing import Any

from googleapiclient.discovery import Resource
from structlog import get_logger

from playbilling.config import Settings, get_settings
from playbilling.models.common import EmptyResponse
from playbilling.models.orders import Order
from playbilling.models.products import ProductPurchase
from playbilling.models.subscriptions import (
    SubscriptionDeferralInfo,
    SubscriptionPurchase,
    SubscriptionPurchasesDeferResponse,
)
from playbilling.models.subscriptions_v2 import RevocationContext, SubscriptionPurchaseV2
from playbilling.models.voided import VoidedPurchasesListResponse
from playbilling.services.transport import build_android_publisher, execute_request

logger = get_logger(__name__)


class ProductClient:
    """One-time product purchase operations for a single purchase token."""

    def __init__(self, service: Resource, package_name: str, product_id: str, token: str) -> None:
        self.service = service
        self.package_name = package_name
        self.product_id = product_id
        self.token = token

    def _params(self) -> dict[str, str]:
        return {
            "packageName": self.package_name,
            "productId": self.product_id,
            "token": self.token,
        }

    def get(self) -> ProductPurchase:
        """Check the purchase and consumption status of an inapp item."""
        request = self.service.purchases().products().get(**self._params())
        body = execute_request(request, "products.get", product_id=self.product_id)
        return ProductPurchase.from_array(body)

    def acknowledge(self, developer_payload: str | None = None) -> EmptyResponse:
        """Acknowledge a purchase (required within 3 days)."""
        body: dict[str, Any] = {}
        if developer_payload is not None:
            body["developerPayload"] = developer_payload
        request = self.service.purchases().products().acknowledge(**self._params(), body=body)
        return EmptyResponse.from_array(
            execute_request(request, "products.acknowledge", product_id=self.product_id)
        )

    def consume(self) -> EmptyResponse:
        """Consume a purchase so it can be bought again."""
        request = self.service.purchases().products().consume(**self._params())
        return EmptyResponse.from_array(
            execute_request(request, "products.consume", product_id=self.product_id)
        )


class SubscriptionClient:
    """Subscription operations through the v1 API."""

    def __init__(
        self, service: Resource, package_name: str, subscription_id: str, token: str
    ) -> None:
        self.service = service
        self.package_name = package_name
        self.subscription_id = subscription_id
        self.token = token

    def _params(self) -> dict[str, str]:
        return {
            "packageName": self.package_name,
            "subscriptionId": self.subscription_id,
            "token": self.token,
        }

    def _execute(self, request: Any, operation: str) -> dict[str, Any]:
        return execute_request(request, operation, subscription_id=self.subscription_id)

    def get(self) -> SubscriptionPurchase:
        """Check whether a user's subscription purchase is valid and return its expiry time."""
        request = self.service.purchases().subscriptions().get(**self._params())
        return SubscriptionPurchase.from_array(self._execute(request, "subscriptions.get"))

    def acknowledge(self, developer_payload: str | None = None) -> EmptyResponse:
        body: dict[str, Any] = {}
        if developer_payload is not None:
            body["developerPayload"] = developer_payload
        request = self.service.purchases().subscriptions().acknowledge(**self._params(), body=body)
        return EmptyResponse.from_array(self._execute(request, "subscriptions.acknowledge"))

    def cancel(self) -> EmptyResponse:
        """Cancel the subscription. The user keeps access until the expiry time."""
        request = self.service.purchases().subscriptions().cancel(**self._params())
        return EmptyResponse.from_array(self._execute(request, "subscriptions.cancel"))

    def defer(self, deferral_info: SubscriptionDeferralInfo) -> SubscriptionPurchasesDeferResponse:
        """Defer the next billing date to a later expiry time."""
        request = self.service.purchases().subscriptions().defer(
            **self._params(), body=deferral_info.to_body()
        )
        return SubscriptionPurchasesDeferResponse.from_array(
            self._execute(request, "subscriptions.defer")
        )

    def refund(self) -> EmptyResponse:
        """Refund the current payment; the subscription keeps renewing."""
        request = self.service.purchases().subscriptions().refund(**self._params())
        return EmptyResponse.from_array(self._execute(request, "subscriptions.refund"))

    def revoke(self) -> EmptyResponse:
        """Refund and immediately terminate the subscription."""
        request = self.service.purchases().subscriptions().revoke(**self._params())
        return EmptyResponse.from_array(self._execute(request, "subscriptions.revoke"))


class SubscriptionV2Client:
    """Subscription operations through the v2 API."""

    def __init__(self, service: Resource, package_name: str, token: str) -> None:
        self.service = service
        self.package_name = package_name
        self.token = token

    def get(self) -> SubscriptionPurchaseV2:
        request = self.service.purchases().subscriptionsv2().get(
            packageName=self.package_name,
            token=self.token,
        )
        return SubscriptionPurchaseV2.from_array(execute_request(request, "subscriptions_v2.get"))

    def revoke(self, revocation_context: RevocationContext | None = None) -> EmptyResponse:
        """Revoke the subscription, refunding per the revocation context (prorated by default)."""
        revocation_context = revocation_context or RevocationContext()
        request = self.service.purchases().subscriptionsv2().revoke(
            packageName=self.package_name,
            token=self.token,
            body=revocation_context.to_body(),
        )
        return EmptyResponse.from_array(
            execute_request(
                request, "subscriptions_v2.revoke", revocation=revocation_context.kind.value
            )
        )


class VoidedPurchaseClient:
    """Lists purchases that were canceled, refunded or charged back."""

    def __init__(self, service: Resource, package_name: str) -> None:
        self.service = service
        self.package_name = package_name

    def list(
        self,
        start_time: int | None = None,
        end_time: int | None = None,
        max_results: int | None = None,
        token: str | None = None,
        type: int | None = None,
        include_quantity_based_partial_refund: bool | None = None,
    ) -> VoidedPurchasesListResponse:
        """
        List voided purchases.

        Args:
            start_time: Oldest voided time to return, epoch millis (max 30 days back)
            end_time: Newest voided time to return, epoch millis
            max_results: Page size
            token: Continuation token from a previous page
            type: 0 for in-app only, 1 to include subscriptions
            include_quantity_based_partial_refund: Include partial refunds

        Returns:
            One page of voided purchases
        """
        optional = {
            "startTime": start_time,
            "endTime": end_time,
            "maxResults": max_results,
            "token": token,
            "type": type,
            "includeQuantityBasedPartialRefund": include_quantity_based_partial_refund,
        }
        params = {key: value for key, value in optional.items() if value is not None}
        request = self.service.purchases().voidedpurchases().list(
            packageName=self.package_name, **params
        )
        return VoidedPurchasesListResponse.from_array(
            execute_request(request, "voided_purchases.list", has_token=token is not None)
        )


class OrderClient:
    """Order lookups and refunds."""

    def __init__(self, service: Resource, package_name: str) -> None:
        self.service = service
        self.package_name = package_name

    def get(self, order_id: str) -> Order:
        request = self.service.orders().get(packageName=self.package_name, orderId=order_id)
        return Order.from_array(execute_request(request, "orders.get", order_id=order_id))

    def refund(self, order_id: str, revoke: bool = False) -> EmptyResponse:
        """
        Refund a user's subscription or in-app purchase order.

        Args:
            order_id: The order ID provided to the user when the purchase was made
            revoke: Also revoke access to the item (subscriptions end immediately)
        """
        request = self.service.orders().refund(
            packageName=self.package_name,
            orderId=order_id,
            revoke=revoke,
        )
        return EmptyResponse.from_array(
            execute_request(request, "orders.refund", order_id=order_id, revoke=revoke)
        )


class PlayDeveloperClient:
    """
    Entry point bound to one application package.

    Usage:
        client = PlayDeveloperClient.from_settings()
        purchase = client.subscriptions_v2(purchase_token).get()
        if purchase.is_active():
            ...
    """

    def __init__(self, service: Resource, package_name: str) -> None:
        if not package_name:
            raise ValueError("Package name required")
        self.service = service
        self.package_name = package_name

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "PlayDeveloperClient":
        """Build the API client from PLAY_* configuration."""
        settings = settings or get_settings()
        service = build_android_publisher(settings)
        logger.info("play_developer_client_initialized", package_name=settings.package_name)
        return cls(service, settings.package_name)

    def products(self, product_id: str, token: str) -> ProductClient:
        return ProductClient(self.service, self.package_name, product_id, token)

    def subscriptions(self, subscription_id: str, token: str) -> SubscriptionClient:
        return SubscriptionClient(self.service, self.package_name, subscription_id, token)

    def subscriptions_v2(self, token: str) -> SubscriptionV2Client:
        return SubscriptionV2Client(self.service, self.package_name, token)

    def voided_purchases(self) -> VoidedPurchaseClient:
        return VoidedPurchaseClient(self.service, self.package_name)

    def orders(self) -> OrderClient:
        return OrderClient(self.service, self.package_name)
