"""
Tests for the androidpublisher transport layer.
"""

import json
from unittest.mock import MagicMock, patch

import httplib2
import pytest
from googleapiclient.errors import HttpError

from playbilling.config import ConfigurationError, Settings
from playbilling.exceptions import MalformedResponseError, TransportError
from playbilling.services.transport import (
    build_android_publisher,
    execute_request,
    load_credentials,
)


def _request(body=None, error=None) -> MagicMock:
    request = MagicMock()
    if error is not None:
        request.execute.side_effect = error
    else:
        request.execute.return_value = body
    return request


def _http_error(status: int, content: bytes = b"") -> HttpError:
    return HttpError(resp=httplib2.Response({"status": status}), content=content)


class TestExecuteRequest:
    """Tests for execute_request."""

    def test_returns_body(self):
        body = {"subscriptionState": "SUBSCRIPTION_STATE_ACTIVE"}
        assert execute_request(_request(body), "subscriptions_v2.get") == body

    @pytest.mark.parametrize("empty", [None, "", {}])
    def test_empty_body(self, empty):
        assert execute_request(_request(empty), "products.acknowledge") == {}

    @pytest.mark.parametrize("body", [["a"], "text", 42])
    def test_non_mapping_body(self, body):
        with pytest.raises(MalformedResponseError) as exc_info:
            execute_request(_request(body), "orders.get")
        assert exc_info.value.entity == "orders.get"

    def test_not_found(self):
        content = json.dumps({"error": {"code": 404, "message": "not found"}}).encode()
        with pytest.raises(TransportError) as exc_info:
            execute_request(_request(error=_http_error(404, content)), "products.get")

        exc = exc_info.value
        assert exc.status == 404
        assert exc.is_not_found is True
        assert "not found" in exc.content
        assert "Purchase not found or invalid token" in str(exc)
        assert isinstance(exc.__cause__, HttpError)

    def test_gone(self):
        with pytest.raises(TransportError) as exc_info:
            execute_request(_request(error=_http_error(410, b"gone")), "subscriptions.get")

        assert exc_info.value.is_gone is True
        assert "Purchase token expired" in str(exc_info.value)

    def test_other_status_keeps_body(self):
        with pytest.raises(TransportError) as exc_info:
            execute_request(_request(error=_http_error(500, b"backend error")), "orders.refund")

        assert exc_info.value.status == 500
        assert exc_info.value.message == "backend error"
        assert exc_info.value.is_not_found is False

    def test_undecodable_error_body(self):
        with pytest.raises(TransportError) as exc_info:
            execute_request(_request(error=_http_error(500, b"\xff\xfe")), "orders.get")

        assert exc_info.value.status == 500
        assert "\ufffd" in exc_info.value.content

    def test_network_failure(self):
        with pytest.raises(TransportError) as exc_info:
            execute_request(_request(error=TimeoutError("timed out")), "orders.get")

        assert exc_info.value.status is None
        assert "timed out" in str(exc_info.value)

    def test_httplib2_failure(self):
        error = httplib2.ServerNotFoundError("Unable to find the server")
        with pytest.raises(TransportError):
            execute_request(_request(error=error), "orders.get")

    def test_unexpected_errors_propagate(self):
        with pytest.raises(KeyError):
            execute_request(_request(error=KeyError("boom")), "orders.get")


class TestLoadCredentials:
    """Tests for service account loading."""

    def test_missing_credentials(self):
        settings = Settings(_env_file=None, service_account_file="", service_account_json="")
        with pytest.raises(ConfigurationError, match="PLAY_SERVICE_ACCOUNT"):
            load_credentials(settings)

    def test_inline_json(self, settings):
        with patch("playbilling.services.transport.service_account.Credentials") as credentials:
            load_credentials(settings)

        info = credentials.from_service_account_info.call_args.args[0]
        assert info["type"] == "service_account"
        assert credentials.from_service_account_info.call_args.kwargs["scopes"] == [
            "https://www.googleapis.com/auth/androidpublisher"
        ]

    def test_file(self):
        settings = Settings(
            _env_file=None, service_account_file="/secrets/sa.json", service_account_json=""
        )
        with patch("playbilling.services.transport.service_account.Credentials") as credentials:
            load_credentials(settings)

        credentials.from_service_account_file.assert_called_once_with(
            "/secrets/sa.json",
            scopes=["https://www.googleapis.com/auth/androidpublisher"],
        )


class TestBuildAndroidPublisher:
    def test_builds_v3_with_authorized_http(self, settings):
        credentials = MagicMock()
        with (
            patch("playbilling.services.transport.build") as build,
            patch("playbilling.services.transport.google_auth_httplib2.AuthorizedHttp") as http,
        ):
            service = build_android_publisher(settings, credentials=credentials)

        assert service is build.return_value
        assert http.call_args.args[0] is credentials
        build.assert_called_once_with(
            "androidpublisher",
            "v3",
            http=http.return_value,
            cache_discovery=False,
        )

    def test_loads_credentials_when_not_given(self, settings):
        with (
            patch("playbilling.services.transport.build"),
            patch("playbilling.services.transport.google_auth_httplib2.AuthorizedHttp"),
            patch("playbilling.services.transport.load_credentials") as load,
        ):
            build_android_publisher(settings)

        load.assert_called_once_with(settings)
