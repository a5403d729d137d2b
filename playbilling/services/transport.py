"""
Play Developer API transport.

Builds the androidpublisher v3 discovery client and executes prepared
requests, turning every outcome into either a decoded JSON mapping or a
typed exception.
"""

from collections.abc import Mapping
from typing import Any

import google.auth.exceptions
import google_auth_httplib2
import httplib2
from google.oauth2 import service_account
from googleapiclient.discovery import Resource, build
from googleapiclient.errors import HttpError
from googleapiclient.http import HttpRequest
from structlog import get_logger

from playbilling.config import ANDROID_PUBLISHER_SCOPE, Settings, get_settings
from playbilling.exceptions import MalformedResponseError, TransportError

logger = get_logger(__name__)


def load_credentials(settings: Settings) -> service_account.Credentials:
    """
    Load service account credentials from configuration.

    PLAY_SERVICE_ACCOUNT_JSON wins over PLAY_SERVICE_ACCOUNT_FILE when both are set.

    Raises:
        ConfigurationError: If no credentials are configured or they cannot be decoded
    """
    settings.require_credentials()

    if settings.service_account_json:
        return service_account.Credentials.from_service_account_info(  # type: ignore[no-untyped-call]
            settings.service_account_info(),
            scopes=[ANDROID_PUBLISHER_SCOPE],
        )

    return service_account.Credentials.from_service_account_file(  # type: ignore[no-untyped-call]
        settings.service_account_file,
        scopes=[ANDROID_PUBLISHER_SCOPE],
    )


def build_android_publisher(
    settings: Settings | None = None,
    credentials: Any | None = None,
) -> Resource:
    """
    Build the androidpublisher v3 API client.

    Args:
        settings: SDK settings (defaults to environment)
        credentials: Pre-built google.auth credentials, skips service account loading

    Returns:
        Discovery-based androidpublisher resource
    """
    settings = settings or get_settings()
    if credentials is None:
        credentials = load_credentials(settings)

    http = google_auth_httplib2.AuthorizedHttp(
        credentials,
        http=httplib2.Http(timeout=settings.api_timeout_seconds),
    )
    service = build(
        "androidpublisher",
        "v3",
        http=http,
        cache_discovery=settings.cache_discovery,
    )

    logger.info(
        "android_publisher_client_built",
        timeout=settings.api_timeout_seconds,
    )
    return service


def execute_request(request: HttpRequest, operation: str, **context: Any) -> dict[str, Any]:
    """
    Execute a prepared googleapiclient request and return the decoded body.

    Args:
        request: Request built from the androidpublisher resource
        operation: Short name used in log events (e.g. "subscriptions_v2.get")
        context: Extra fields bound to every log event

    Returns:
        The decoded JSON body; {} for endpoints with an empty body

    Raises:
        TransportError: If the API returns an error or cannot be reached
        MalformedResponseError: If the body is not a JSON object
    """
    log = logger.bind(operation=operation, **context)
    log.debug("play_api_request_started")

    try:
        body = request.execute()

    except HttpError as exc:
        error_content = exc.content.decode("utf-8", errors="replace") if exc.content else str(exc)
        log.error(
            "play_api_request_failed",
            status=exc.resp.status,
            error=error_content,
        )
        raise TransportError(
            _describe_status(exc.resp.status, error_content),
            status=exc.resp.status,
            content=error_content,
        ) from exc

    except (httplib2.HttpLib2Error, OSError, google.auth.exceptions.GoogleAuthError) as exc:
        log.error("play_api_request_unreachable", error=str(exc))
        raise TransportError(f"Request failed: {exc}") from exc

    if body is None or body == "":
        body = {}

    if not isinstance(body, Mapping):
        log.error("play_api_response_malformed", body_type=type(body).__name__)
        raise MalformedResponseError(operation, body)

    log.info("play_api_request_succeeded")
    return dict(body)


def _describe_status(status: int, error_content: str) -> str:
    if status == 404:
        return "Purchase not found or invalid token"
    if status == 410:
        return "Purchase token expired"
    return error_content
