"""
Real-time developer notification decoding.

Google delivers RTDN through Cloud Pub/Sub. A push subscription POSTs an
envelope whose message.data holds the base64-encoded DeveloperNotification.
"""

import base64
import binascii
import json
from typing import Any

from structlog import get_logger

from playbilling.exceptions import NotificationError
from playbilling.models.notifications import DeveloperNotification

logger = get_logger(__name__)


def parse_pubsub_push(
    payload: bytes | str,
    expected_package_name: str | None = None,
) -> DeveloperNotification:
    """
    Decode a Pub/Sub push request body into a DeveloperNotification.

    Args:
        payload: Raw push body (JSON from Pub/Sub)
        expected_package_name: Reject notifications for any other package

    Returns:
        Parsed notification

    Raises:
        NotificationError: If the envelope cannot be decoded
        MalformedResponseError: If the decoded notification is not a JSON object
    """
    try:
        envelope = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        logger.error("play_notification_invalid_json", error=str(exc))
        raise NotificationError("Invalid JSON payload") from exc

    message = envelope.get("message") if isinstance(envelope, dict) else None
    if not isinstance(message, dict):
        raise NotificationError("No message in push payload")

    message_data = message.get("data")
    if not message_data:
        raise NotificationError("No message data in push payload")

    notification = DeveloperNotification.from_array(_decode_data(message_data))

    logger.info(
        "play_notification_decoded",
        message_id=message.get("messageId") or message.get("message_id"),
        version=notification.version,
        package_name=notification.package_name,
        kind=notification.notification_kind().value,
    )

    if expected_package_name is not None and notification.package_name != expected_package_name:
        logger.warning(
            "play_notification_package_mismatch",
            expected=expected_package_name,
            received=notification.package_name,
        )
        raise NotificationError(
            f"Notification for unexpected package: {notification.package_name}"
        )

    return notification


def _decode_data(message_data: str) -> Any:
    try:
        decoded_data = base64.b64decode(message_data, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, TypeError, ValueError) as exc:
        logger.error("play_notification_invalid_base64", error=str(exc))
        raise NotificationError("Message data is not valid base64") from exc

    try:
        return json.loads(decoded_data)
    except json.JSONDecodeError as exc:
        logger.error("play_notification_invalid_json", error=str(exc))
        raise NotificationError("Message data is not valid JSON") from exc
