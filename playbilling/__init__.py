"""
playbilling - typed client for the Google Play Developer API.
"""

from playbilling.config import ConfigurationError, Settings, get_settings
from playbilling.exceptions import (
    MalformedResponseError,
    NotificationError,
    PlayBillingError,
    TransportError,
)
from playbilling.services.clients import PlayDeveloperClient
from playbilling.services.notifications import parse_pubsub_push

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "MalformedResponseError",
    "NotificationError",
    "PlayBillingError",
    "PlayDeveloperClient",
    "Settings",
    "TransportError",
    "get_settings",
    "parse_pubsub_push",
]
