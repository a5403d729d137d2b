"""
Exception Classes - Strongly typed exception hierarchy.

All exceptions carry typed attributes alongside a formatted message.
"""

from typing import Any


class PlayBillingError(Exception):
    """Base exception for all Play billing SDK errors."""

    pass


class MalformedResponseError(PlayBillingError):
    """Raised when a response body cannot be cast into its entity type."""

    def __init__(
        self,
        entity: str,
        value: Any,
        path: str | None = None,
        expected: str = "a mapping",
    ) -> None:
        self.entity = entity
        self.value = value
        self.path = path
        self.expected = expected
        self.value_type = type(value).__name__
        location = f" at '{path}'" if path else ""
        super().__init__(
            f"Malformed response for {entity}{location}: "
            f"expected {expected}, got {self.value_type}"
        )


class TransportError(PlayBillingError):
    """Raised when the Play Developer API request itself fails."""

    def __init__(
        self,
        message: str,
        status: int | None = None,
        content: str | None = None,
    ) -> None:
        self.message = message
        self.status = status
        self.content = content
        prefix = f"HTTP {status}: " if status is not None else ""
        super().__init__(f"Play Developer API error: {prefix}{message}")

    @property
    def is_not_found(self) -> bool:
        """True when the purchase or token does not exist."""
        return self.status == 404

    @property
    def is_gone(self) -> bool:
        """True when the purchase token has expired (HTTP 410)."""
        return self.status == 410


class NotificationError(PlayBillingError):
    """Raised when a real-time developer notification cannot be decoded."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"Notification error: {message}")
