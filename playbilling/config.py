"""
SDK Configuration - Pydantic Settings for type-safe config.

All configuration is strongly typed and read from PLAY_* environment variables.
FAIL FAST - Invalid values are rejected when settings are loaded.
"""

import base64
import binascii
import json
import sys
from functools import lru_cache
from typing import Any

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ANDROID_PUBLISHER_SCOPE = "https://www.googleapis.com/auth/androidpublisher"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_LOG_FORMATS = ("json", "console")


class ConfigurationError(Exception):
    """Raised when critical configuration is missing or invalid."""

    pass


class Settings(BaseSettings):
    """SDK settings loaded from environment variables."""

    # Google Play
    package_name: str = ""  # e.g., "com.example.app"

    # Service account - path to the JSON key, or the JSON itself (raw or base64)
    service_account_file: str = ""
    service_account_json: str = ""

    # Transport
    api_timeout_seconds: float = 30.0
    cache_discovery: bool = False

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"  # json or console
    service_name: str = "playbilling"
    sdk_version: str = "0.1.0"

    model_config = SettingsConfigDict(
        env_prefix="PLAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode="after")
    def validate_critical_config(self) -> "Settings":
        """
        FAIL FAST: Validate configuration as soon as it is loaded.

        A typo in the logging setup should not surface as a crash deep
        inside a request.
        """
        errors: list[str] = []

        if self.log_level.upper() not in _LOG_LEVELS:
            errors.append(f"PLAY_LOG_LEVEL must be one of {_LOG_LEVELS}, got: {self.log_level}")

        if self.log_format not in _LOG_FORMATS:
            errors.append(f"PLAY_LOG_FORMAT must be one of {_LOG_FORMATS}, got: {self.log_format}")

        if self.api_timeout_seconds <= 0:
            errors.append("PLAY_API_TIMEOUT_SECONDS must be positive")

        if errors:
            error_msg = "\n".join(
                [
                    "",
                    "=" * 60,
                    "PLAYBILLING CONFIGURATION ERROR",
                    "=" * 60,
                    *[f"  ✗ {e}" for e in errors],
                    "=" * 60,
                    "",
                ]
            )
            print(error_msg, file=sys.stderr)
            raise ConfigurationError(error_msg)

        return self

    @property
    def has_credentials(self) -> bool:
        """Whether any service account source is configured."""
        return bool(self.service_account_file or self.service_account_json)

    def require_credentials(self) -> None:
        """Raise ConfigurationError unless a service account source is set."""
        if not self.has_credentials:
            raise ConfigurationError(
                "PLAY_SERVICE_ACCOUNT_FILE or PLAY_SERVICE_ACCOUNT_JSON is required"
            )

    def service_account_info(self) -> dict[str, Any]:
        """
        Decode PLAY_SERVICE_ACCOUNT_JSON.

        Accepts raw JSON or base64 encoded JSON.

        Raises:
            ConfigurationError: If the value is neither
        """
        raw = self.service_account_json.strip()
        if not raw.startswith("{"):
            try:
                raw = base64.b64decode(raw, validate=True).decode("utf-8")
            except (binascii.Error, UnicodeDecodeError) as exc:
                raise ConfigurationError("PLAY_SERVICE_ACCOUNT_JSON is not valid base64") from exc

        try:
            info = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ConfigurationError("PLAY_SERVICE_ACCOUNT_JSON is not valid JSON") from exc

        if not isinstance(info, dict):
            raise ConfigurationError("PLAY_SERVICE_ACCOUNT_JSON must be a JSON object")
        return info


@lru_cache
def get_settings() -> Settings:
    """Get SDK settings instance."""
    return Settings()
