"""Settings Management Module.

Loads client and webhook configuration from the environment
(``WHATSAPP_*`` variables) or a ``.env`` file, and validates the
Graph API version.
"""

import re
from typing import Optional, Union

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..errors import ConfigurationError

# Constants
GRAPH_API_URL = "https://graph.facebook.com"
DEFAULT_API_VERSION = "v17.0"

_VERSION_PATTERN = re.compile(r"^v(\d+)\.0$")


def parse_api_version(version: Union[str, int]) -> str:
    """Normalize a Graph API version to the ``v{n}.0`` form.

    Args:
        version: An integer (``17``), a bare numeric string (``"17"``)
            or an already normalized string (``"v17.0"``).

    Returns:
        The version as ``v{n}.0``.

    Raises:
        ConfigurationError: If the string does not match either form, or
            the value is of any other type.
    """
    if isinstance(version, bool) or not isinstance(version, (int, str)):
        raise ConfigurationError(
            f"Unsupported API version type: {type(version).__name__}."
        )

    if isinstance(version, int):
        numeric_version = version
    else:
        match = _VERSION_PATTERN.match(version)
        if match:
            numeric_version = int(match.group(1))
        elif version.isdigit():
            numeric_version = int(version)
        else:
            raise ConfigurationError(f"Invalid API version format: {version}.")

    return f"v{numeric_version}.0"


class ClientSettings(BaseSettings):
    """Outbound client configuration."""

    access_token: str
    phone_number_id: str
    api_version: str = DEFAULT_API_VERSION
    base_url: str = GRAPH_API_URL

    # Resilience
    request_timeout_ms: int = 3000
    request_retries: int = 0
    request_retry_delay_ms: int = 0

    model_config = SettingsConfigDict(
        env_prefix="WHATSAPP_", env_file=".env", extra="ignore"
    )

    @field_validator("api_version", mode="before")
    @classmethod
    def _normalize_version(cls, value):
        return parse_api_version(value)

    @field_validator("request_retries", "request_retry_delay_ms")
    @classmethod
    def _non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("must be >= 0")
        return value


class WebhookSettings(BaseSettings):
    """Inbound webhook configuration.

    Leaving ``app_secret`` unset disables payload signature verification.
    """

    verify_token: str
    app_secret: Optional[str] = None
    require_signature: bool = False
    webhook_path: str = "/webhook"

    model_config = SettingsConfigDict(
        env_prefix="WHATSAPP_", env_file=".env", extra="ignore"
    )
