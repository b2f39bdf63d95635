"""Core module for the WhatsApp Cloud integration.

Contains configuration loading and logging setup.
"""

from .settings import (
    ClientSettings, WebhookSettings, parse_api_version,
    GRAPH_API_URL, DEFAULT_API_VERSION,
)
from .logging_config import setup_logging

__all__ = [
    # Settings
    "ClientSettings",
    "WebhookSettings",
    "parse_api_version",
    "GRAPH_API_URL",
    "DEFAULT_API_VERSION",

    # Logging
    "setup_logging",
]
