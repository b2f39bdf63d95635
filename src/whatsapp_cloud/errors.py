"""Exception hierarchy for the WhatsApp Cloud client and webhook receiver."""

from typing import Optional

import httpx


class WhatsappError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(WhatsappError, ValueError):
    """Raised at construction time for invalid configuration."""


class RequestTimeoutError(WhatsappError, TimeoutError):
    """Raised when a single request attempt exceeds its timeout."""

    def __init__(self, timeout_ms: int):
        self.timeout_ms = timeout_ms
        super().__init__(f"Request timed out after {timeout_ms}ms")


class TransportError(WhatsappError):
    """Raised for non-2xx responses and network-level failures.

    Attributes:
        status_code: HTTP status of the response, or None for network failures.
        response: The ``httpx.Response`` when one was received.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response: Optional[httpx.Response] = None,
    ):
        self.status_code = status_code
        self.response = response
        super().__init__(message)


class SignatureVerificationError(WhatsappError):
    """Raised when the X-Hub-Signature-256 header does not match the body."""


class MalformedPayloadError(WhatsappError):
    """Raised when a webhook body cannot be decoded as JSON."""
