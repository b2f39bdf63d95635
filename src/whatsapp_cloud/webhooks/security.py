"""Webhook security utilities.

Provides HMAC-SHA256 signature generation and verification for the
``X-Hub-Signature-256`` header sent with every webhook delivery.

Signatures must be computed over the raw request body. Re-serializing a
parsed JSON object changes key order and whitespace, and with them the
digest.
"""

import hashlib
import hmac
import logging
from typing import Optional, Union

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-Hub-Signature-256"
SIGNATURE_PREFIX = "sha256="

RawBody = Union[bytes, str]


def _to_bytes(raw_body: RawBody) -> bytes:
    return raw_body.encode("utf-8") if isinstance(raw_body, str) else raw_body


def compute_digest(raw_body: RawBody, secret: str) -> str:
    """Hex HMAC-SHA256 digest of ``raw_body`` keyed by ``secret``."""
    return hmac.new(
        secret.encode("utf-8"),
        _to_bytes(raw_body),
        hashlib.sha256,
    ).hexdigest()


def generate_signature(raw_body: RawBody, secret: str) -> str:
    """Generate the ``X-Hub-Signature-256`` header value for a body.

    Args:
        raw_body: The exact bytes (or text) that will be sent.
        secret: The app secret.

    Returns:
        ``sha256=<hex digest>``.
    """
    return f"{SIGNATURE_PREFIX}{compute_digest(raw_body, secret)}"


def verify_signature(raw_body: RawBody, expected_signature: str, secret: str) -> bool:
    """Verify an HMAC-SHA256 signature for an incoming webhook.

    Args:
        raw_body: The raw, unparsed request body.
        expected_signature: Value of the ``X-Hub-Signature-256`` header,
            with or without the ``sha256=`` prefix.
        secret: The app secret.

    Returns:
        True if the signature matches the body.
    """
    if expected_signature.startswith(SIGNATURE_PREFIX):
        expected_signature = expected_signature[len(SIGNATURE_PREFIX):]

    actual_signature = compute_digest(raw_body, secret)

    # Constant-time comparison to prevent timing attacks
    return hmac.compare_digest(
        actual_signature.encode("ascii"),
        expected_signature.encode("utf-8"),
    )


class SignatureVerifier:
    """Verifies webhook payloads against a configured app secret.

    Without a secret every payload is accepted. That removes the
    authenticity check entirely, so it is logged at construction.
    """

    def __init__(self, secret: Optional[str] = None):
        self._secret = secret or None
        if self._secret is None:
            logger.warning("No app secret configured; webhook signature verification is disabled")

    @property
    def is_enabled(self) -> bool:
        return self._secret is not None

    def verify(self, raw_body: RawBody, signature: str) -> bool:
        if self._secret is None:
            return True
        return verify_signature(raw_body, signature, self._secret)
