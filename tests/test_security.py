"""Tests for webhook signature generation and verification."""

import hashlib
import hmac
import json

import pytest

from whatsapp_cloud.webhooks.security import (
    SignatureVerifier,
    generate_signature,
    verify_signature,
)


SECRET = "app-secret"
BODY = b'{"object":"whatsapp_business_account","entry":[]}'


class TestSignatures:
    """Tests for HMAC-SHA256 signatures."""

    def test_generate_signature_format(self):
        """Test the header value is sha256= plus the hex digest."""
        expected = hmac.new(SECRET.encode(), BODY, hashlib.sha256).hexdigest()

        assert generate_signature(BODY, SECRET) == f"sha256={expected}"

    def test_generated_signature_verifies(self):
        """Test a signature verifies against the body it was made from."""
        signature = generate_signature(BODY, SECRET)

        assert verify_signature(BODY, signature, SECRET) is True

    def test_prefix_is_optional(self):
        """Test a bare hex digest is accepted too."""
        digest = generate_signature(BODY, SECRET).split("=", 1)[1]

        assert verify_signature(BODY, digest, SECRET) is True

    def test_wrong_secret_fails(self):
        """Test a signature made with another secret is rejected."""
        signature = generate_signature(BODY, "other-secret")

        assert verify_signature(BODY, signature, SECRET) is False

    def test_tampered_body_fails(self):
        """Test a single changed byte invalidates the signature."""
        signature = generate_signature(BODY, SECRET)

        assert verify_signature(BODY.replace(b"[]", b"[0]"), signature, SECRET) is False

    def test_str_and_bytes_bodies_agree(self):
        """Test text bodies are signed as their UTF-8 bytes."""
        text = '{"name":"Zoë"}'

        assert generate_signature(text, SECRET) == generate_signature(text.encode("utf-8"), SECRET)

    def test_reserialized_json_does_not_verify(self):
        """Test the signature only holds for the exact raw body."""
        raw = b'{"b": 1,   "a": 2}'
        signature = generate_signature(raw, SECRET)
        reserialized = json.dumps(json.loads(raw), separators=(",", ":")).encode()

        assert verify_signature(raw, signature, SECRET) is True
        assert verify_signature(reserialized, signature, SECRET) is False

    @pytest.mark.parametrize("signature", ["", "sha256=", "sha256=zzzz", "sha256=é"])
    def test_garbage_signature_rejected(self, signature):
        """Test malformed header values are rejected without raising."""
        assert verify_signature(BODY, signature, SECRET) is False


class TestSignatureVerifier:
    """Tests for the secret-holding verifier."""

    def test_enabled_with_secret(self):
        verifier = SignatureVerifier(SECRET)

        assert verifier.is_enabled is True
        assert verifier.verify(BODY, generate_signature(BODY, SECRET)) is True
        assert verifier.verify(BODY, "sha256=" + "0" * 64) is False

    def test_disabled_without_secret_accepts_everything(self, caplog):
        """Test a verifier without a secret accepts any signature and warns."""
        with caplog.at_level("WARNING"):
            verifier = SignatureVerifier(None)

        assert verifier.is_enabled is False
        assert verifier.verify(BODY, "sha256=bogus") is True
        assert "verification is disabled" in caplog.text

    def test_empty_secret_disables(self):
        assert SignatureVerifier("").is_enabled is False
