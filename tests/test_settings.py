"""Tests for settings loading and API version parsing."""

import pytest
from pydantic import ValidationError

from whatsapp_cloud.core.settings import (
    ClientSettings,
    WebhookSettings,
    parse_api_version,
)
from whatsapp_cloud.errors import ConfigurationError


class TestParseApiVersion:
    """Tests for Graph API version normalization."""

    @pytest.mark.parametrize(
        "version,expected",
        [
            (17, "v17.0"),
            ("v17.0", "v17.0"),
            ("12", "v12.0"),
            ("v9.0", "v9.0"),
        ],
    )
    def test_accepted_forms(self, version, expected):
        """Test integers, numeric strings and v{n}.0 strings are accepted."""
        assert parse_api_version(version) == expected

    @pytest.mark.parametrize("version", ["v15.2", "v17", "17.0", "", "latest"])
    def test_invalid_format(self, version):
        """Test other strings raise a format error."""
        with pytest.raises(ConfigurationError, match="Invalid API version format"):
            parse_api_version(version)

    @pytest.mark.parametrize("version", [{}, None, 17.0, True])
    def test_unsupported_type(self, version):
        """Test non-int, non-str values raise a type error."""
        with pytest.raises(ConfigurationError, match="Unsupported API version type"):
            parse_api_version(version)


class TestClientSettings:
    """Tests for environment-driven client settings."""

    def test_loads_from_environment(self, monkeypatch):
        """Test WHATSAPP_ variables populate the settings."""
        monkeypatch.setenv("WHATSAPP_ACCESS_TOKEN", "env-token")
        monkeypatch.setenv("WHATSAPP_PHONE_NUMBER_ID", "42")
        monkeypatch.setenv("WHATSAPP_API_VERSION", "18")
        monkeypatch.setenv("WHATSAPP_REQUEST_RETRIES", "2")

        settings = ClientSettings(_env_file=None)

        assert settings.access_token == "env-token"
        assert settings.phone_number_id == "42"
        assert settings.api_version == "v18.0"
        assert settings.request_retries == 2
        assert settings.request_timeout_ms == 3000

    def test_invalid_version_rejected(self):
        """Test a malformed version fails validation."""
        with pytest.raises(ValidationError):
            ClientSettings(access_token="t", phone_number_id="1", api_version="v1.5", _env_file=None)

    def test_negative_retries_rejected(self):
        """Test retry counts cannot be negative."""
        with pytest.raises(ValidationError):
            ClientSettings(access_token="t", phone_number_id="1", request_retries=-1, _env_file=None)


class TestWebhookSettings:
    """Tests for webhook settings defaults."""

    def test_defaults(self, monkeypatch):
        """Test signature checking is off until a secret is configured."""
        monkeypatch.delenv("WHATSAPP_APP_SECRET", raising=False)
        settings = WebhookSettings(verify_token="verify", _env_file=None)

        assert settings.app_secret is None
        assert settings.require_signature is False
        assert settings.webhook_path == "/webhook"

    def test_loads_from_environment(self, monkeypatch):
        monkeypatch.setenv("WHATSAPP_VERIFY_TOKEN", "verify")
        monkeypatch.setenv("WHATSAPP_APP_SECRET", "secret")
        monkeypatch.setenv("WHATSAPP_REQUIRE_SIGNATURE", "true")

        settings = WebhookSettings(_env_file=None)

        assert settings.verify_token == "verify"
        assert settings.app_secret == "secret"
        assert settings.require_signature is True
