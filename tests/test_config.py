"""
Tests for client configuration.
"""

from unittest.mock import patch

import pytest
import requests

from turso_client import ClientConfig, ConfigurationError, DEFAULT_BASE_URL, get_client
from turso_client.config import build_session


class TestClientConfig:
    """Tests for ClientConfig validation."""

    def test_defaults(self):
        """Test defaults for optional fields."""
        config = ClientConfig(token="tok")
        assert config.base_url == DEFAULT_BASE_URL
        assert config.org == ""
        assert not config.has_org
        assert isinstance(config.session, requests.Session)

    def test_missing_token(self):
        """Test that an empty token fails construction."""
        with pytest.raises(ConfigurationError, match="token"):
            ClientConfig(token="")

    def test_missing_base_url(self):
        """Test that an empty base URL fails construction."""
        with pytest.raises(ConfigurationError):
            ClientConfig(token="tok", base_url="")

    @pytest.mark.parametrize("url", ["api.turso.tech", "/v1", "ftp://api.turso.tech", "https://"])
    def test_invalid_base_url(self, url):
        """Test that relative or non-HTTP base URLs fail construction."""
        with pytest.raises(ConfigurationError, match="Invalid base URL"):
            ClientConfig(token="tok", base_url=url)

    def test_missing_session(self):
        """Test that a None session fails construction."""
        with pytest.raises(ConfigurationError, match="session"):
            ClientConfig(token="tok", session=None)

    def test_invalid_timeout(self):
        """Test that a non-positive timeout fails construction."""
        with pytest.raises(ConfigurationError):
            ClientConfig(token="tok", timeout=0)

    def test_none_org_means_unscoped(self):
        """Test that org=None is treated like no organization."""
        config = ClientConfig(token="tok", org=None)
        assert config.org == ""

    def test_immutable(self):
        """Test that the configuration cannot be changed after construction."""
        config = ClientConfig(token="tok", org="acme")
        with pytest.raises(AttributeError):
            config.org = "other"  # type: ignore[misc]

    def test_repr_hides_token_and_session(self):
        """Test that the token and session are left out of the repr."""
        text = repr(ClientConfig(token="secret-token", org="acme"))
        assert "secret-token" not in text
        assert "session" not in text
        assert "acme" in text


class TestFromEnv:
    """Tests for environment-based configuration."""

    def test_reads_environment(self, monkeypatch):
        """Test reading all supported variables."""
        monkeypatch.setenv("TURSO_API_TOKEN", "env-token")
        monkeypatch.setenv("TURSO_ORG", "acme")
        monkeypatch.setenv("TURSO_API_BASE_URL", "https://api.example.com")
        monkeypatch.setenv("TURSO_API_TIMEOUT", "5")

        config = ClientConfig.from_env()

        assert config.token == "env-token"
        assert config.org == "acme"
        assert config.base_url == "https://api.example.com"
        assert config.timeout == 5.0

    def test_overrides_win(self, monkeypatch):
        """Test that explicit values take precedence."""
        monkeypatch.setenv("TURSO_API_TOKEN", "env-token")
        monkeypatch.setenv("TURSO_ORG", "acme")

        config = ClientConfig.from_env(token="explicit", org="other")

        assert config.token == "explicit"
        assert config.org == "other"

    def test_missing_token(self, monkeypatch):
        """Test that a missing token still fails."""
        monkeypatch.delenv("TURSO_API_TOKEN", raising=False)
        with pytest.raises(ConfigurationError):
            ClientConfig.from_env()

    def test_invalid_timeout(self, monkeypatch):
        """Test an unparseable timeout."""
        monkeypatch.setenv("TURSO_API_TOKEN", "env-token")
        monkeypatch.setenv("TURSO_API_TIMEOUT", "soon")
        with pytest.raises(ConfigurationError, match="TURSO_API_TIMEOUT"):
            ClientConfig.from_env()

    def test_get_client(self, monkeypatch):
        """Test the convenience constructor."""
        monkeypatch.setenv("TURSO_API_TOKEN", "env-token")
        monkeypatch.delenv("TURSO_ORG", raising=False)
        monkeypatch.delenv("TURSO_API_BASE_URL", raising=False)

        with get_client(org="acme") as client:
            assert client.org == "acme"
            assert client.base_url == DEFAULT_BASE_URL


class TestBuildSession:
    """Tests for the default session."""

    def test_no_retries(self):
        """Test that the mounted adapters never retry."""
        session = build_session()
        for prefix in ("http://", "https://"):
            adapter = session.get_adapter(prefix + "api.turso.tech")
            assert adapter.max_retries.total == 0

    def test_close(self):
        """Test that closing the client closes the session."""
        session = build_session()
        with patch.object(session, "close") as close:
            with get_client(token="tok", session=session):
                pass
        close.assert_called_once()
