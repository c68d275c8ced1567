"""Tests for settings loading."""

import pytest
from pydantic import ValidationError

from fluent_http.config import Settings


class TestSettings:
    """Tests for environment based configuration."""

    def test_defaults(self, monkeypatch):
        """Test defaults match the documented values."""
        for name in ("FLUENT_HTTP_DEFAULT_TIMEOUT_SECONDS", "FLUENT_HTTP_DEFAULT_LOCALE"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.default_timeout_seconds == 300.0
        assert settings.default_locale == "pt-BR"
        assert settings.follow_redirects is True

    def test_env_override(self, monkeypatch):
        """Test FLUENT_HTTP_ variables override defaults."""
        monkeypatch.setenv("FLUENT_HTTP_DEFAULT_TIMEOUT_SECONDS", "45")
        monkeypatch.setenv("FLUENT_HTTP_DEFAULT_LOCALE", "en-US")
        monkeypatch.setenv("FLUENT_HTTP_METRICS_ENABLED", "false")

        settings = Settings(_env_file=None)

        assert settings.default_timeout_seconds == 45.0
        assert settings.default_locale == "en-US"
        assert settings.metrics_enabled is False

    def test_non_positive_timeout_rejected(self):
        """Test the default timeout must be positive."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, default_timeout_seconds=0)
