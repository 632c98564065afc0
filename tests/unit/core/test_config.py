"""Tests for Settings.

Verifies that Settings:
- Loads typed defaults for all fields
- Reads overrides from GHAPP_ prefixed env vars
"""

from datetime import timedelta

from ghapp.core.config import Settings


class TestSettingsDefaults:
    def test_service_name_default(self):
        assert Settings().SERVICE_NAME == "ghapp"

    def test_github_api_url_default(self):
        assert Settings().GITHUB_API_URL == "https://api.github.com"

    def test_retry_defaults(self):
        settings = Settings()
        assert settings.RETRY_MAX_RETRIES == 3
        assert settings.RETRY_MAX_WAIT_SECONDS == 60.0

    def test_token_expiry_delta(self):
        settings = Settings()
        assert settings.TOKEN_EXPIRY_DELTA_SECONDS == 300.0
        assert settings.token_expiry_delta == timedelta(minutes=5)


class TestSettingsEnvOverrides:
    def test_retry_budget_override(self, monkeypatch):
        monkeypatch.setenv("GHAPP_RETRY_MAX_RETRIES", "5")
        assert Settings().RETRY_MAX_RETRIES == 5

    def test_api_url_override(self, monkeypatch):
        monkeypatch.setenv("GHAPP_GITHUB_API_URL", "https://ghe.example.com/api/v3")
        assert Settings().GITHUB_API_URL == "https://ghe.example.com/api/v3"

    def test_unprefixed_env_ignored(self, monkeypatch):
        monkeypatch.setenv("RETRY_MAX_RETRIES", "9")
        assert Settings().RETRY_MAX_RETRIES == 3
