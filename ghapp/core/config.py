"""Settings for the GitHub App client layer.

All settings are loaded from environment variables with the ``GHAPP_``
prefix.  Credential material (app ids, private keys) is deliberately not
part of Settings; callers construct ``AppConfig`` objects themselves.
"""

from __future__ import annotations

from datetime import timedelta

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """ghapp configuration.

    All fields can be overridden by environment variables prefixed with
    ``GHAPP_``.  For example, ``GHAPP_RETRY_MAX_RETRIES=5`` raises the
    retry budget.
    """

    # ── Identity ────────────────────────────────────────────────────
    SERVICE_NAME: str = "ghapp"
    USER_AGENT: str = "ghapp/0.1.0"

    # ── GitHub API ──────────────────────────────────────────────────
    GITHUB_API_URL: str = "https://api.github.com"
    REQUEST_TIMEOUT_SECONDS: float = 30.0

    # ── Installation tokens ─────────────────────────────────────────
    TOKEN_EXPIRY_DELTA_SECONDS: float = 300.0  # Discard tokens this long before expiry
    MINT_TIMEOUT_SECONDS: float = 10.0

    # ── Retry ───────────────────────────────────────────────────────
    RETRY_MAX_RETRIES: int = 3  # Retries after the initial attempt
    RETRY_MAX_WAIT_SECONDS: float = 60.0  # Ceiling for any single wait

    model_config = {
        "env_prefix": "GHAPP_",
    }

    @property
    def token_expiry_delta(self) -> timedelta:
        return timedelta(seconds=self.TOKEN_EXPIRY_DELTA_SECONDS)
