"""GitHub App installation token minting.

GitHub App auth flow:

1. Sign a short-lived JWT (RS256) with the App's private key.
2. Exchange it at ``POST /app/installations/{id}/access_tokens`` for an
   installation access token (valid for about an hour).

``InstallationTokenMinter`` is the default ``mint`` callable used by
``TokenSource``; any callable with the same signature can replace it.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Protocol

import httpx
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey
from jose import JOSEError
from jose import jwt as jose_jwt

from ghapp.core.config import Settings
from ghapp.core.errors import MintError
from ghapp.credentials.models import AccessToken

# ── Constants ───────────────────────────────────────────────────────────

# GitHub rejects app JWTs valid for more than 10 minutes
_JWT_LIFETIME_SECONDS: int = 9 * 60

# Backdate iat to tolerate clock skew
_JWT_CLOCK_SKEW_SECONDS: int = 60

_ACCEPT: str = "application/vnd.github+json"


class Minter(Protocol):
    """Signature of a mint operation."""

    def __call__(self, app_id: str, installation_id: str, private_key: RSAPrivateKey) -> AccessToken: ...


def create_app_jwt(app_id: str, private_key: RSAPrivateKey, now: float | None = None) -> str:
    """Create an RS256 JWT authenticating as the GitHub App *app_id*."""
    issued = int(time.time() if now is None else now)
    pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")
    claims = {
        "iat": issued - _JWT_CLOCK_SKEW_SECONDS,
        "exp": issued + _JWT_LIFETIME_SECONDS,
        "iss": app_id,
    }
    return jose_jwt.encode(claims, pem, algorithm="RS256")


def _parse_expires_at(raw: str) -> datetime:
    # GitHub returns e.g. "2016-07-11T22:14:10Z"; no offset means UTC
    expiry = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    if expiry.tzinfo is None:
        expiry = expiry.replace(tzinfo=timezone.utc)
    return expiry


class InstallationTokenMinter:
    """Exchanges an app JWT for an installation access token.

    Args:
        api_url: GitHub REST API root (``https://api.github.com`` or a GHES URL).
        client:  Optional ``httpx.Client``; tests inject one with a mock transport.
        timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        api_url: str = "https://api.github.com",
        client: httpx.Client | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings, client: httpx.Client | None = None) -> InstallationTokenMinter:
        return cls(settings.GITHUB_API_URL, client=client, timeout=settings.MINT_TIMEOUT_SECONDS)

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client()
        return self._client

    def __call__(self, app_id: str, installation_id: str, private_key: RSAPrivateKey) -> AccessToken:
        """Mint a fresh installation token.

        Raises:
            MintError: On signing failure, transport failure, a non-201
                       status, or a malformed response body.
        """
        try:
            app_jwt = create_app_jwt(app_id, private_key)
        except JOSEError as exc:
            raise MintError(app_id, f"JWT signing failed: {exc}") from exc

        url = f"{self.api_url}/app/installations/{installation_id}/access_tokens"
        try:
            response = self._get_client().post(
                url,
                headers={"Authorization": f"Bearer {app_jwt}", "Accept": _ACCEPT},
                timeout=self.timeout,
            )
        except httpx.HTTPError as exc:
            raise MintError(app_id, f"request failed: {exc}") from exc

        if response.status_code != 201:
            raise MintError(app_id, "unexpected response from token endpoint", response.status_code)

        try:
            body = response.json()
            value = body["token"]
            expires_at = body.get("expires_at")
            if not isinstance(value, str):
                raise TypeError(f"token must be a string, got {type(value).__name__}")
            if expires_at is not None and not isinstance(expires_at, str):
                raise TypeError(f"expires_at must be a string, got {type(expires_at).__name__}")
            expiry = _parse_expires_at(expires_at) if expires_at else None
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            raise MintError(app_id, f"malformed token response: {exc}", response.status_code) from exc

        if not value:
            raise MintError(app_id, "token endpoint returned an empty token", response.status_code)

        return AccessToken(value=value, token_type="token", expiry=expiry)

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
