"""Cached, lazily renewed installation token for one GitHub App.

``TokenSource.token()`` returns the cached token while it is more than
``expiry_delta`` away from expiry, and mints a new one otherwise.  All
cache access happens under a per-source lock, so concurrent callers never
mint twice for the same source.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from ghapp.core.errors import ConfigurationError
from ghapp.credentials.minter import InstallationTokenMinter, Minter
from ghapp.credentials.models import AccessToken, AppConfig

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def load_private_key(pem: str) -> RSAPrivateKey:
    """Parse a PEM-encoded RSA private key (PKCS#1 or PKCS#8).

    Raises:
        ConfigurationError: If the text is not a PEM RSA private key.
    """
    try:
        key = serialization.load_pem_private_key(pem.encode("utf-8"), password=None)
    except (ValueError, TypeError) as exc:
        raise ConfigurationError(f"github app private key could not be parsed: {exc}") from exc
    if not isinstance(key, RSAPrivateKey):
        raise ConfigurationError("github app private key must be an RSA key")
    return key


class TokenSource:
    """Installation token cache for a single GitHub App.

    Args:
        app_id:          GitHub App identifier.
        installation_id: Installation the tokens are scoped to.
        private_key:     PEM-encoded RSA private key of the App.
        expiry_delta:    Renewal margin; tokens this close to expiry are discarded.
        minter:          Mint operation; defaults to ``InstallationTokenMinter()``.
        clock:           Returns the current aware UTC time (overridable in tests).
    """

    def __init__(
        self,
        app_id: str,
        installation_id: str,
        private_key: str,
        expiry_delta: timedelta = timedelta(0),
        minter: Minter | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not app_id:
            raise ConfigurationError("github app id must be provided")
        if not installation_id:
            raise ConfigurationError("github app installation id must be provided")
        if not private_key:
            raise ConfigurationError("github app private key must be provided")

        self.app_id = app_id
        self.installation_id = installation_id
        self.private_key = load_private_key(private_key)
        self.expiry_delta = expiry_delta

        self._mint = minter or InstallationTokenMinter()
        self._clock = clock
        self._token: AccessToken | None = None
        self._lock = threading.Lock()
        # Bumped when a mint attempt finishes; pairs with _last_error
        self._generation = 0
        self._last_error: Exception | None = None

        logger.info("OAuth token will be discarded %s before its expiry", expiry_delta)

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        expiry_delta: timedelta = timedelta(0),
        minter: Minter | None = None,
    ) -> TokenSource:
        return cls(
            config.app_id,
            config.installation_id,
            config.private_key,
            expiry_delta=expiry_delta,
            minter=minter,
        )

    def __repr__(self) -> str:
        return f"TokenSource(app_id={self.app_id!r}, installation_id={self.installation_id!r})"

    def _is_fresh(self, token: AccessToken | None) -> bool:
        if token is None or not token.value:
            logger.info("Current OAuth token is not valid. Will regenerate.")
            return False
        if token.expiry is None:
            return True
        now = self._clock()
        if token.expiry - self.expiry_delta <= now:
            logger.info("Current OAuth token will expire in %s. Will regenerate.", token.expiry - now)
            return False
        return True

    def token(self) -> AccessToken:
        """Return a valid installation token, minting one if needed.

        Raises:
            MintError: If the mint operation fails; any other exception the
                       mint raises propagates unchanged.  Callers that were
                       waiting on the lock during that attempt receive the
                       same error rather than minting again.
        """
        seen_generation = self._generation
        with self._lock:
            if self._generation != seen_generation and self._last_error is not None:
                raise self._last_error

            if self._is_fresh(self._token):
                return self._token

            self._token = None
            try:
                new_token = self._mint(self.app_id, self.installation_id, self.private_key)
            except Exception as exc:
                self._last_error = exc
                logger.warning("New OAuth token generation failed for app %s: %s", self.app_id, exc)
                raise
            finally:
                self._generation += 1

            if new_token.expiry is not None and new_token.expiry.tzinfo is None:
                new_token = dataclasses.replace(new_token, expiry=new_token.expiry.replace(tzinfo=timezone.utc))
            self._last_error = None
            self._token = new_token
            logger.info("New OAuth token generated. Will expire at %s", new_token.expiry)
            return new_token

    def invalidate(self) -> None:
        """Drop the cached token so the next call mints a fresh one."""
        with self._lock:
            self._token = None
