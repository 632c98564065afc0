"""Test keys and a counting fake mint operation."""

from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from ghapp.core.errors import MintError
from ghapp.credentials.models import AccessToken

# ── Test keys ───────────────────────────────────────────────────────────────

_RSA_PRIVATE_KEY = rsa.generate_private_key(public_exponent=65537, key_size=2048)

RSA_PRIVATE_PEM_PKCS8 = _RSA_PRIVATE_KEY.private_bytes(
    encoding=serialization.Encoding.PEM,
    format=serialization.PrivateFormat.PKCS8,
    encryption_algorithm=serialization.NoEncryption(),
).decode("ascii")

RSA_PRIVATE_PEM_PKCS1 = _RSA_PRIVATE_KEY.private_bytes(
    encoding=serialization.Encoding.PEM,
    format=serialization.PrivateFormat.TraditionalOpenSSL,
    encryption_algorithm=serialization.NoEncryption(),
).decode("ascii")

RSA_PUBLIC_PEM = (
    _RSA_PRIVATE_KEY.public_key()
    .public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    .decode("ascii")
)

EC_PRIVATE_PEM = (
    ec.generate_private_key(ec.SECP256R1())
    .private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    .decode("ascii")
)


# ── Fake mint operation ─────────────────────────────────────────────────────


class FakeMinter:
    """Counts calls and hands out sequential tokens ``<prefix>-<n>``.

    Set ``fail`` to make every call raise ``MintError``, or ``error`` to raise
    that exception instead.  Set ``release`` to an ``Event`` to block inside
    the mint until it is set.
    """

    def __init__(self, lifetime: timedelta | None = timedelta(hours=1), prefix: str = "tok") -> None:
        self.lifetime = lifetime
        self.prefix = prefix
        self.calls = 0
        self.fail = False
        self.error: Exception | None = None
        self.entered = threading.Event()
        self.release: threading.Event | None = None
        self._lock = threading.Lock()

    def __call__(self, app_id, installation_id, private_key) -> AccessToken:
        with self._lock:
            self.calls += 1
            n = self.calls
        self.entered.set()
        if self.release is not None:
            self.release.wait(timeout=5)
        if self.error is not None:
            raise self.error
        if self.fail:
            raise MintError(app_id, "credentials rejected", 401)
        expiry = None if self.lifetime is None else datetime.now(timezone.utc) + self.lifetime
        return AccessToken(value=f"{self.prefix}-{n}", expiry=expiry)
