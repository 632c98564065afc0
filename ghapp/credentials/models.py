"""Identity and token data types."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel


class AppConfig(BaseModel):
    """Credentials for a single GitHub App installation.

    Validation of the values (non-empty, parseable key) happens when a
    ``TokenSource`` is built from the config, so that every failure
    surfaces as ``ConfigurationError``.
    """

    app_id: str
    installation_id: str
    private_key: str

    model_config = {"frozen": True}

    def __repr__(self) -> str:
        # Never echo key material
        return f"AppConfig(app_id={self.app_id!r}, installation_id={self.installation_id!r})"

    __str__ = __repr__


@dataclass(frozen=True)
class AccessToken:
    """An installation access token.

    Attributes:
        value:      The bearer token string.
        token_type: Authorization scheme used with the token.
        expiry:     Timezone-aware expiry, or ``None`` if it does not expire.
    """

    value: str
    token_type: str = "token"
    expiry: datetime | None = None

    def __repr__(self) -> str:
        return f"AccessToken(token_type={self.token_type!r}, expiry={self.expiry!r})"

    @property
    def authorization(self) -> str:
        """Value for the HTTP ``Authorization`` header."""
        return f"{self.token_type} {self.value}"
