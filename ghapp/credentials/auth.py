"""httpx authentication backed by a token source or pool."""

from __future__ import annotations

from collections.abc import Generator
from typing import Protocol

import httpx

from ghapp.credentials.models import AccessToken


class SupportsToken(Protocol):
    def token(self) -> AccessToken: ...


class TokenAuth(httpx.Auth):
    """Set ``Authorization`` from *source* on every request sent.

    The token is looked up per request, so each retry attempt asks the
    pool again and may be served by a different App.
    """

    def __init__(self, source: SupportsToken) -> None:
        self.source = source

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["Authorization"] = self.source.token().authorization
        yield request
