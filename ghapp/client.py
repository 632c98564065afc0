"""GitHubClient: authenticated, retrying access to the GitHub REST API.

Composes the two halves of this package at the call site: a token source
(single ``TokenSource`` or a ``TokenPool``) supplies the ``Authorization``
header through ``TokenAuth``, and ``RetryExecutor`` sends each request.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

import httpx

from ghapp.core.config import Settings
from ghapp.credentials.auth import SupportsToken, TokenAuth
from ghapp.resilience.retry import RetryExecutor

_ACCEPT: str = "application/vnd.github+json"


class GitHubClient:
    """Synchronous GitHub REST client.

    Args:
        token_source: Anything with a ``token()`` method returning an ``AccessToken``.
        settings:     Client settings; defaults to ``Settings()``.
        client:       Optional ``httpx.Client``; tests inject one with a mock
                      transport.  Its ``auth`` is replaced with ``TokenAuth``.
        sleep:        Sleep function forwarded to the retry executor.
    """

    def __init__(
        self,
        token_source: SupportsToken,
        settings: Settings | None = None,
        client: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.settings = settings or Settings()
        self.base_url = self.settings.GITHUB_API_URL.rstrip("/")
        if client is None:
            client = httpx.Client(timeout=self.settings.REQUEST_TIMEOUT_SECONDS)
        client.auth = TokenAuth(token_source)
        self._client = client
        self._executor = RetryExecutor.from_settings(client, self.settings, sleep=sleep)

    def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send ``method path`` to the API, retrying on rate limits.

        *kwargs* are passed to ``httpx.Client.build_request`` (``params``,
        ``json``, ``headers``...).  The response may still carry a
        retryable status if retries were exhausted.
        """
        url = path if path.startswith(("http://", "https://")) else f"{self.base_url}/{path.lstrip('/')}"
        headers = {"Accept": _ACCEPT, "User-Agent": self.settings.USER_AGENT}
        headers.update(kwargs.pop("headers", None) or {})
        request = self._client.build_request(method, url, headers=headers, **kwargs)
        return self._executor.execute(request)

    def get(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("POST", path, **kwargs)

    def close(self) -> None:
        """Close the underlying httpx client."""
        self._client.close()

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
