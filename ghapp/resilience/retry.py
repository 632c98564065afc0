"""Retry with backoff for GitHub API calls.

``RetryExecutor.execute()`` sends a request and re-sends it while GitHub
answers with a retryable status:

    403, 429        rate limiting (GitHub uses both)
    5xx except 501  transient server failure

The wait before each retry honours ``Retry-After`` (integer seconds or an
HTTP-date), falls back to ``2 ** attempt`` seconds, and is always capped
at ``max_wait``.  When retries are exhausted the last response is returned
unchanged; a retryable status on the final response means "gave up", not
success.  Transport failures (no response at all) are never retried.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

import httpx

from ghapp.core.config import Settings
from ghapp.core.errors import TransportError
from ghapp.resilience.rate_limit import log_rate_limit_headers

logger = logging.getLogger(__name__)

# ── Constants ───────────────────────────────────────────────────────────

MAX_RETRIES: int = 3
MAX_RETRY_AFTER: float = 60.0  # seconds

_NOT_IMPLEMENTED: int = 501


# ── Decision helpers ────────────────────────────────────────────────────


def should_retry(status_code: int) -> bool:
    """Return True if *status_code* is worth another attempt."""
    if status_code in (403, 429):
        return True
    return 500 <= status_code < 600 and status_code != _NOT_IMPLEMENTED


def parse_retry_after(value: str | None, now: datetime | None = None) -> float:
    """Parse a ``Retry-After`` value into seconds.

    Accepts integer seconds or an HTTP-date.  Returns 0.0 for empty,
    unparseable, negative, or past values.
    """
    if not value:
        return 0.0
    value = value.strip()

    # Optional sign then ASCII digits only; int() alone also takes "1_000"
    digits = value[1:] if value[:1] in ("+", "-") else value
    if digits.isascii() and digits.isdigit():
        return float(max(int(value), 0))

    try:
        retry_at = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return 0.0
    if retry_at.tzinfo is None:
        retry_at = retry_at.replace(tzinfo=timezone.utc)

    remaining = (retry_at - (now or datetime.now(timezone.utc))).total_seconds()
    return remaining if remaining > 0 else 0.0


def compute_wait(response: httpx.Response, attempt: int, max_wait: float = MAX_RETRY_AFTER) -> float:
    """Seconds to wait before retry number *attempt* (zero-based)."""
    wait = parse_retry_after(response.headers.get("Retry-After"))
    if wait == 0:
        wait = float(2**attempt)
    return min(wait, max_wait)


def _clone(request: httpx.Request) -> httpx.Request:
    headers = request.headers.copy()
    # Body is replayed from buffered bytes, framed by Content-Length
    headers.pop("Transfer-Encoding", None)
    return httpx.Request(
        request.method,
        request.url,
        headers=headers,
        content=request.content,
        extensions=dict(request.extensions),
    )


# ── Executor ────────────────────────────────────────────────────────────


class RetryExecutor:
    """Sends requests through an ``httpx.Client`` with bounded retries.

    Args:
        client:      Transport; only ``client.send()`` is used.
        max_retries: Retries after the initial attempt.
        max_wait:    Ceiling in seconds for any single wait.
        sleep:       Blocking sleep function (injected in tests).
    """

    def __init__(
        self,
        client: httpx.Client,
        max_retries: int = MAX_RETRIES,
        max_wait: float = MAX_RETRY_AFTER,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self._client = client
        self.max_retries = max_retries
        self.max_wait = max_wait
        self._sleep = sleep

    @classmethod
    def from_settings(
        cls,
        client: httpx.Client,
        settings: Settings,
        sleep: Callable[[float], None] = time.sleep,
    ) -> RetryExecutor:
        return cls(
            client,
            max_retries=settings.RETRY_MAX_RETRIES,
            max_wait=settings.RETRY_MAX_WAIT_SECONDS,
            sleep=sleep,
        )

    @property
    def max_attempts(self) -> int:
        return 1 + self.max_retries

    def execute(self, request: httpx.Request) -> httpx.Response:
        """Send *request*, retrying on retryable statuses.

        Each attempt sends an independent copy of *request*.

        Raises:
            TransportError: If the transport fails before a response is
                            received.  Not retried.
        """
        request.read()
        url = str(request.url)
        attempt = 0

        while True:
            try:
                response = self._client.send(_clone(request))
            except httpx.TransportError as exc:
                raise TransportError(url, str(exc) or type(exc).__name__) from exc

            log_rate_limit_headers(request.method, url, response)

            if not should_retry(response.status_code) or attempt >= self.max_retries:
                return response

            wait = compute_wait(response, attempt, self.max_wait)
            response.close()
            logger.warning(
                "Retryable status %d for %s %s (attempt %d/%d), retrying in %.1fs",
                response.status_code,
                request.method,
                url,
                attempt + 1,
                self.max_attempts,
                wait,
            )
            self._sleep(wait)
            attempt += 1


def do_with_retry(client: httpx.Client, request: httpx.Request) -> httpx.Response:
    """Execute *request* with the default retry budget and wait ceiling."""
    return RetryExecutor(client).execute(request)
