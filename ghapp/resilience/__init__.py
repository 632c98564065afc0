"""Resilience patterns: retry with backoff for GitHub API calls.

Interprets GitHub's rate-limit and transient-failure signals (403, 429,
5xx except 501, ``Retry-After``) to decide whether and how long to wait
before re-issuing a request.
"""

from ghapp.resilience.rate_limit import log_rate_limit_headers
from ghapp.resilience.retry import (
    MAX_RETRIES,
    MAX_RETRY_AFTER,
    RetryExecutor,
    compute_wait,
    do_with_retry,
    parse_retry_after,
    should_retry,
)

__all__ = [
    "MAX_RETRIES",
    "MAX_RETRY_AFTER",
    "RetryExecutor",
    "compute_wait",
    "do_with_retry",
    "log_rate_limit_headers",
    "parse_retry_after",
    "should_retry",
]
