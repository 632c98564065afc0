"""Rate-limit header reporting for GitHub responses.

Observability only: nothing here affects retry decisions.
"""

from __future__ import annotations

import logging

import httpx

_logger = logging.getLogger("ghapp.ratelimit")

_MAX_URL_LENGTH: int = 200


def truncate(s: str, max_len: int) -> str:
    """Shorten *s* to *max_len* characters, marking the cut with ``...``."""
    if len(s) <= max_len:
        return s
    return s[:max_len] + "..."


def log_rate_limit_headers(operation: str, url: str, response: httpx.Response) -> None:
    """Log GitHub's ``X-RateLimit-*`` headers for *response*."""
    headers = response.headers
    limit = headers.get("X-RateLimit-Limit", "")
    remaining = headers.get("X-RateLimit-Remaining", "")
    url = truncate(url, _MAX_URL_LENGTH)

    if limit or remaining:
        _logger.info(
            "[GitHub Rate Limit] operation=%s, url=%s, status=%d, limit=%s, remaining=%s, used=%s, reset=%s, resource=%s",
            operation,
            url,
            response.status_code,
            limit,
            remaining,
            headers.get("X-RateLimit-Used", ""),
            headers.get("X-RateLimit-Reset", ""),
            headers.get("X-RateLimit-Resource", ""),
        )
    else:
        _logger.info(
            "[GitHub Response] operation=%s, url=%s, status=%d (no rate limit headers)",
            operation,
            url,
            response.status_code,
        )
