"""GitHub App credentials: installation token caching and rotation.

Provides a per-App ``TokenSource`` that lazily renews installation tokens
and a ``TokenPool`` that spreads calls across several Apps round-robin.
"""

from ghapp.credentials.auth import TokenAuth
from ghapp.credentials.metrics import MetricsSink, SelectionMetrics
from ghapp.credentials.minter import InstallationTokenMinter
from ghapp.credentials.models import AccessToken, AppConfig
from ghapp.credentials.pool import TokenPool
from ghapp.credentials.token_source import TokenSource

__all__ = [
    "AccessToken",
    "AppConfig",
    "InstallationTokenMinter",
    "MetricsSink",
    "SelectionMetrics",
    "TokenAuth",
    "TokenPool",
    "TokenSource",
]
