"""Round-robin pool over several GitHub App token sources.

Spreading calls across multiple Apps multiplies the available rate-limit
quota.  Selection is a round-robin cursor (``counter mod size``) advanced
under a lock once per call, so every member serves an equal share of calls
without any coordination between processes.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from datetime import timedelta

from ghapp.core.errors import ConfigurationError
from ghapp.credentials.metrics import TOKEN_APP_SELECTED, MetricsSink
from ghapp.credentials.minter import Minter
from ghapp.credentials.models import AccessToken, AppConfig
from ghapp.credentials.token_source import TokenSource

logger = logging.getLogger(__name__)


class TokenPool:
    """Fair selection over a fixed, non-empty set of ``TokenSource`` objects.

    Args:
        sources: One or more token sources; membership never changes.
        metrics: Optional sink receiving ``token_app_selected`` increments
                 tagged ``app_idx:<position>``.
    """

    def __init__(self, sources: Sequence[TokenSource], metrics: MetricsSink | None = None) -> None:
        if not sources:
            raise ConfigurationError("at least one token source must be provided")
        self._sources: tuple[TokenSource, ...] = tuple(sources)
        self._metrics = metrics
        self._counter = 0
        self._lock = threading.Lock()

    @classmethod
    def from_configs(
        cls,
        configs: Sequence[AppConfig],
        expiry_delta: timedelta = timedelta(0),
        metrics: MetricsSink | None = None,
        minter: Minter | None = None,
    ) -> TokenPool:
        """Build one ``TokenSource`` per config and pool them.

        Raises:
            ConfigurationError: If *configs* is empty or any config is invalid.
        """
        if not configs:
            raise ConfigurationError("at least one app config must be provided")

        sources = []
        for i, config in enumerate(configs):
            try:
                sources.append(TokenSource.from_config(config, expiry_delta=expiry_delta, minter=minter))
            except ConfigurationError as exc:
                raise ConfigurationError(
                    f"failed to create token source for app index {i} (app_id={config.app_id}): {exc}"
                ) from exc

        logger.info("Token pool created with %d GitHub App(s)", len(sources))
        return cls(sources, metrics=metrics)

    @property
    def size(self) -> int:
        return len(self._sources)

    def __len__(self) -> int:
        return len(self._sources)

    @property
    def counter(self) -> int:
        """Number of multi-source selections made so far."""
        with self._lock:
            return self._counter

    @property
    def sources(self) -> tuple[TokenSource, ...]:
        return self._sources

    def _select(self) -> int:
        if len(self._sources) == 1:
            return 0
        with self._lock:
            selected = self._counter % len(self._sources)
            self._counter += 1
        return selected

    def token(self) -> AccessToken:
        """Return a token from the next source in round-robin order.

        Errors raised by the selected source propagate unchanged.
        """
        selected = self._select()
        if self._metrics is not None:
            self._metrics.incr(TOKEN_APP_SELECTED, [f"app_idx:{selected}"], 1)
        return self._sources[selected].token()
