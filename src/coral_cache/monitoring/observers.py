from __future__ import annotations

import hashlib
import logging
import typing as t

from ..core.hooks import CacheObserver
from . import metrics

_logger = logging.getLogger(__name__)


def fingerprint(key: t.Any) -> str:
    """Short, stable identifier for a cache key that never reveals the token."""
    return hashlib.sha256(str(key).encode("utf-8")).hexdigest()[:12]


class LoggingObserver(CacheObserver):
    def __init__(self, logger: t.Optional[logging.Logger] = None) -> None:
        self._logger = logger or _logger

    def on_hit(self, key: t.Any) -> None:
        self._logger.debug("Using cached session %s", fingerprint(key))

    def on_miss(self, key: t.Any) -> None:
        self._logger.debug("Loading session %s", fingerprint(key))

    def on_coalesced(self, key: t.Any) -> None:
        self._logger.debug("Waiting for pending load of session %s", fingerprint(key))

    def on_loaded(self, key: t.Any, duration: float) -> None:
        self._logger.info("Loaded session %s in %.3fs", fingerprint(key), duration)

    def on_load_failed(self, key: t.Any, exc: BaseException) -> None:
        self._logger.warning("Loading session %s failed: %s", fingerprint(key), exc)

    def on_field_fresh(self, owner: str, field: str) -> None:
        self._logger.debug("Not updating %s data for coral user %s", field, owner)

    def on_field_refresh(self, owner: str, field: str) -> None:
        self._logger.debug("Updating %s data for coral user %s", field, owner)

    def on_field_refreshed(self, owner: str, field: str, duration: float) -> None:
        self._logger.debug("Updated %s data for coral user %s in %.3fs", field, owner, duration)

    def on_field_refresh_failed(self, owner: str, field: str, exc: BaseException) -> None:
        self._logger.warning("Updating %s data for coral user %s failed: %s", field, owner, exc)


class MetricsObserver(CacheObserver):
    def on_hit(self, key: t.Any) -> None:
        metrics.coral_cache_requests_total.inc(outcome="hit")

    def on_miss(self, key: t.Any) -> None:
        metrics.coral_cache_requests_total.inc(outcome="miss")

    def on_coalesced(self, key: t.Any) -> None:
        metrics.coral_cache_requests_total.inc(outcome="coalesced")

    def on_loaded(self, key: t.Any, duration: float) -> None:
        metrics.coral_upstream_latency_seconds.observe(duration, operation="load")

    def on_load_failed(self, key: t.Any, exc: BaseException) -> None:
        metrics.coral_cache_load_failures_total.inc(error=type(exc).__name__)

    def on_field_fresh(self, owner: str, field: str) -> None:
        metrics.coral_field_refresh_total.inc(field=field, outcome="fresh")

    def on_field_refreshed(self, owner: str, field: str, duration: float) -> None:
        metrics.coral_field_refresh_total.inc(field=field, outcome="refreshed")
        metrics.coral_upstream_latency_seconds.observe(duration, operation=field)

    def on_field_refresh_failed(self, owner: str, field: str, exc: BaseException) -> None:
        metrics.coral_field_refresh_total.inc(field=field, outcome="failed")


class CompositeObserver(CacheObserver):
    """Forwards every hook to each wrapped observer in order."""

    def __init__(self, *observers: CacheObserver) -> None:
        self._observers = list(observers)

    def on_hit(self, key: t.Any) -> None:
        for observer in self._observers:
            observer.on_hit(key)

    def on_miss(self, key: t.Any) -> None:
        for observer in self._observers:
            observer.on_miss(key)

    def on_coalesced(self, key: t.Any) -> None:
        for observer in self._observers:
            observer.on_coalesced(key)

    def on_loaded(self, key: t.Any, duration: float) -> None:
        for observer in self._observers:
            observer.on_loaded(key, duration)

    def on_load_failed(self, key: t.Any, exc: BaseException) -> None:
        for observer in self._observers:
            observer.on_load_failed(key, exc)

    def on_field_fresh(self, owner: str, field: str) -> None:
        for observer in self._observers:
            observer.on_field_fresh(owner, field)

    def on_field_refresh(self, owner: str, field: str) -> None:
        for observer in self._observers:
            observer.on_field_refresh(owner, field)

    def on_field_refreshed(self, owner: str, field: str, duration: float) -> None:
        for observer in self._observers:
            observer.on_field_refreshed(owner, field, duration)

    def on_field_refresh_failed(self, owner: str, field: str, exc: BaseException) -> None:
        for observer in self._observers:
            observer.on_field_refresh_failed(owner, field, exc)
