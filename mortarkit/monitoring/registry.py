"""Cache of metrics created by an external metrics backend."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any, Optional


def calc_id(name: str, *keys: str) -> str:
    """Identify a metric by its name and its distinct, sorted tag keys."""
    if not keys:
        return name
    return "_".join([name, *sorted(set(keys))])


class _Cache:
    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.items: dict[str, Any] = {}

    def load_or_store(self, metric_id: str, create: Callable[[], Any]) -> Any:
        known = self.items.get(metric_id)
        if known is not None:
            return known
        with self.lock:
            try:
                created = create()
            except Exception:
                # Another thread may have created it, and the backend refused a duplicate.
                known = self.items.get(metric_id)
                if known is not None:
                    return known
                raise
            return self.items.setdefault(metric_id, created)


class MetricsRegistry:
    """Creates metrics through an external backend once and reuses them afterwards.

    The backend provides ``counter``, ``gauge`` and ``timer`` taking
    ``(name, desc, *keys)`` and ``histogram`` taking
    ``(name, desc, buckets, *keys)``; each raises when it cannot create the metric.
    """

    def __init__(self, external: Any) -> None:
        self.external = external
        self._counters = _Cache()
        self._gauges = _Cache()
        self._histograms = _Cache()
        self._timers = _Cache()

    def load_or_store_counter(self, name: str, desc: str, *keys: str) -> Any:
        """Return the cached counter for ``name`` and ``keys``, creating it if needed."""
        return self._counters.load_or_store(
            calc_id(name, *keys), lambda: self.external.counter(name, desc, *keys)
        )

    def load_or_store_gauge(self, name: str, desc: str, *keys: str) -> Any:
        """Return the cached gauge for ``name`` and ``keys``, creating it if needed."""
        return self._gauges.load_or_store(
            calc_id(name, *keys), lambda: self.external.gauge(name, desc, *keys)
        )

    def load_or_store_histogram(
        self, name: str, desc: str, buckets: Optional[list[float]], *keys: str
    ) -> Any:
        """Return the cached histogram for ``name`` and ``keys``, creating it if needed."""
        return self._histograms.load_or_store(
            calc_id(name, *keys), lambda: self.external.histogram(name, desc, buckets, *keys)
        )

    def load_or_store_timer(self, name: str, desc: str, *keys: str) -> Any:
        """Return the cached timer for ``name`` and ``keys``, creating it if needed."""
        return self._timers.load_or_store(
            calc_id(name, *keys), lambda: self.external.timer(name, desc, *keys)
        )