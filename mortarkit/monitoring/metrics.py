"""Metric factory that applies default tags and falls back to no-op metrics on failure."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Optional

from mortarkit.monitoring.metric_types import (
    MonitorConfig,
    TagsAwareCounter,
    TagsAwareGauge,
    TagsAwareHistogram,
    TagsAwareTimer,
    _TagsMetric,
)
from mortarkit.monitoring.noop import NoopMetric, NoopTimer
from mortarkit.monitoring.registry import MetricsRegistry


class Metrics(_TagsMetric):
    """Creates tag-aware metrics through a registry, using the tags set so far."""

    def __init__(self, registry: MetricsRegistry, config: MonitorConfig) -> None:
        super().__init__(config.tags)
        self._registry = registry
        self._config = config

    def counter(self, name: str, desc: str) -> TagsAwareCounter:
        """Create or reuse a counter keyed by ``name`` and the current tag keys."""
        keys = self._tag_keys()
        try:
            bricks = self._registry.load_or_store_counter(name, desc, *keys)
        except Exception as exc:
            bricks = self._failed("counter", name, desc, keys, exc, NoopMetric)
        return TagsAwareCounter(bricks, self._tags, self._config.extractors, self._config.on_error)

    def gauge(self, name: str, desc: str) -> TagsAwareGauge:
        """Create or reuse a gauge keyed by ``name`` and the current tag keys."""
        keys = self._tag_keys()
        try:
            bricks = self._registry.load_or_store_gauge(name, desc, *keys)
        except Exception as exc:
            bricks = self._failed("gauge", name, desc, keys, exc, NoopMetric)
        return TagsAwareGauge(bricks, self._tags, self._config.extractors, self._config.on_error)

    def histogram(self, name: str, desc: str, buckets: Optional[list[float]]) -> TagsAwareHistogram:
        """Create or reuse a histogram keyed by ``name`` and the current tag keys."""
        keys = self._tag_keys()
        try:
            bricks = self._registry.load_or_store_histogram(name, desc, buckets, *keys)
        except Exception as exc:
            bricks = self._failed("histogram", name, desc, keys, exc, NoopMetric)
        return TagsAwareHistogram(bricks, self._tags, self._config.extractors, self._config.on_error)

    def timer(self, name: str, desc: str) -> TagsAwareTimer:
        """Create or reuse a timer keyed by ``name`` and the current tag keys."""
        keys = self._tag_keys()
        try:
            bricks = self._registry.load_or_store_timer(name, desc, *keys)
        except Exception as exc:
            bricks = self._failed("timer", name, desc, keys, exc, NoopTimer)
        return TagsAwareTimer(bricks, self._tags, self._config.extractors, self._config.on_error)

    def with_tags(self, tags: Optional[Mapping[str, str]]) -> Metrics:
        """Add tags to every metric created afterwards and return this factory."""
        self._merge_tags(tags)
        return self

    def _tag_keys(self) -> list[str]:
        return sorted(self.tags)

    def _failed(
        self,
        kind: str,
        name: str,
        desc: str,
        keys: list[str],
        exc: Exception,
        fallback: Callable[..., Any],
    ) -> Any:
        on_error = self._config.on_error
        error = RuntimeError(
            f"error registering {kind} [{name}:{desc}] metric with [{' '.join(keys)}] tags, {exc}"
        )
        error.__cause__ = exc
        if on_error is None:
            raise error
        on_error(error)
        return fallback(name, desc, exc, on_error)