"""Reporter that adds default tags and context extraction to a metrics backend."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from mortarkit.monitoring.metric_types import (
    MonitorConfig,
    TagsAwareCounter,
    TagsAwareGauge,
    TagsAwareHistogram,
    TagsAwareTimer,
)
from mortarkit.monitoring.metrics import Metrics
from mortarkit.monitoring.registry import MetricsRegistry


class MortarReporter:
    """Wraps a backend reporter with default tags and context extractors.

    Tag values may also come from the call context, which suits values set
    per request such as a canary release marker; avoid high-cardinality
    values like user identifiers.
    """

    def __init__(self, config: MonitorConfig) -> None:
        self.config = config
        self.external_metrics = config.reporter.metrics()
        self.registry = MetricsRegistry(self.external_metrics)

    def connect(self, ctx: Any) -> Any:
        """Connect the backend reporter."""
        return self.config.reporter.connect(ctx)

    def close(self, ctx: Any) -> Any:
        """Close the backend reporter."""
        return self.config.reporter.close(ctx)

    def metrics(self) -> MortarReporter:
        """Return this reporter, which also acts as the metric factory."""
        return self

    def _new_metrics(self) -> Metrics:
        return Metrics(self.registry, self.config).with_tags(self.config.tags)

    def counter(self, name: str, desc: str) -> TagsAwareCounter:
        """Create a counter carrying the default tags."""
        return self._new_metrics().counter(name, desc)

    def gauge(self, name: str, desc: str) -> TagsAwareGauge:
        """Create a gauge carrying the default tags."""
        return self._new_metrics().gauge(name, desc)

    def histogram(self, name: str, desc: str, buckets: Optional[list[float]]) -> TagsAwareHistogram:
        """Create a histogram carrying the default tags."""
        return self._new_metrics().histogram(name, desc, buckets)

    def timer(self, name: str, desc: str) -> TagsAwareTimer:
        """Create a timer carrying the default tags."""
        return self._new_metrics().timer(name, desc)

    def with_tags(self, tags: Optional[Mapping[str, str]]) -> Metrics:
        """Return a metric factory with the default tags, then ``tags`` on top."""
        return self._new_metrics().with_tags(tags)