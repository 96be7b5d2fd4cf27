"""Tag-aware metric wrappers that forward to a metrics backend."""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Optional

ContextExtractor = Callable[[Any], Optional[Mapping[str, str]]]
ErrorHandler = Callable[[BaseException], None]


@dataclass
class MonitorConfig:
    """Settings shared by every metric a reporter creates."""

    tags: Optional[dict[str, str]] = None
    extractors: list[ContextExtractor] = field(default_factory=list)
    on_error: Optional[ErrorHandler] = None
    reporter: Any = None


class _TagsMetric:
    """Holds tags, copying the initial mapping before the first change."""

    def __init__(self, tags: Optional[dict[str, str]], on_error: Optional[ErrorHandler] = None) -> None:
        self._lock = threading.Lock()
        self._tags: dict[str, str] = tags if tags is not None else {}
        self._on_error = on_error
        self._copied = False

    @property
    def tags(self) -> dict[str, str]:
        """A snapshot of the current tags."""
        with self._lock:
            return dict(self._tags)

    def _merge_tags(self, tags: Optional[Mapping[str, str]]) -> None:
        with self._lock:
            if not self._copied:
                self._tags = dict(self._tags)
                self._copied = True
            if tags:
                self._tags.update(tags)

    def _merge_context(self, ctx: Any, extractors: Iterable[ContextExtractor]) -> None:
        for extractor in extractors:
            self._merge_tags(extractor(ctx))

    def _resolve(self, bricks: Any) -> Any:
        try:
            return bricks.with_tags(self.tags)
        except Exception as exc:
            if self._on_error is None:
                raise
            self._on_error(exc)
            return None


class _TagsAware(_TagsMetric):
    def __init__(
        self,
        bricks: Any,
        predefined_tags: Optional[dict[str, str]],
        extractors: Optional[Iterable[ContextExtractor]],
        on_error: Optional[ErrorHandler],
    ) -> None:
        super().__init__(predefined_tags, on_error)
        self._bricks = bricks
        self._extractors = list(extractors or ())

    def with_tags(self, tags: Mapping[str, str]):
        """Add or overwrite tags and return this metric."""
        self._merge_tags(tags)
        return self

    def with_context(self, ctx: Any):
        """Add tags extracted from ``ctx`` and return this metric."""
        self._merge_context(ctx, self._extractors)
        return self


class TagsAwareCounter(_TagsAware):
    """Counter that applies its tags on every update."""

    def inc(self) -> None:
        """Increment by one."""
        counter = self._resolve(self._bricks)
        if counter is not None:
            counter.inc()

    def add(self, value: float) -> None:
        """Add ``value``; negative values are not advised."""
        counter = self._resolve(self._bricks)
        if counter is not None:
            counter.add(value)

    def with_tags(self, tags: Mapping[str, str]) -> TagsAwareCounter:
        """Add or overwrite tags and return this counter."""
        return super().with_tags(tags)

    def with_context(self, ctx: Any) -> TagsAwareCounter:
        """Add tags extracted from ``ctx`` and return this counter."""
        return super().with_context(ctx)


class TagsAwareGauge(_TagsAware):
    """Gauge that applies its tags on every update."""

    def set(self, value: float) -> None:
        """Set the gauge to ``value``."""
        gauge = self._resolve(self._bricks)
        if gauge is not None:
            gauge.set(value)

    def add(self, value: float) -> None:
        """Add ``value``, or subtract it when negative."""
        gauge = self._resolve(self._bricks)
        if gauge is not None:
            gauge.add(value)

    def inc(self) -> None:
        """Add one."""
        gauge = self._resolve(self._bricks)
        if gauge is not None:
            gauge.inc()

    def dec(self) -> None:
        """Subtract one."""
        gauge = self._resolve(self._bricks)
        if gauge is not None:
            gauge.dec()

    def with_tags(self, tags: Mapping[str, str]) -> TagsAwareGauge:
        """Add or overwrite tags and return this gauge."""
        return super().with_tags(tags)

    def with_context(self, ctx: Any) -> TagsAwareGauge:
        """Add tags extracted from ``ctx`` and return this gauge."""
        return super().with_context(ctx)


class TagsAwareHistogram(_TagsAware):
    """Histogram that applies its tags on every recording."""

    def record(self, value: float) -> None:
        """Record ``value``."""
        histogram = self._resolve(self._bricks)
        if histogram is not None:
            histogram.record(value)

    def with_tags(self, tags: Mapping[str, str]) -> TagsAwareHistogram:
        """Add or overwrite tags and return this histogram."""
        return super().with_tags(tags)

    def with_context(self, ctx: Any) -> TagsAwareHistogram:
        """Add tags extracted from ``ctx`` and return this histogram."""
        return super().with_context(ctx)


class TagsAwareTimer(_TagsAware):
    """Timer that applies its tags on every recording."""

    def record(self, duration: timedelta) -> None:
        """Record a measured ``duration``."""
        timer = self._resolve(self._bricks)
        if timer is not None:
            timer.record(duration)

    def with_tags(self, tags: Mapping[str, str]) -> TagsAwareTimer:
        """Add or overwrite tags and return this timer."""
        return super().with_tags(tags)

    def with_context(self, ctx: Any) -> TagsAwareTimer:
        """Add tags extracted from ``ctx`` and return this timer."""
        return super().with_context(ctx)