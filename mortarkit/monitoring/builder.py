"""Builder for the tag-aware monitoring reporter."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any, Optional

from mortarkit.monitoring.metric_types import ContextExtractor, ErrorHandler, MonitorConfig
from mortarkit.monitoring.reporter import MortarReporter

_log = logging.getLogger(__name__)


def _log_error(err: BaseException) -> None:
    _log.warning("monitoring error, %s", err)


class WrapperBuilder:
    """Collects reporter settings and applies them in order on build."""

    def __init__(self) -> None:
        self._steps: list[Callable[[MonitorConfig], None]] = []

    def set_tags(self, tags: Optional[Mapping[str, str]]) -> WrapperBuilder:
        """Set default tags included in every metric; ``None`` is ignored."""

        def apply(config: MonitorConfig) -> None:
            if tags is not None:
                config.tags = dict(tags)

        self._steps.append(apply)
        return self

    def add_extractors(self, *extractors: ContextExtractor) -> WrapperBuilder:
        """Add extractors that supply tag values from the call context."""
        self._steps.append(lambda config: config.extractors.extend(extractors))
        return self

    def do_on_error(self, on_error: ErrorHandler) -> WrapperBuilder:
        """Set the handler called when a metric cannot be created or updated."""

        def apply(config: MonitorConfig) -> None:
            config.on_error = on_error

        self._steps.append(apply)
        return self

    def build(self, bricks_builder: Any) -> MortarReporter:
        """Build the backend reporter with ``bricks_builder`` and wrap it."""
        config = MonitorConfig()
        for step in self._steps:
            step(config)
        if config.on_error is None:
            config.on_error = _log_error
        if config.tags is None:
            config.tags = {}
        config.reporter = bricks_builder.build()
        return MortarReporter(config)


def builder() -> WrapperBuilder:
    """Create an empty builder."""
    return WrapperBuilder()