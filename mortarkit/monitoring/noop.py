"""Stand-in metrics used when the metrics backend failed to create a metric."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import timedelta


class NoopMetric:
    """A metric that records nothing and reports its original creation error on every use."""

    def __init__(
        self,
        name: str,
        desc: str,
        err: BaseException,
        on_error: Callable[[BaseException], None],
    ) -> None:
        self.name = name
        self.desc = desc
        self.err = err
        self.on_error = on_error

    def with_tags(self, tags: Mapping[str, str]) -> NoopMetric:
        """Return this metric unchanged."""
        return self

    def inc(self) -> None:
        """Report the failure instead of incrementing."""
        self._report()

    def add(self, value: float) -> None:
        """Report the failure instead of adding."""
        self._report()

    def record(self, value: float) -> None:
        """Report the failure instead of recording."""
        self._report()

    def set(self, value: float) -> None:
        """Report the failure instead of setting."""
        self._report()

    def dec(self) -> None:
        """Report the failure instead of decrementing."""
        self._report()

    def _report(self) -> None:
        error = RuntimeError(
            f"still trying to use failed metric {self.name}:{self.desc}, {self.err}"
        )
        error.__cause__ = self.err
        self.on_error(error)


class NoopTimer(NoopMetric):
    """A failed timer; recording a duration reports the creation error."""

    def record(self, duration: timedelta) -> None:
        """Report the failure instead of recording ``duration``."""
        super().record(duration.total_seconds())