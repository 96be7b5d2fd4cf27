"""Trace carrier backed by gRPC-style metadata."""

from collections.abc import Callable


class MDTraceCarrier(dict):
    """Metadata mapping of lower-case keys to lists of values, usable as a trace carrier."""

    def set(self, key: str, value: str) -> None:
        """Replace the values of ``key`` (lower-cased) with the single ``value``."""
        self[key.lower()] = [value]

    def foreach_key(self, handler: Callable[[str, str], None]) -> None:
        """Call ``handler(key, value)`` for every value; an exception from it stops the walk."""
        for key, values in self.items():
            for value in values:
                handler(key, value)