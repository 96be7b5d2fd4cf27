"""Extract selected incoming gRPC metadata into log fields."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Optional

Metadata = Mapping[str, Sequence[str]]


@dataclass(frozen=True)
class CallContext:
    """Call context carrying incoming and outgoing gRPC metadata.

    ``None`` means the context holds no metadata of that direction at all.
    """

    incoming: Optional[Metadata] = None
    outgoing: Optional[Metadata] = None


@dataclass(frozen=True)
class HeaderPrefixes:
    """Lower-case header prefixes whose incoming metadata entries are extracted."""

    prefixes: tuple[str, ...] = ()

    def extract(self, ctx: CallContext) -> dict[str, str]:
        """Return matching incoming metadata, keyed by lower-case name, values joined by commas."""
        output: dict[str, str] = {}
        if ctx.incoming is None:
            return output
        for key, values in ctx.incoming.items():
            lower = key.lower()
            if any(lower.startswith(prefix) for prefix in self.prefixes):
                output[lower] = ",".join(values)
        return output


def logger_grpc_incoming_context_extractor(
    headers: Optional[Iterable[str]],
) -> Callable[[CallContext], dict[str, str]]:
    """Build a log context extractor for the configured header prefixes.

    ``headers`` is ``None`` when the setting is absent, in which case nothing
    is extracted.
    """
    included = [header.lower() for header in headers or ()]
    included.sort(key=len)
    return HeaderPrefixes(tuple(included)).extract