"""Client interceptors that forward selected incoming metadata to outgoing calls."""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from mortarkit.middleware.context_extractor import CallContext
from mortarkit.middleware.gateway_headers import canonical_mime_header_key


@dataclass
class RestRequest:
    """An outgoing HTTP request; header names are kept in canonical form."""

    method: str
    url: str
    headers: dict[str, list[str]] = field(default_factory=dict)
    body: bytes = b""
    context: CallContext = field(default_factory=CallContext)


def _append_outgoing(ctx: CallContext, key: str, value: str) -> CallContext:
    outgoing = {k: list(v) for k, v in (ctx.outgoing or {}).items()}
    outgoing.setdefault(key.lower(), []).append(value)
    return dataclasses.replace(ctx, outgoing=outgoing)


def _matching(ctx: CallContext, prefixes: tuple[str, ...]):
    """Yield ``(key, value)`` for incoming metadata whose lower-case key starts with a prefix."""
    if ctx.incoming is None:
        return
    for prefix in prefixes:
        for key, values in ctx.incoming.items():
            if key.lower().startswith(prefix):
                for value in values:
                    yield key, value


def copy_grpc_headers_client_interceptor(header_prefixes: Iterable[str]) -> Callable[..., Any]:
    """Build a unary gRPC client interceptor copying matching incoming metadata to outgoing.

    Useful to pass, for example, an ``authorization`` header on to the next service.
    """
    prefixes = tuple(header_prefixes)

    def interceptor(ctx: CallContext, method: str, req: Any, reply: Any, cc: Any, invoker, *opts):
        for key, value in list(_matching(ctx, prefixes)):
            ctx = _append_outgoing(ctx, key, value)
        return invoker(ctx, method, req, reply, cc, *opts)

    return interceptor


def copy_grpc_headers_http_client_interceptor(
    header_prefixes: Iterable[str],
) -> Callable[[RestRequest, Callable[[RestRequest], Any]], Any]:
    """Build an HTTP client interceptor copying matching incoming metadata to request headers."""
    prefixes = tuple(header_prefixes)

    def interceptor(req: RestRequest, handler: Callable[[RestRequest], Any]) -> Any:
        for key, value in list(_matching(req.context, prefixes)):
            req.headers.setdefault(canonical_mime_header_key(key), []).append(value)
        return handler(req)

    return interceptor