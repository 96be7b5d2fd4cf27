"""Client interceptors that time outgoing gRPC and REST calls."""

from __future__ import annotations

import time
from collections.abc import Callable
from datetime import timedelta
from typing import Any, Optional
from urllib.parse import urlsplit

CLIENT_TIMER_METRIC = "client_calls_duration"
CLIENT_TIMER_METRIC_DESCRIPTION = "Monitor external HTTP client calls"
TARGET_TAG = "target"
PATH_TAG = "path"
SUCCESS_TAG = "success"
TYPE_TAG = "ctype"
TYPE_GRPC = "grpc"
TYPE_REST = "rest"

_BAD_REQUEST = 400


def prepare_tags(host: str, path: str, client_type: str, success: str) -> dict[str, str]:
    """Build the tags of a client call, stripping stray colons from ``host``."""
    return {
        TARGET_TAG: host.strip(":"),
        PATH_TAG: path,
        SUCCESS_TAG: success,
        TYPE_TAG: client_type,
    }


def _record(metrics: Any, tags: dict[str, str], ctx: Any, start: float) -> None:
    elapsed = timedelta(seconds=time.monotonic() - start)
    (
        metrics.with_tags(tags)
        .timer(CLIENT_TIMER_METRIC, CLIENT_TIMER_METRIC_DESCRIPTION)
        .with_context(ctx)
        .record(elapsed)
    )


def monitor_grpc_client_calls_interceptor(metrics: Optional[Any]) -> Callable[..., Any]:
    """Build a unary gRPC client interceptor timing every call when ``metrics`` is given."""

    def interceptor(ctx: Any, method: str, req: Any, reply: Any, cc: Any, invoker, *opts):
        start = time.monotonic()
        success = False
        try:
            result = invoker(ctx, method, req, reply, cc, *opts)
            success = True
            return result
        finally:
            if metrics is not None:
                target = getattr(cc, "target", "") or ""
                tags = prepare_tags(target, method, TYPE_GRPC, str(success).lower())
                _record(metrics, tags, ctx, start)

    return interceptor


def monitor_rest_client_calls_interceptor(metrics: Optional[Any]) -> Callable[[Any, Callable], Any]:
    """Build a REST client interceptor timing every call when ``metrics`` is given.

    A call succeeds when the handler returns a status below 400.
    """

    def interceptor(req: Any, handler: Callable[[Any], Any]) -> Any:
        start = time.monotonic()
        success = False
        try:
            response = handler(req)
            success = response.status_code < _BAD_REQUEST
            return response
        finally:
            if metrics is not None:
                parts = urlsplit(req.url)
                tags = prepare_tags(parts.netloc, parts.path, TYPE_REST, str(success).lower())
                _record(metrics, tags, req.context, start)

    return interceptor