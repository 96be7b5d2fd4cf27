"""Server interceptor that times gRPC method calls."""

from __future__ import annotations

import asyncio
import concurrent.futures
import time
from collections.abc import Callable
from datetime import timedelta
from typing import Any, Optional

from mortarkit.httpclient import Code, StatusError
from mortarkit.textutil import split_method_and_package

GRPC_CODE_TAG_NAME = "code"
GRPC_NAME_PREFIX = "grpc_"


def grpc_code_tag_value(err: Optional[BaseException]) -> str:
    """Return the numeric gRPC code of ``err`` as text; no error means OK."""
    if err is None:
        code: Any = Code.OK
    elif isinstance(err, StatusError):
        code = err.code
    elif isinstance(err, TimeoutError):
        code = Code.DEADLINE_EXCEEDED
    elif isinstance(err, (asyncio.CancelledError, concurrent.futures.CancelledError)):
        code = Code.CANCELLED
    else:
        code = Code.UNKNOWN
    return str(int(code))


def monitor_grpc_interceptor(metrics: Optional[Any]) -> Callable[..., Any]:
    """Build a unary server interceptor timing each call, tagged with its gRPC code.

    ``info`` passed to the interceptor has a ``full_method`` attribute.
    """

    def interceptor(ctx: Any, req: Any, info: Any, handler: Callable[[Any, Any], Any]) -> Any:
        start = time.monotonic()
        error: Optional[BaseException] = None
        try:
            return handler(ctx, req)
        except BaseException as exc:
            error = exc
            raise
        finally:
            if metrics is not None:
                elapsed = timedelta(seconds=time.monotonic() - start)
                _, method_name = split_method_and_package(info.full_method)
                timer = metrics.with_tags({GRPC_CODE_TAG_NAME: grpc_code_tag_value(error)}).timer(
                    GRPC_NAME_PREFIX + method_name, f"time api calls for {info.full_method}"
                )
                timer.record(elapsed)

    return interceptor