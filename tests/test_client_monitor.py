from datetime import timedelta
from types import SimpleNamespace

import pytest

from mortarkit.middleware.client_headers import RestRequest
from mortarkit.middleware.client_monitor import (
    monitor_grpc_client_calls_interceptor,
    monitor_rest_client_calls_interceptor,
    prepare_tags,
)
from mortarkit.middleware.context_extractor import CallContext


class FakeTimer:
    def __init__(self):
        self.contexts = []
        self.records = []

    def with_context(self, ctx):
        self.contexts.append(ctx)
        return self

    def record(self, duration):
        self.records.append(duration)


class FakeMetrics:
    def __init__(self):
        self.tags = []
        self.timers = []
        self.timer_obj = FakeTimer()

    def with_tags(self, tags):
        self.tags.append(dict(tags))
        return self

    def timer(self, name, desc):
        self.timers.append(name)
        return self.timer_obj


def test_prepare_tags_trims_colons():
    assert prepare_tags("wonder:", "/land", "rest", "true") == {
        "target": "wonder",
        "path": "/land",
        "success": "true",
        "ctype": "rest",
    }


def test_rest_client_metrics():
    metrics = FakeMetrics()
    ctx = CallContext()
    req = RestRequest("HEAD", "http://wonder:/land", context=ctx)
    response = SimpleNamespace(status_code=200)
    result = monitor_rest_client_calls_interceptor(metrics)(req, lambda r: response)
    assert result is response
    assert metrics.tags == [
        {"target": "wonder", "path": "/land", "success": "true", "ctype": "rest"}
    ]
    assert metrics.timers == ["client_calls_duration"]
    assert metrics.timer_obj.contexts == [ctx]
    assert len(metrics.timer_obj.records) == 1
    assert metrics.timer_obj.records[0] >= timedelta(0)


def test_rest_client_error_status_is_failure():
    metrics = FakeMetrics()
    req = RestRequest("GET", "http://wonder/land")
    monitor_rest_client_calls_interceptor(metrics)(req, lambda r: SimpleNamespace(status_code=500))
    assert metrics.tags[0]["success"] == "false"


def test_grpc_client_metrics():
    metrics = FakeMetrics()

    def invoker(ctx, method, req, reply, cc, *opts):
        raise RuntimeError("fake error")

    interceptor = monitor_grpc_client_calls_interceptor(metrics)
    with pytest.raises(RuntimeError, match="fake error"):
        interceptor(None, "/wonder.Land/Thing", None, None, SimpleNamespace(target=""), invoker)
    assert metrics.tags == [
        {"target": "", "path": "/wonder.Land/Thing", "success": "false", "ctype": "grpc"}
    ]
    assert metrics.timers == ["client_calls_duration"]
    assert len(metrics.timer_obj.records) == 1


def test_grpc_client_without_metrics_passes_through():
    interceptor = monitor_grpc_client_calls_interceptor(None)
    result = interceptor(None, "m", None, None, None, lambda *a: "reply")
    assert result == "reply"