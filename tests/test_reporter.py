from unittest.mock import Mock, call

import pytest

from mortarkit.monitoring.metric_types import MonitorConfig
from mortarkit.monitoring.reporter import MortarReporter


@pytest.fixture
def setup():
    external = Mock()
    backend = Mock()
    backend.metrics.return_value = external
    config = MonitorConfig(
        reporter=backend,
        tags={"one": "1", "three": "3"},
        extractors=[lambda ctx: {"three": "33"}],
        on_error=lambda e: None,
    )
    return MortarReporter(config), backend, external


def test_connect_close(setup):
    reporter, backend, _ = setup
    ctx = object()
    backend.connect.return_value = None
    backend.close.return_value = None
    assert reporter.connect(ctx) is None
    assert reporter.close(ctx) is None
    assert backend.connect.call_args == call(ctx)
    assert backend.close.call_args == call(ctx)


def test_connect_error_propagates(setup):
    reporter, backend, _ = setup
    backend.connect.side_effect = ConnectionError("down")
    with pytest.raises(ConnectionError, match="down"):
        reporter.connect(None)


def test_metrics_returns_reporter(setup):
    reporter, _, external = setup
    assert reporter.metrics() is reporter
    assert reporter.external_metrics is external


def test_static_tags(setup):
    reporter, _, external = setup
    bricks = Mock()
    inner = Mock()
    external.counter.return_value = bricks
    bricks.with_tags.return_value = inner
    reporter.metrics().counter("rate", "rate of something").inc()
    assert external.counter.call_args == call("rate", "rate of something", "one", "three")
    assert bricks.with_tags.call_args == call({"one": "1", "three": "3"})
    assert inner.inc.call_count == 1


def test_with_custom_tags(setup):
    reporter, _, external = setup
    bricks = Mock()
    inner = Mock()
    external.counter.return_value = bricks
    bricks.with_tags.return_value = inner
    counter = reporter.metrics().with_tags({"two": "2"}).counter("additional", "tags")
    assert external.counter.call_args == call("additional", "tags", "one", "three", "two")
    counter = counter.with_tags({"one": "10"})
    counter.inc()
    counter.inc()
    expected = {"one": "10", "two": "2", "three": "3"}
    assert bricks.with_tags.call_args_list == [call(expected), call(expected)]
    assert inner.inc.call_count == 2
    assert reporter.config.tags == {"one": "1", "three": "3"}


def test_registry_is_shared(setup):
    reporter, _, external = setup
    external.counter.return_value = Mock()
    for _ in range(100):
        reporter.metrics().counter("unique", "unique counter")
    assert external.counter.call_count == 1


def test_gauge_histogram_timer_use_default_keys(setup):
    reporter, _, external = setup
    reporter.gauge("g", "gd")
    reporter.histogram("h", "hd", [0.1])
    reporter.timer("t", "td")
    assert external.gauge.call_args == call("g", "gd", "one", "three")
    assert external.histogram.call_args == call("h", "hd", [0.1], "one", "three")
    assert external.timer.call_args == call("t", "td", "one", "three")