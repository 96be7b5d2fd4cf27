from datetime import timedelta

from mortarkit.monitoring.noop import NoopMetric, NoopTimer


def test_with_tags_returns_same_metric():
    errors = []
    metric = NoopMetric("requests", "all requests", RuntimeError("boom"), errors.append)
    assert metric.with_tags({"a": "b"}) is metric
    assert errors == []


def test_every_operation_reports_error():
    errors = []
    metric = NoopMetric("requests", "all requests", RuntimeError("boom"), errors.append)
    metric.inc()
    metric.add(1.5)
    metric.record(2.0)
    metric.set(3.0)
    metric.dec()
    assert len(errors) == 5


def test_error_message_and_cause():
    errors = []
    original = RuntimeError("boom")
    metric = NoopMetric("requests", "all requests", original, errors.append)
    metric.inc()
    assert str(errors[0]) == "still trying to use failed metric requests:all requests, boom"
    assert errors[0].__cause__ is original


def test_timer_record_reports_error():
    errors = []
    original = RuntimeError("boom")
    timer = NoopTimer("requests", "all requests", original, errors.append)
    timer.record(timedelta(milliseconds=250))
    assert len(errors) == 1
    assert errors[0].__cause__ is original


def test_timer_with_tags_returns_same_timer():
    errors = []
    timer = NoopTimer("requests", "all requests", RuntimeError("boom"), errors.append)
    assert timer.with_tags({}) is timer
    timer.with_tags({"x": "y"}).record(timedelta(seconds=1))
    assert len(errors) == 1