import json
import re
import socket
from datetime import datetime, timedelta, timezone

import pytest

from mortarkit.buildinfo import BuildValues, format_duration, get_build_information

INJECTED = BuildValues(
    git_commit="1234",
    version="v0.0.1",
    build_timestamp="2020-08-12T17:11:51Z",
    build_tag="abc",
)


def _assert_runtime_fields(info):
    now = datetime.now(timezone.utc)
    assert info.hostname == socket.gethostname()
    assert info.init_time <= now
    assert info.up_time >= timedelta(0)
    assert abs((info.init_time + info.up_time) - now) < timedelta(seconds=1)


def test_without_defaults():
    info = get_build_information()
    assert info.git_commit == ""
    assert info.build_tag == ""
    assert info.version == ""
    assert info.build_time is None
    _assert_runtime_fields(info)


def test_without_defaults_with_explanations():
    info = get_build_information(True)
    assert info.git_commit == "wasn't provided during build"
    assert info.build_tag == "wasn't provided during build"
    assert info.version == "wasn't provided during build"
    assert info.build_time is None
    _assert_runtime_fields(info)


def test_with_defaults():
    info = get_build_information(True, INJECTED)
    assert info.git_commit == "1234"
    assert info.build_tag == "abc"
    assert info.version == "v0.0.1"
    assert info.build_time == datetime(2020, 8, 12, 17, 11, 51, tzinfo=timezone.utc)
    _assert_runtime_fields(info)


def test_unparsable_timestamp_gives_no_build_time():
    info = get_build_information(values=BuildValues(build_timestamp="yesterday"))
    assert info.build_time is None


def test_timestamp_with_offset_and_fraction():
    info = get_build_information(values=BuildValues(build_timestamp="2020-08-12T17:11:51.5+02:00"))
    assert info.build_time == datetime(2020, 8, 12, 15, 11, 51, 500000, tzinfo=timezone.utc)


def test_duration_marshaler():
    data = json.loads(get_build_information().to_json())
    assert re.fullmatch(r".+s", data["up_time"])
    assert "git_commit" not in data
    assert data["build_time"] == "0001-01-01T00:00:00Z"


def test_json_with_values():
    data = json.loads(get_build_information(values=INJECTED).to_json())
    assert data["git_commit"] == "1234"
    assert data["version"] == "v0.0.1"
    assert data["build_tag"] == "abc"
    assert data["build_time"] == "2020-08-12T17:11:51Z"


@pytest.mark.parametrize(
    "duration, expected",
    [
        (timedelta(0), "0s"),
        (timedelta(microseconds=1), "1µs"),
        (timedelta(microseconds=1500), "1.5ms"),
        (timedelta(milliseconds=1500), "1.5s"),
        (timedelta(minutes=90), "1h30m0s"),
        (timedelta(hours=1, seconds=5), "1h0m5s"),
        (timedelta(seconds=-1.5), "-1.5s"),
    ],
)
def test_format_duration(duration, expected):
    assert format_duration(duration) == expected