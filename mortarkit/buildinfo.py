"""Build and runtime information about the running service."""

from __future__ import annotations

import json
import re
import socket
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

NOT_PROVIDED = "wasn't provided during build"

_INIT_TIME = datetime.now().astimezone()
_INIT_MONOTONIC = time.monotonic()
try:
    _HOSTNAME = socket.gethostname()
except OSError as _exc:
    _HOSTNAME = str(_exc)

_RFC3339 = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?([Zz]|[+-]\d{2}:\d{2})"
)


@dataclass(frozen=True)
class BuildValues:
    """Values stamped into the service at build time."""

    git_commit: str = ""
    version: str = ""
    build_timestamp: str = ""
    build_tag: str = ""


@dataclass
class Information:
    """Build information together with start time, uptime and host name."""

    git_commit: str
    version: str
    build_tag: str
    build_time: Optional[datetime]
    init_time: datetime
    up_time: timedelta
    hostname: str

    def to_json(self) -> str:
        """Serialise to JSON, leaving out empty strings and a zero uptime."""
        data: dict[str, str] = {}
        for key, value in (
            ("git_commit", self.git_commit),
            ("version", self.version),
            ("build_tag", self.build_tag),
        ):
            if value:
                data[key] = value
        data["build_time"] = _format_time(self.build_time)
        data["init_time"] = _format_time(self.init_time)
        if self.up_time:
            data["up_time"] = format_duration(self.up_time)
        if self.hostname:
            data["hostname"] = self.hostname
        return json.dumps(data)


def _format_time(moment: Optional[datetime]) -> str:
    if moment is None:
        return "0001-01-01T00:00:00Z"
    text = moment.strftime("%Y-%m-%dT%H:%M:%S")
    if moment.microsecond:
        text += f".{moment.microsecond:06d}".rstrip("0")
    offset = moment.utcoffset()
    if not offset:
        return text + "Z"
    minutes = int(offset.total_seconds()) // 60
    sign = "+" if minutes >= 0 else "-"
    hours, mins = divmod(abs(minutes), 60)
    return f"{text}{sign}{hours:02d}:{mins:02d}"


def _parse_rfc3339(text: str) -> Optional[datetime]:
    match = _RFC3339.fullmatch(text)
    if match is None:
        return None
    year, month, day, hour, minute, second, fraction, zone = match.groups()
    microsecond = int((fraction or "0")[:6].ljust(6, "0"))
    if zone in ("Z", "z"):
        tz = timezone.utc
    else:
        sign = 1 if zone[0] == "+" else -1
        hours, minutes = int(zone[1:3]), int(zone[4:6])
        if hours > 23 or minutes > 59:
            return None
        tz = timezone(sign * timedelta(hours=hours, minutes=minutes))
    try:
        return datetime(
            int(year), int(month), int(day), int(hour), int(minute), int(second), microsecond, tzinfo=tz
        )
    except ValueError:
        return None


def _split_fraction(value: int, precision: int) -> tuple[int, str]:
    whole, fraction = divmod(value, 10**precision)
    digits = f"{fraction:0{precision}d}".rstrip("0")
    return whole, f".{digits}" if digits else ""


def format_duration(duration: timedelta) -> str:
    """Format a duration as ``1h2m3.5s``, ``1.5ms``, ``250µs`` and so on."""
    nanoseconds = ((duration.days * 86400 + duration.seconds) * 1_000_000 + duration.microseconds) * 1000
    if nanoseconds == 0:
        return "0s"
    sign = "-" if nanoseconds < 0 else ""
    magnitude = abs(nanoseconds)
    if magnitude < 1_000:
        return f"{sign}{magnitude}ns"
    if magnitude < 1_000_000:
        whole, fraction = _split_fraction(magnitude, 3)
        return f"{sign}{whole}{fraction}µs"
    if magnitude < 1_000_000_000:
        whole, fraction = _split_fraction(magnitude, 6)
        return f"{sign}{whole}{fraction}ms"
    total_seconds, fraction = _split_fraction(magnitude, 9)
    text = f"{total_seconds % 60}{fraction}s"
    total_minutes = total_seconds // 60
    if total_minutes:
        text = f"{total_minutes % 60}m{text}"
        hours = total_minutes // 60
        if hours:
            text = f"{hours}h{text}"
    return sign + text


def get_build_information(
    include_explanations: bool = False, values: Optional[BuildValues] = None
) -> Information:
    """Collect build values with the process start time, uptime and host name.

    With ``include_explanations`` empty build values are replaced by a note
    saying they were not provided.
    """
    values = values if values is not None else BuildValues()
    build_time = _parse_rfc3339(values.build_timestamp) if values.build_timestamp else None
    git_commit, version, build_tag = values.git_commit, values.version, values.build_tag
    if include_explanations:
        git_commit = git_commit or NOT_PROVIDED
        version = version or NOT_PROVIDED
        build_tag = build_tag or NOT_PROVIDED
    return Information(
        git_commit=git_commit,
        version=version,
        build_tag=build_tag,
        build_time=build_time,
        init_time=_INIT_TIME,
        up_time=timedelta(seconds=time.monotonic() - _INIT_MONOTONIC),
        hostname=_HOSTNAME,
    )