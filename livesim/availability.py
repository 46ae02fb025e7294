"""Segment availability checks and TTML timestamp shifting."""

from __future__ import annotations

import math
import re

TIME_SHIFT_BUFFER_DEPTH_MARGIN_S = 10

_TIME_EXP = re.compile(
    rb"(?P<hours>\d\d+):(?P<minutes>\d\d):(?P<seconds>\d\d)(?P<milliseconds>\.\d\d\d)?",
    re.ASCII,
)


class AvailabilityError(Exception):
    """Base class for a segment that is not available at the requested time."""


class TooEarlyError(AvailabilityError):
    """The segment will become available later."""

    def __init__(self, ms: int):
        super().__init__(f"too early by {ms}ms")
        self.ms = ms


class GoneError(AvailabilityError):
    """The segment has left the time-shift buffer."""

    def __init__(self) -> None:
        super().__init__("too late")


def _round_half_away(x: float) -> int:
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


def check_time_validity(
    avail_time_s: float,
    now_s: float,
    time_shift_buffer_depth_s: float,
    availability_time_offset_s: float,
) -> None:
    """Raise TooEarlyError or GoneError if a segment is not available now.

    An infinite availability time offset means always available.
    """
    if availability_time_offset_s == math.inf:
        return
    if availability_time_offset_s > 0:
        avail_time_s -= availability_time_offset_s
    if avail_time_s > now_s:
        raise TooEarlyError(_round_half_away((avail_time_s - now_s) * 1000.0))
    window = time_shift_buffer_depth_s + TIME_SHIFT_BUFFER_DEPTH_MARGIN_S
    if avail_time_s < now_s - window:
        raise GoneError()


def _shift_match(match: re.Match, time_shift_ms: int) -> str:
    hours = int(match.group("hours"))
    minutes = int(match.group("minutes"))
    seconds = int(match.group("seconds"))
    fraction = match.group("milliseconds")
    milliseconds = int(fraction[1:]) if fraction else 0
    total_ms = hours * 3_600_000 + minutes * 60_000 + seconds * 1000 + milliseconds
    total_ms += time_shift_ms
    new_hours, rest = divmod(total_ms, 3_600_000)
    new_minutes = rest // 60_000
    new_seconds = (total_ms % 60_000) // 1000
    new_ms = total_ms % 1000
    return f"{new_hours:02d}:{new_minutes:02d}:{new_seconds:02d}.{new_ms:03d}"


def shift_timestamp(timestamp: str, time_shift_ms: int) -> str:
    """Shift a timestamp hh:mm:ss[.mmm] by milliseconds; output always has .mmm."""
    match = _TIME_EXP.search(timestamp.encode("utf-8"))
    if match is None:
        raise ValueError(f"not a timestamp: {timestamp!r}")
    return _shift_match(match, time_shift_ms)


def shift_ttml_timestamps(data: bytes, time_shift_ms: int) -> bytes:
    """Shift every hh:mm:ss[.mmm] timestamp in TTML data by milliseconds."""
    return _TIME_EXP.sub(
        lambda m: _shift_match(m, time_shift_ms).encode("ascii"), bytes(data)
    )


def is_image(seg_path: str) -> bool:
    """Tell whether a segment path names a JPEG image."""
    name = seg_path[seg_path.rfind("/") + 1:]
    dot = name.rfind(".")
    return dot >= 0 and name[dot:] == ".jpg"