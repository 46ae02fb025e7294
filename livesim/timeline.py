"""Segment timeline entries and the arithmetic of a looping live timeline."""

from __future__ import annotations

import math
from dataclasses import dataclass, field


def _div(a: int, b: int) -> int:
    """Integer division that truncates toward zero."""
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b > 0) else -quotient


def _round_half_away(x: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


@dataclass
class S:
    """One SegmentTimeline S element: start time t, duration d and repeat count r."""

    t: int | None = None
    d: int = 0
    r: int = 0
    n: int | None = None
    k: int | None = None


@dataclass(frozen=True)
class WrapTimes:
    """Start and now times of a live window, split into loop wraps and remainders."""

    start_wraps: int
    start_wrap_ms: int
    start_time_ms: int
    start_rel_ms: int
    now_ms: int
    now_wraps: int
    now_wrap_ms: int
    now_rel_ms: int


@dataclass
class SegEntries:
    """Timeline entries for a representation with their first number and timescale."""

    entries: list[S] = field(default_factory=list)
    start_nr: int = 0
    media_timescale: int = 0

    def last_nr(self) -> int:
        """Number of the last segment described by the entries."""
        count = sum(entry.r + 1 for entry in self.entries)
        return self.start_nr + count - 1

    def last_time(self) -> int:
        """Start time of the last segment described by the entries."""
        time = 0
        last_d = 0
        for entry in self.entries:
            if entry.t is not None:
                time = entry.t
            time += entry.d * (entry.r + 1)
            last_d = entry.d
        return time - last_d


def calc_wrap_times(
    loop_dur_ms: int, start_time_s: int, now_ms: int, time_shift_buffer_depth_ms: int
) -> WrapTimes:
    """Compute the loop wraps of the window start and of now for a looping asset."""
    origin_ms = start_time_s * 1000
    start_time_ms = max(now_ms - int(time_shift_buffer_depth_ms), origin_ms)
    start_wraps = _div(start_time_ms - origin_ms, loop_dur_ms)
    start_wrap_ms = start_wraps * loop_dur_ms + origin_ms
    now_wraps = _div(now_ms - origin_ms, loop_dur_ms)
    now_wrap_ms = now_wraps * loop_dur_ms + origin_ms
    return WrapTimes(
        start_wraps=start_wraps,
        start_wrap_ms=start_wrap_ms,
        start_time_ms=start_time_ms,
        start_rel_ms=start_time_ms - start_wrap_ms,
        now_ms=now_ms,
        now_wraps=now_wraps,
        now_wrap_ms=now_wrap_ms,
        now_rel_ms=now_ms - now_wrap_ms,
    )


def reduce_s(
    entries: list[S],
    start_nr: int | None,
    timescale: int,
    period_start_s: int,
    period_end_s: int,
) -> tuple[list[S], int]:
    """Keep the segments that start inside [period_start_s, period_end_s).

    Returns the reduced entries and the number of the first kept segment.
    """
    p_start = period_start_s * timescale
    p_end = period_end_s * timescale
    nr = start_nr if start_nr is not None else 0
    out_start_nr = nr
    reduced: list[S] = []
    current: S | None = None
    time = 0
    for entry in entries:
        if entry.t is not None:
            time = entry.t
        d = entry.d
        for _ in range(entry.r + 1):
            if time < p_start:
                time += d
                nr += 1
                continue
            if time >= p_end:
                return reduced, nr
            if current is not None and d == current.d:
                current.r += 1
            else:
                if current is None:
                    out_start_nr = nr
                current = S(t=time, d=d)
                reduced.append(current)
            time += d
    return reduced, out_start_nr


def change_timeline_timescale(
    entries: list[S], old_timescale: int, new_timescale: int
) -> list[S]:
    """Rescale timeline entries to a new timescale, rounding to nearest."""
    factor = new_timescale / old_timescale
    rescaled = []
    for entry in entries:
        if entry.t is None:
            raise ValueError("timeline entry without start time")
        rescaled.append(
            S(
                t=_round_half_away(entry.t * factor),
                d=_round_half_away(entry.d * factor),
                r=entry.r,
            )
        )
    return rescaled


def segment_timings(entries: list[S]) -> list[tuple[int, int]]:
    """Expand timeline entries into (start time, duration) pairs."""
    if not entries:
        return []
    time = entries[0].t or 0
    timings = []
    for entry in entries:
        for _ in range(entry.r + 1):
            timings.append((time, entry.d))
            time += entry.d
    return timings