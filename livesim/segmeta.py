"""Mapping of live segment numbers and times onto the segments of a looped asset."""

from __future__ import annotations

import bisect
import math
from dataclasses import dataclass, field

from livesim.availability import check_time_validity


def _div(a: int, b: int) -> int:
    """Integer division that truncates toward zero."""
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b > 0) else -quotient


@dataclass(frozen=True)
class Segment:
    """A segment of the on-demand asset, with times in the media timescale."""

    start_time: int
    end_time: int
    nr: int

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time


@dataclass
class RepInfo:
    """A representation of the on-demand asset with its segment list."""

    id: str
    media_timescale: int
    segments: list[Segment] = field(default_factory=list)

    def find_segment_index(self, time: int) -> int:
        """Index of the first segment ending after time, or len(segments) if none."""
        return bisect.bisect_right(self.segments, time, key=lambda seg: seg.end_time)

    def _wrap_duration(self, loop_dur_ms: int) -> int:
        if not self.segments:
            raise ValueError(f"representation {self.id!r} has no segments")
        wrap_dur = _div(loop_dur_ms * self.media_timescale, 1000)
        if wrap_dur <= 0:
            raise ValueError("loop duration is too short for the media timescale")
        return wrap_dur


@dataclass(frozen=True)
class SegMeta:
    """Where a live segment comes from and what it becomes."""

    rep: RepInfo
    orig_time: int
    new_time: int
    orig_nr: int
    new_nr: int
    orig_dur: int
    new_dur: int
    timescale: int


def _locate_by_nr(
    loop_dur_ms: int, rep: RepInfo, nr: int, start_nr: int
) -> tuple[Segment, int]:
    """Return the source segment for a live number and the time of its loop wrap."""
    wrap_dur = rep._wrap_duration(loop_dur_ms)
    nr_after_start = nr - start_nr
    if nr_after_start < 0:
        raise LookupError("not found")
    wrap_len = len(rep.segments)
    nr_wraps = _div(nr_after_start, wrap_len)
    rel_nr = nr_after_start - nr_wraps * wrap_len
    return rep.segments[rel_nr], nr_wraps * wrap_dur


def _avail_time_s(rep: RepInfo, seg: Segment, wrap_time: int, start_time_s: int) -> float:
    media_ref = start_time_s * rep.media_timescale
    return (seg.end_time + wrap_time + media_ref) / rep.media_timescale


def segment_availability_time_ms(
    loop_dur_ms: int,
    rep: RepInfo,
    nr: int,
    start_nr: int,
    start_time_s: int,
    availability_time_offset_s: float,
) -> int:
    """Availability time in milliseconds of the live segment with number nr."""
    seg, wrap_time = _locate_by_nr(loop_dur_ms, rep, nr, start_nr)
    if availability_time_offset_s == math.inf:
        return start_time_s * 1000
    avail_s = _avail_time_s(rep, seg, wrap_time, start_time_s) - availability_time_offset_s
    return int(avail_s * 1000)


def seg_meta_from_nr(
    loop_dur_ms: int,
    rep: RepInfo,
    nr: int,
    start_nr: int,
    start_time_s: int,
    now_ms: int,
    time_shift_buffer_depth_s: float,
    availability_time_offset_s: float,
) -> SegMeta:
    """Find the segment for a live number, raising if it is not available now."""
    seg, wrap_time = _locate_by_nr(loop_dur_ms, rep, nr, start_nr)
    check_time_validity(
        _avail_time_s(rep, seg, wrap_time, start_time_s),
        now_ms * 0.001,
        float(time_shift_buffer_depth_s),
        availability_time_offset_s,
    )
    return SegMeta(
        rep=rep,
        orig_time=seg.start_time,
        new_time=wrap_time + seg.start_time,
        orig_nr=seg.nr,
        new_nr=nr,
        orig_dur=seg.duration,
        new_dur=seg.duration,
        timescale=rep.media_timescale,
    )


def seg_meta_from_time(
    loop_dur_ms: int,
    rep: RepInfo,
    time: int,
    start_nr: int,
    start_time_s: int,
    now_ms: int,
    time_shift_buffer_depth_s: float,
    availability_time_offset_s: float,
) -> SegMeta:
    """Find the segment for a live media time, raising if it is not available now."""
    if time < 0:
        raise ValueError("media time must not be negative")
    wrap_dur = rep._wrap_duration(loop_dur_ms)
    nr_wraps = time // wrap_dur
    wrap_time = nr_wraps * wrap_dur
    time_after_wrap = time - wrap_time
    idx = rep.find_segment_index(time_after_wrap)
    if idx == len(rep.segments):
        raise ValueError("no matching segment")
    seg = rep.segments[idx]
    if seg.start_time != time_after_wrap:
        raise ValueError(f"segment time mismatch {time_after_wrap} <-> {seg.start_time}")
    check_time_validity(
        _avail_time_s(rep, seg, wrap_time, start_time_s),
        now_ms * 0.001,
        float(time_shift_buffer_depth_s),
        availability_time_offset_s,
    )
    return SegMeta(
        rep=rep,
        orig_time=seg.start_time,
        new_time=time,
        orig_nr=seg.nr,
        new_nr=start_nr + idx + nr_wraps * len(rep.segments),
        orig_dur=seg.duration,
        new_dur=seg.duration,
        timescale=rep.media_timescale,
    )