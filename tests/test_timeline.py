import pytest

from livesim.timeline import (
    S,
    SegEntries,
    WrapTimes,
    calc_wrap_times,
    change_timeline_timescale,
    reduce_s,
    segment_timings,
)


def test_calc_wrap_times_basic():
    wt = calc_wrap_times(8000, 0, 100_000, 60_000)
    assert wt == WrapTimes(
        start_wraps=5,
        start_wrap_ms=40_000,
        start_time_ms=40_000,
        start_rel_ms=0,
        now_ms=100_000,
        now_wraps=12,
        now_wrap_ms=96_000,
        now_rel_ms=4000,
    )


def test_calc_wrap_times_clamped_to_start():
    wt = calc_wrap_times(8000, 10, 30_000, 60_000)
    assert wt.start_time_ms == 10_000
    assert wt.start_wraps == 0
    assert wt.start_rel_ms == 0
    assert wt.now_wraps == 2
    assert wt.now_wrap_ms == 26_000
    assert wt.now_rel_ms == 4000


def test_calc_wrap_times_before_start_truncates():
    wt = calc_wrap_times(8000, 10, 5000, 60_000)
    assert wt.now_wraps == 0
    assert wt.now_wrap_ms == 10_000
    assert wt.now_rel_ms == -5000


def test_seg_entries_last_nr_and_time():
    se = SegEntries(entries=[S(t=0, d=2, r=2), S(d=3)], start_nr=5, media_timescale=1)
    assert se.last_nr() == 8
    assert se.last_time() == 6


def test_seg_entries_empty():
    se = SegEntries(start_nr=3)
    assert se.last_nr() == 2
    assert se.last_time() == 0


def _window():
    # 2s segments at timescale 90000 starting at 938s, 31 segments.
    return [S(t=938 * 90000, d=180000, r=30)]


def test_reduce_s_first_period():
    entries, nr = reduce_s(_window(), 469, 90000, 900, 960)
    assert nr == 469
    assert entries == [S(t=938 * 90000, d=180000, r=10)]


def test_reduce_s_second_period():
    entries, nr = reduce_s(_window(), 469, 90000, 960, 1020)
    assert nr == 480
    assert entries == [S(t=960 * 90000, d=180000, r=19)]


def test_reduce_s_does_not_mutate_input():
    window = _window()
    reduce_s(window, 469, 90000, 900, 960)
    assert window == _window()


def test_reduce_s_splits_on_duration_change():
    entries, nr = reduce_s([S(t=0, d=10, r=1), S(d=20, r=1)], None, 1, 0, 100)
    assert nr == 0
    assert entries == [S(t=0, d=10, r=1), S(t=20, d=20, r=1)]


def test_reduce_s_nothing_in_period_keeps_start_nr():
    entries, nr = reduce_s([S(t=0, d=10, r=1)], 5, 1, 100, 200)
    assert entries == []
    assert nr == 5


def test_reduce_s_period_before_entries():
    entries, nr = reduce_s([S(t=500, d=10, r=3)], 2, 1, 0, 100)
    assert entries == []
    assert nr == 2


def test_change_timeline_timescale():
    out = change_timeline_timescale([S(t=90000, d=180000, r=3)], 90000, 1000)
    assert out == [S(t=1000, d=2000, r=3)]


def test_change_timeline_timescale_rounds_half_away_from_zero():
    out = change_timeline_timescale([S(t=3, d=1, r=0)], 2, 1)
    assert out[0].t == 2
    assert out[0].d == 1


def test_change_timeline_timescale_requires_time():
    with pytest.raises(ValueError):
        change_timeline_timescale([S(d=10)], 10, 1)


def test_segment_timings_video():
    timings = segment_timings([S(t=89100000, d=180000, r=4)])
    assert timings == [
        (89100000, 180000),
        (89280000, 180000),
        (89460000, 180000),
        (89640000, 180000),
        (89820000, 180000),
    ]


def test_segment_timings_audio():
    timings = segment_timings([S(t=47520768, d=95232), S(d=96256, r=2), S(d=95232)])
    assert timings == [
        (47520768, 95232),
        (47616000, 96256),
        (47712256, 96256),
        (47808512, 96256),
        (47904768, 95232),
    ]


def test_segment_timings_empty():
    assert segment_timings([]) == []


def test_segment_timings_count_matches_last_nr():
    entries = [S(t=0, d=180000, r=29), S(d=90000)]
    se = SegEntries(entries=entries, start_nr=0)
    assert len(segment_timings(entries)) == se.last_nr() + 1
    assert segment_timings(entries)[-1][0] == se.last_time()