import math

import pytest

from livesim.converters import (
    ConversionError,
    SegStatusCodes,
    UTCTimingMethod,
    parse_float,
    parse_float_or_inf,
    parse_int,
    parse_non_negative_float,
    parse_seg_status_codes,
    split_utc_timings,
)

KEY = "statuscode"


@pytest.mark.parametrize(
    "val, want",
    [
        (
            "[{cycle:30, rsq:0, code:404, rep:video}]",
            [SegStatusCodes(cycle=30, rsq=0, code=404, reps=["video"])],
        ),
        (
            "[{cycle:30, rsq:2, code:404, rep:*}]",
            [SegStatusCodes(cycle=30, rsq=2, code=404, reps=None)],
        ),
        (
            "[{cycle:30, rsq:1, code:404}]",
            [SegStatusCodes(cycle=30, rsq=1, code=404, reps=None)],
        ),
    ],
)
def test_parse_seg_status_codes(val, want):
    assert parse_seg_status_codes(KEY, val) == want


@pytest.mark.parametrize(
    "val, message",
    [
        ("", 'val="" for key "statuscode" is too short'),
        (
            "[{cycle:30, rsq:2, code:600, rep:*}]",
            'val="[{cycle:30, rsq:2, code:600, rep:*}]" for key "statuscode" '
            "is not a valid. code is not in range 400-599",
        ),
    ],
)
def test_parse_seg_status_codes_errors(val, message):
    with pytest.raises(ConversionError) as info:
        parse_seg_status_codes(KEY, val)
    assert str(info.value) == message


def test_parse_seg_status_codes_multiple_entries():
    got = parse_seg_status_codes(KEY, "[{cycle:30, code:404},{cycle:10, rsq:3, code:503}]")
    assert [c.cycle for c in got] == [30, 10]
    assert [c.code for c in got] == [404, 503]
    assert got[1].rsq == 3


def test_parse_seg_status_codes_bad_pair():
    with pytest.raises(ConversionError, match="Bad pair"):
        parse_seg_status_codes(KEY, "[{cycle30, code:404}]")


def test_parse_seg_status_codes_unknown_key():
    with pytest.raises(ConversionError, match="Unknown key"):
        parse_seg_status_codes(KEY, "[{cycle:30, foo:1, code:404}]")


def test_parse_seg_status_codes_zero_cycle():
    with pytest.raises(ConversionError, match="cycle is too small"):
        parse_seg_status_codes(KEY, "[{cycle:0, code:404}]")


def test_parse_int():
    assert parse_int("n", "42") == 42
    assert parse_int("n", "-7") == -7
    with pytest.raises(ConversionError, match="key=n"):
        parse_int("n", "4x")
    with pytest.raises(ConversionError):
        parse_int("n", " 4")


def test_parse_float():
    assert parse_float("f", "1.5") == 1.5
    with pytest.raises(ConversionError, match="key=f"):
        parse_float("f", "abc")


def test_parse_non_negative_float():
    assert parse_non_negative_float("f", "0") == 0.0
    with pytest.raises(ConversionError, match="must be non-negative"):
        parse_non_negative_float("f", "-1")


def test_parse_float_or_inf():
    assert parse_float_or_inf("ato", "inf") == math.inf
    assert parse_float_or_inf("ato", "10") == 10.0
    with pytest.raises(ConversionError):
        parse_float_or_inf("ato", "infinite-ish")


def test_split_utc_timings():
    got = split_utc_timings("utc", "httpiso-ntp-sntp")
    assert got == [UTCTimingMethod.HTTP_ISO, UTCTimingMethod.NTP, UTCTimingMethod.SNTP]
    assert split_utc_timings("utc", "none") == [UTCTimingMethod.NONE]
    assert split_utc_timings("utc", "keep") == [UTCTimingMethod.KEEP]


def test_split_utc_timings_errors():
    with pytest.raises(ConversionError, match="keep set together"):
        split_utc_timings("utc", "keep-ntp")
    with pytest.raises(ConversionError, match="not a valid UTC timing method"):
        split_utc_timings("utc", "ntp-bogus")