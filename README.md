# livesim

Building blocks for simulating a live MPEG-DASH stream from looped on-demand
content. The package holds the parts of a live simulator that need no MP4 or
MPD library: wrap-around timing, SegmentTimeline arithmetic, segment
availability checks, segment addressing by number or time, TTML timestamp
shifting, URL parameter parsing and a few WSGI helpers. It has no
dependencies outside the standard library.

## Installation

```
pip install .
```

Tests need the `test` extra:

```
pip install ".[test]"
pytest
```

## Modules

### `livesim.converters`

Parses configuration values taken from request URLs. Every function takes the
parameter name (`key`) and its text value (`val`) and raises `ConversionError`
(a `ValueError`) on bad input.

- `parse_int`: a decimal integer in the signed 64-bit range.
- `parse_float`, `parse_non_negative_float`, `parse_float_or_inf` (the word
  `inf` gives positive infinity).
- `split_utc_timings`: a hyphen-separated list of `UTCTimingMethod` values,
  e.g. `"httpiso-ntp"`. `keep` may not be combined with other values.
- `parse_seg_status_codes`: a list like
  `[{cycle:30, rsq:0, code:404, rep:video}]` into `SegStatusCodes` items.
  `cycle` must be positive, `rsq` non-negative and `code` in 400–599;
  `rep:*` or no `rep` means all representations (`reps` is `None`).

### `livesim.timeline`

- `S`: one SegmentTimeline entry (`t`, `d`, `r`).
- `calc_wrap_times(loop_dur_ms, start_time_s, now_ms, time_shift_buffer_depth_ms)`
  returns a `WrapTimes` with the loop wraps of the window start and of now.
- `SegEntries` with `last_nr()` and `last_time()`.
- `reduce_s` keeps the segments that start within one period and returns them
  with the number of the first kept segment.
- `change_timeline_timescale` rescales entries, rounding to nearest.
- `segment_timings` expands entries into `(time, duration)` pairs.

### `livesim.content`

- `Descriptor`, `Representation` and `AdaptationSet` hold what is needed to
  classify and order adaptation sets.
- `content_type_from_mime_type`, `guess_content_type` (from codecs and
  representation data) and `fill_content_types` (fills missing content types
  in place and logs a warning when nothing fits).
- `order_by_content_type`: video first, then audio, then the rest.
- `create_service_description(latency_target_ms)`: the low-latency service
  description as plain dictionaries (min 3/4 and max 2× the target, playback
  rates 0.96–1.04).
- `utc_timing_elements(methods, existing, publish_time, host)`: the UTCTiming
  descriptors for a manifest. With no methods it gives one HTTP xs:date
  element with millisecond precision; a lone `keep` keeps `existing`; `none`
  stops adding elements. The time server values are placeholders at
  `example.com`.

### `livesim.availability`

- `check_time_validity(avail_time_s, now_s, time_shift_buffer_depth_s, availability_time_offset_s)`
  raises `TooEarlyError` ("too early by Nms") or `GoneError` ("too late"),
  both subclasses of `AvailabilityError`. A 10 s margin is added to the
  time-shift buffer; an infinite offset means always available.
- `shift_timestamp` and `shift_ttml_timestamps` move `hh:mm:ss[.mmm]`
  timestamps by a number of milliseconds; the output always has milliseconds.
- `is_image` tells whether a segment path ends in `.jpg`.

### `livesim.segmeta`

- `Segment` and `RepInfo` describe the segments of one representation;
  `RepInfo.find_segment_index(time)` finds the segment that contains a time.
- `seg_meta_from_nr` and `seg_meta_from_time` map a live segment number or
  media time onto the looped asset and return a `SegMeta`, raising the
  availability errors above when the segment is not available at `now_ms`.
  A number below the start number raises `LookupError`.
- `segment_availability_time_ms` gives when a numbered live segment becomes
  available.

### `livesim.middleware`

- `classify_path` sorts request paths into `"mpd"`, `"segment"` or `"other"`.
- `RequestMetrics` counts requests and keeps latency histograms per category
  and status (`observe`, `count`).
- `MetricsMiddleware` and `VersionCorsMiddleware` wrap a WSGI application;
  `version_and_cors_headers` gives the headers the latter adds.
- `redirect_path` and `json_response` are small response helpers.

## Example

```python
from livesim.availability import check_time_validity, TooEarlyError
from livesim.availability import shift_ttml_timestamps

try:
    check_time_validity(4.0, 2.0, 10.0, 0.0)
except TooEarlyError as err:
    print(err)  # too early by 2000ms

print(shift_ttml_timestamps(b'begin="00:00:00" end="00:00:01"', 500))
# b'begin="00:00:00.500" end="00:00:01.500"'
```

## What the package does not do

There is no server and no command to run. The package does not read assets
from disk, does not generate or write MPD documents, and does not decode,
rewrite, encrypt or chunk MP4 segments. It offers the timing, addressing and
request-handling pieces that such a server would be built from.