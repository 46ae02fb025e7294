"""Content types, adaptation set ordering and manifest descriptors."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from livesim.converters import UTCTimingMethod

logger = logging.getLogger(__name__)

UTC_TIMING_DIRECT_SCHEME = "urn:mpeg:dash:utc:direct:2014"
UTC_TIMING_NTP_SCHEME = "urn:mpeg:dash:utc:ntp:2014"
UTC_TIMING_SNTP_SCHEME = "urn:mpeg:dash:utc:sntp:2014"
UTC_TIMING_HTTP_XSDATE_SCHEME = "urn:mpeg:dash:utc:http-xsdate:2014"
UTC_TIMING_HTTP_ISO_SCHEME = "urn:mpeg:dash:utc:http-iso:2014"
UTC_TIMING_HTTP_HEAD_SCHEME = "urn:mpeg:dash:utc:http-head:2014"

UTC_TIMING_NTP_SERVER = "ntp.time.example.com"
UTC_TIMING_SNTP_SERVER = "sntp.time.example.com"
UTC_TIMING_XSDATE_HTTP_SERVER = "https://time.example.com/?xsdate"
UTC_TIMING_XSDATE_HTTP_SERVER_MS = "https://time.example.com/?xsdate&ms"
UTC_TIMING_ISO_HTTP_SERVER = "https://time.example.com/?iso"
UTC_TIMING_ISO_HTTP_SERVER_MS = "https://time.example.com/?iso&ms"
UTC_TIMING_HEAD_ASSET = "/static/time.txt"

_VIDEO_CODEC_PREFIXES = ("avc", "hev", "hvc")
_AUDIO_CODEC_PREFIXES = ("mp4a", "ac-3", "ec-3")
_TEXT_CODEC_PREFIXES = ("stpp", "wvtt")

_MIME_CONTENT_TYPES = {
    "video/mp4": "video",
    "audio/mp4": "audio",
    "application/mp4": "text",
}

_UINT32_MASK = 0xFFFFFFFF


@dataclass
class Descriptor:
    """A scheme/value descriptor element such as UTCTiming or Role."""

    scheme_id_uri: str
    value: str = ""


@dataclass
class Representation:
    """The parts of a Representation needed to classify its content."""

    id: str = ""
    mime_type: str = ""
    codecs: str = ""


@dataclass
class AdaptationSet:
    """The parts of an AdaptationSet needed to classify and order it."""

    id: int | None = None
    content_type: str = ""
    mime_type: str = ""
    codecs: str = ""
    representations: list[Representation] = field(default_factory=list)


def content_type_from_mime_type(mime_type: str) -> str:
    """Map an MP4 mime type to a content type, or "" if unknown."""
    return _MIME_CONTENT_TYPES.get(mime_type, "")


def _content_type_from_codecs(codecs: str) -> str:
    if codecs.startswith(_VIDEO_CODEC_PREFIXES):
        return "video"
    if codecs.startswith(_AUDIO_CODEC_PREFIXES):
        return "audio"
    if codecs.startswith(_TEXT_CODEC_PREFIXES):
        return "text"
    return ""


def guess_content_type(adaptation_set: AdaptationSet) -> str:
    """Guess the content type from codecs and representation data, or ""."""
    if adaptation_set.codecs:
        guessed = _content_type_from_codecs(adaptation_set.codecs)
        if guessed:
            return guessed
    for rep in adaptation_set.representations:
        guessed = content_type_from_mime_type(rep.mime_type)
        if guessed:
            return guessed
        if rep.codecs:
            guessed = _content_type_from_codecs(rep.codecs)
            if guessed:
                return guessed
    return ""


def fill_content_types(asset_path: str, adaptation_sets: Iterable[AdaptationSet]) -> None:
    """Set a missing content type from the mime type, or else by guessing."""
    for aset in adaptation_sets:
        if aset.content_type:
            continue
        aset.content_type = content_type_from_mime_type(aset.mime_type)
        if aset.content_type:
            continue
        aset.content_type = guess_content_type(aset)
        if not aset.content_type:
            as_id = "not set" if aset.id is None else str(aset.id)
            logger.warning(
                "no contentType, unknown mimeType, and no known codecs: asset=%s adaptationSetID=%s",
                asset_path,
                as_id,
            )


def order_by_content_type(adaptation_sets: Sequence[AdaptationSet]) -> list[AdaptationSet]:
    """Return a new list with video first, then audio, then the rest."""
    video = [a for a in adaptation_sets if a.content_type == "video"]
    audio = [a for a in adaptation_sets if a.content_type == "audio"]
    rest = [a for a in adaptation_sets if a.content_type not in ("video", "audio")]
    return video + audio + rest


def create_service_description(latency_target_ms: int) -> list[dict]:
    """Build the fixed low-latency service description for a latency target."""
    target = latency_target_ms & _UINT32_MASK
    min_latency = (target * 3 & _UINT32_MASK) // 4
    max_latency = target * 2 & _UINT32_MASK
    return [
        {
            "id": 0,
            "latencies": [
                {
                    "reference_id": 0,
                    "max": max_latency,
                    "min": min_latency,
                    "target": target,
                }
            ],
            "playback_rates": [{"max": 1.04, "min": 0.96}],
        }
    ]


def _utc_descriptor(method: UTCTimingMethod, publish_time: str, host: str) -> Descriptor:
    if method is UTCTimingMethod.DIRECT:
        return Descriptor(UTC_TIMING_DIRECT_SCHEME, publish_time)
    if method is UTCTimingMethod.NTP:
        return Descriptor(UTC_TIMING_NTP_SCHEME, UTC_TIMING_NTP_SERVER)
    if method is UTCTimingMethod.SNTP:
        return Descriptor(UTC_TIMING_SNTP_SCHEME, UTC_TIMING_SNTP_SERVER)
    if method is UTCTimingMethod.HTTP_XSDATE:
        return Descriptor(UTC_TIMING_HTTP_XSDATE_SCHEME, UTC_TIMING_XSDATE_HTTP_SERVER)
    if method is UTCTimingMethod.HTTP_XSDATE_MS:
        return Descriptor(UTC_TIMING_HTTP_XSDATE_SCHEME, UTC_TIMING_XSDATE_HTTP_SERVER_MS)
    if method is UTCTimingMethod.HTTP_ISO:
        return Descriptor(UTC_TIMING_HTTP_ISO_SCHEME, UTC_TIMING_ISO_HTTP_SERVER)
    if method is UTCTimingMethod.HTTP_ISO_MS:
        return Descriptor(UTC_TIMING_HTTP_ISO_SCHEME, UTC_TIMING_ISO_HTTP_SERVER_MS)
    if method is UTCTimingMethod.HTTP_HEAD:
        return Descriptor(UTC_TIMING_HTTP_HEAD_SCHEME, f"{host}{UTC_TIMING_HEAD_ASSET}")
    raise ValueError(f"UTC timing method {method.value!r} cannot be combined with others")


def utc_timing_elements(
    methods: Sequence[UTCTimingMethod | str] | None,
    existing: Sequence[Descriptor],
    publish_time: str,
    host: str,
) -> list[Descriptor]:
    """Return the UTCTiming elements of a live manifest.

    With no methods, a single HTTP xs:date element with millisecond precision
    is used. A lone "keep" keeps the existing elements. Otherwise the requested
    elements are appended to the existing ones, stopping at "none".
    """
    if not methods:
        return [Descriptor(UTC_TIMING_HTTP_XSDATE_SCHEME, UTC_TIMING_XSDATE_HTTP_SERVER_MS)]
    resolved = [UTCTimingMethod(m) for m in methods]
    if resolved == [UTCTimingMethod.KEEP]:
        return list(existing)
    elements = list(existing)
    for method in resolved:
        if method is UTCTimingMethod.NONE:
            return elements
        elements.append(_utc_descriptor(method, publish_time, host))
    return elements