"""Parsing of configuration values taken from request URLs."""

from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass
from enum import Enum

_INT_PATTERN = re.compile(r"[+-]?[0-9]+\Z")
_INT_MIN = -(2**63)
_INT_MAX = 2**63 - 1


class ConversionError(ValueError):
    """Raised when a configuration value cannot be parsed."""


class UTCTimingMethod(str, Enum):
    """Methods for signalling UTC timing in a manifest."""

    DIRECT = "direct"
    NTP = "ntp"
    SNTP = "sntp"
    HTTP_XSDATE = "httpxsdate"
    HTTP_XSDATE_MS = "httpxsdatems"
    HTTP_ISO = "httpiso"
    HTTP_ISO_MS = "httpisoms"
    NONE = "none"
    KEEP = "keep"
    HTTP_HEAD = "head"


@dataclass
class SegStatusCodes:
    """A cyclic rule for answering segment requests with an error status."""

    cycle: int = 0
    rsq: int = 0
    code: int = 0
    reps: list[str] | None = None


def _quote(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


def parse_int(key: str, val: str) -> int:
    """Parse a decimal integer in the signed 64-bit range."""
    if not _INT_PATTERN.match(val):
        raise ConversionError(
            f"key={key}, err=strconv.Atoi: parsing {_quote(val)}: invalid syntax"
        )
    number = int(val)
    if not _INT_MIN <= number <= _INT_MAX:
        raise ConversionError(
            f"key={key}, err=strconv.Atoi: parsing {_quote(val)}: value out of range"
        )
    return number


def parse_float(key: str, val: str) -> float:
    """Parse a floating point number."""
    if val != val.strip() or "_" in val:
        raise ConversionError(
            f"key={key}, err=strconv.ParseFloat: parsing {_quote(val)}: invalid syntax"
        )
    try:
        return float(val)
    except ValueError:
        raise ConversionError(
            f"key={key}, err=strconv.ParseFloat: parsing {_quote(val)}: invalid syntax"
        ) from None


def parse_non_negative_float(key: str, val: str) -> float:
    """Parse a floating point number that must not be negative."""
    number = parse_float(key, val)
    if number < 0:
        raise ConversionError(f"key={key}, val={val} must be non-negative")
    return number


def parse_float_or_inf(key: str, val: str) -> float:
    """Parse a floating point number, or the word "inf" as positive infinity."""
    if val == "inf":
        return math.inf
    return parse_float(key, val)


def split_utc_timings(key: str, val: str) -> list[UTCTimingMethod]:
    """Split a hyphen-separated list of UTC timing methods."""
    parts = val.split("-")
    methods: list[UTCTimingMethod] = []
    invalid: str | None = None
    for part in parts:
        try:
            methods.append(UTCTimingMethod(part))
        except ValueError:
            invalid = part
    if UTCTimingMethod.KEEP in methods and len(parts) > 1:
        raise ConversionError("UTC value keep set together with other values")
    if invalid is not None:
        raise ConversionError(
            f"key={_quote(key)}, val={_quote(invalid)} is not a valid UTC timing method"
        )
    return methods


def parse_seg_status_codes(key: str, val: str) -> list[SegStatusCodes]:
    """Parse a list such as [{cycle:30, rsq:0, code:404, rep:video}]."""
    prefix = f"val={_quote(val)} for key {_quote(key)}"
    trimmed = val.replace(" ", "")
    if len(trimmed) < 4:
        raise ConversionError(f"{prefix} is too short")
    codes: list[SegStatusCodes] = []
    for part in trimmed[2:-2].split("},{"):
        entry = SegStatusCodes()
        for pair in part.split(","):
            key_value = pair.split(":")
            if len(key_value) != 2:
                raise ConversionError(f"{prefix} is not a valid. Bad pair")
            name, value = key_value
            if name == "cycle":
                entry.cycle = parse_int("cycle", value)
            elif name == "rsq":
                entry.rsq = parse_int("rsq", value)
            elif name == "code":
                entry.code = parse_int("code", value)
            elif name == "rep":
                if value != "*":
                    entry.reps = value.split(",")
            else:
                raise ConversionError(f"{prefix} is not a valid. Unknown key")
        if entry.cycle <= 0:
            raise ConversionError(f"{prefix} is not a valid. cycle is too small")
        if entry.rsq < 0:
            raise ConversionError(f"{prefix} is not a valid. rsq is too small")
        if not 400 <= entry.code <= 599:
            raise ConversionError(
                f"{prefix} is not a valid. code is not in range 400-599"
            )
        codes.append(entry)
    return codes