"""WSGI middleware for headers and request metrics, plus small HTTP helpers."""

from __future__ import annotations

import json
import math
import time
from collections import Counter, defaultdict
from collections.abc import Callable, Iterable, Iterator

DEFAULT_BUCKETS = (5, 10, 20, 50, 100, 200, 500, 1000)
SERVICE_NAME = "livesim2"

SEGMENT = "segment"
MPD = "mpd"
OTHER = "other"

METRIC_NAMES = {
    SEGMENT: ("segment_requests_total", "segment_request_duration_milliseconds"),
    MPD: ("mpd_requests_total", "mpd_request_duration_milliseconds"),
    OTHER: ("other_requests_total", "other_request_duration_milliseconds"),
}

SEGMENT_EXTENSIONS = frozenset(
    {".cmfv", ".cmfa", ".cmft", ".mp4", ".m4s", ".m4a", ".m4t", ".m4v", ".jpg"}
)


def classify_path(path: str) -> str:
    """Return the request category (MPD, SEGMENT or OTHER) from a URL path."""
    dot = path.rfind(".")
    ext = path[dot:].lower() if dot >= 0 else ""
    if ext == ".mpd":
        return MPD
    if ext in SEGMENT_EXTENSIONS:
        return SEGMENT
    return OTHER


class RequestMetrics:
    """Request counts and latency histograms, partitioned by category and status."""

    def __init__(self, buckets: Iterable[float] = DEFAULT_BUCKETS, service: str = SERVICE_NAME):
        self.buckets = tuple(sorted(buckets))
        self.service = service
        self.requests: Counter[tuple[str, str]] = Counter()
        self.latency_sum: defaultdict[tuple[str, str], float] = defaultdict(float)
        # Cumulative counts per upper bound, the last entry being +Inf.
        self.latency_buckets: dict[tuple[str, str], list[int]] = {}

    def observe(self, path: str, status: int | str, latency_ms: float) -> str:
        """Record one request and return its category."""
        category = classify_path(path)
        label = (category, str(status))
        self.requests[label] += 1
        self.latency_sum[label] += latency_ms
        counts = self.latency_buckets.setdefault(label, [0] * (len(self.buckets) + 1))
        bounds = (*self.buckets, math.inf)
        counts[:] = [count + (latency_ms <= bound) for count, bound in zip(counts, bounds)]
        return category

    def count(self, category: str, status: int | str) -> int:
        """Number of requests seen for a category and status."""
        return self.requests[(category, str(status))]


def version_and_cors_headers(version: str) -> list[tuple[str, str]]:
    """Version and CORS headers added to every response."""
    return [
        ("DASH-IF-livesim2", version),
        ("Access-Control-Allow-Origin", "*"),
        ("Access-Control-Allow-Methods", "POST, GET, HEAD, OPTIONS"),
        ("Access-Control-Allow-Headers", "Content-Type, Accept"),
        ("Timing-Allow-Origin", "*"),
    ]


class VersionCorsMiddleware:
    """Adds version and CORS headers to every response of a WSGI application."""

    def __init__(self, app: Callable, version: str):
        self.app = app
        self.version = version

    def __call__(self, environ, start_response):
        extra = version_and_cors_headers(self.version)

        def _start(status, headers, exc_info=None):
            return start_response(status, extra + list(headers), exc_info)

        return self.app(environ, _start)


class _ObservedBody:
    """Response body that records metrics when the response is closed."""

    def __init__(self, body: Iterable[bytes], on_close: Callable[[], None]):
        self._body = body
        self._on_close = on_close
        self._closed = False

    def __iter__(self) -> Iterator[bytes]:
        return iter(self._body)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            close = getattr(self._body, "close", None)
            if close is not None:
                close()
        finally:
            self._on_close()


class MetricsMiddleware:
    """Records request counts and latencies of a WSGI application."""

    def __init__(self, app: Callable, metrics: RequestMetrics | None = None):
        self.app = app
        self.metrics = metrics if metrics is not None else RequestMetrics()

    def __call__(self, environ, start_response):
        path = environ.get("PATH_INFO", "")
        started = time.perf_counter()
        status = "0"

        def _start(status_line, headers, exc_info=None):
            nonlocal status
            status = status_line.split(" ", 1)[0]
            return start_response(status_line, headers, exc_info)

        body = self.app(environ, _start)

        def _record():
            latency_ms = (time.perf_counter() - started) * 1000.0
            self.metrics.observe(path, status, latency_ms)

        return _ObservedBody(body, _record)


def redirect_path(path: str, old: str, new: str) -> str:
    """Replace the first occurrence of old with new in a URL path."""
    return path.replace(old, new, 1)


def json_response(message) -> tuple[bytes, list[tuple[str, str]]]:
    """Encode message as compact JSON and return the body with its headers."""
    text = json.dumps(message, separators=(",", ":"), sort_keys=True, ensure_ascii=False)
    for char, escaped in (("<", "\\u003c"), (">", "\\u003e"), ("&", "\\u0026"),
                          ("\u2028", "\\u2028"), ("\u2029", "\\u2029")):
        text = text.replace(char, escaped)
    body = text.encode("utf-8")
    headers = [("Content-Type", "application/json"), ("Content-Length", str(len(body)))]
    return body, headers