"""Timing, addressing, parsing and WSGI helpers for simulating live DASH streams."""

__version__ = "0.1.0"
__all__ = ["availability", "content", "converters", "middleware", "segmeta", "timeline"]