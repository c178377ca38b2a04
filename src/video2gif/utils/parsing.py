"""Parsers for user-supplied timestamps and probed frame-rate expressions."""

from __future__ import annotations

import math
import re
from numbers import Real

from video2gif.core.errors import InvalidTimeFormat, NegativeTime

# A complete decimal literal, e.g. "30", "1.5", ".5", "2e3"
_DECIMAL_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
# Leading decimal literal of a string, parseFloat-style ("30/0" -> "30")
_NUMERIC_PREFIX_RE = re.compile(r"\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)")

# Seconds per segment, most-significant first, keyed by segment count
_SEGMENT_WEIGHTS = {
    1: (1,),
    2: (60, 1),
    3: (3600, 60, 1),
}


def _is_number(value: object) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def parse_numeric_prefix(text: str) -> float | None:
    """Parse the longest leading decimal literal of ``text``, or None."""
    match = _NUMERIC_PREFIX_RE.match(text)
    if match is None:
        return None
    return float(match.group(1))


def parse_time(value: float | int | str) -> float:
    """Parse a timestamp into seconds.

    Accepts a non-negative number (returned unchanged) or a string in one of
    the forms ``SS``, ``MM:SS`` or ``HH:MM:SS``; every segment may carry a
    decimal part. There is no upper bound here: whether the time lies inside
    the video is decided once the duration is known.

    Raises:
        NegativeTime: ``value`` is a negative number.
        InvalidTimeFormat: anything else that is not a valid timestamp.
    """
    if _is_number(value):
        seconds = float(value)
        if seconds < 0:
            raise NegativeTime("Time cannot be negative")
        if not math.isfinite(seconds):
            raise InvalidTimeFormat(f"Invalid time format: {value}")
        return seconds

    if not value or not isinstance(value, str):
        raise InvalidTimeFormat(f"Invalid time format: {value}")

    segments = [segment.strip() for segment in value.split(":")]
    weights = _SEGMENT_WEIGHTS.get(len(segments))
    if weights is None:
        raise InvalidTimeFormat(f"Invalid time format: {value}")

    parts = []
    for segment in segments:
        if not _DECIMAL_RE.fullmatch(segment):
            raise InvalidTimeFormat(f"Invalid time format: {value}")
        number = float(segment)
        if number < 0 or not math.isfinite(number):
            raise InvalidTimeFormat(f"Invalid time format: {value}")
        parts.append(number)

    return sum(weight * part for weight, part in zip(weights, parts))


def parse_fraction(value: float | int | str | None) -> float | None:
    """Parse a frame-rate expression such as ``"30000/1001"`` or ``"25"``.

    Never raises. A zero denominator or a malformed fraction falls back to
    reading the leading number of the whole string, so ``"30/0"`` gives 30.
    Returns None when no numeric interpretation exists.
    """
    if not value:
        return None
    if _is_number(value):
        number = float(value)
        return None if math.isnan(number) else number

    text = str(value)
    parts = text.split("/")
    if len(parts) == 2:
        numerator = parse_numeric_prefix(parts[0])
        denominator = parse_numeric_prefix(parts[1])
        if numerator is not None and denominator is not None and denominator != 0:
            return numerator / denominator

    return parse_numeric_prefix(text)
