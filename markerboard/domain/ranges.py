"""
Reference-range arithmetic.

Pure, total functions: malformed catalog data must degrade to a safe answer
instead of raising, so one bad row never takes the dashboard down.
"""

import math
import re
from typing import Any

from markerboard.domain.models import HealthStatus

# Leading numeric prefix, so "5.4 mmol/L" parses as 5.4
_LEADING_NUMBER = re.compile(r"[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?")


def classify_status(value: float, min_ref: float, max_ref: float) -> HealthStatus:
    """Classify a value against its reference range (bounds inclusive).

    Any non-finite input yields ``NORMAL``.
    """
    if not all(math.isfinite(x) for x in (value, min_ref, max_ref)):
        return HealthStatus.NORMAL
    if value < min_ref:
        return HealthStatus.LOW
    if value > max_ref:
        return HealthStatus.HIGH
    return HealthStatus.NORMAL


def is_within_range(value: float, min_ref: float, max_ref: float) -> bool:
    return min_ref <= value <= max_ref


def distance_to_range(value: float, min_ref: float, max_ref: float) -> float:
    """How far outside ``[min_ref, max_ref]`` a value lies; 0 when inside."""
    if value < min_ref:
        return min_ref - value
    if value > max_ref:
        return value - max_ref
    return 0.0


def clamp(value: float, lower: float, upper: float) -> float:
    return min(max(value, lower), upper)


def parse_number(value: Any) -> float | None:
    """Parse user or storage input into a finite float, or ``None``.

    Accepts numbers and strings using a decimal comma ("5,4") or a trailing
    unit ("5.4 mmol/L"). Booleans and ints too large for a float are rejected.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        try:
            parsed = float(value)
        except OverflowError:
            return None
        return parsed if math.isfinite(parsed) else None
    if not value:
        return None

    text = str(value).replace(",", ".", 1).strip()
    match = _LEADING_NUMBER.match(text)
    if match is None:
        return None
    parsed = float(match.group(0))
    return parsed if math.isfinite(parsed) else None


def safe_float(value: Any) -> float:
    """Like ``parse_number`` but anything unparseable becomes 0.0."""
    parsed = parse_number(value)
    return 0.0 if parsed is None else parsed
