"""Conversion between decimal hours and human duration text.

Accepted notations (case-insensitive, decimal comma allowed):

- Decimal hours: "1.5", "1.5h", "2"
- Hours and minutes: "1h30"
- Colon: "1:30"
- Minutes: "90m", "45min", "30mins"
"""

from __future__ import annotations

import logging
import math
import re
from decimal import Context, Decimal
from enum import Enum

logger = logging.getLogger(__name__)

_DECIMAL_RE = re.compile(r"-?\d+(\.\d+)?h?", re.ASCII)
_HOUR_MINUTE_RE = re.compile(r"(-?)(\d+)h(\d{1,2})", re.ASCII)
_COLON_RE = re.compile(r"(-?)(\d+):(\d{1,2})", re.ASCII)
_MINUTES_RE = re.compile(r"(-?\d+(?:\.\d+)?)m(?:in(?:s)?)?", re.ASCII)

# Enough digits to quantize any finite float to hundredths
_STORED_HOURS_CONTEXT = Context(prec=400)


class ParseError(Enum):
    """Rejections returned by parse_duration."""

    EMPTY = "empty"
    UNRECOGNIZED = "unrecognized"


def round_half_up(x: float) -> int:
    """Round halves away from zero (22.5 -> 23, -22.5 -> -23)."""
    magnitude = math.floor(abs(x) + 0.5)
    return -magnitude if x < 0 else magnitude


def format_hours(value: float | Decimal) -> str:
    """Format decimal hours as "1h30" / "2h". Non-finite values give ""."""
    value = float(value)
    if not math.isfinite(value):
        return ""

    whole = math.trunc(value)
    minutes = round_half_up((value - whole) * 60)

    # 1.9999 rounds to 60 minutes
    if abs(minutes) == 60:
        whole += 1 if minutes > 0 else -1
        minutes = 0

    sign = "-" if whole == 0 and minutes < 0 else ""
    if minutes != 0:
        return f"{sign}{whole}h{abs(minutes)}"
    return f"{whole}h"


def _hours_and_minutes(match: re.Match) -> float:
    sign, hours, minutes = match.groups()
    value = int(hours) + int(minutes) / 60
    return -value if sign else value


def _convert(s: str) -> float | None:
    if _DECIMAL_RE.fullmatch(s):
        return float(s.rstrip("h"))

    if match := _HOUR_MINUTE_RE.fullmatch(s):
        return _hours_and_minutes(match)

    if match := _COLON_RE.fullmatch(s):
        return _hours_and_minutes(match)

    if match := _MINUTES_RE.fullmatch(s):
        return float(match.group(1)) / 60

    return None


def parse_duration(text: str) -> float | ParseError:
    """Parse a duration string into decimal hours.

    Returns ParseError.EMPTY for blank input and ParseError.UNRECOGNIZED when
    no notation matches or the value is too large to be finite. Minutes above
    59 are accepted ("1h90" is 2.5).
    """
    if not isinstance(text, str):
        raise TypeError(f"duration must be a string, got {type(text).__name__}")

    s = text.strip().lower().replace(",", ".")
    if not s:
        return ParseError.EMPTY

    try:
        value = _convert(s)
    except (OverflowError, ValueError):
        # int() rejects huge digit strings, int/60 overflows float
        value = None

    if value is None or not math.isfinite(value):
        logger.debug("Unrecognized duration %r", text[:40])
        return ParseError.UNRECOGNIZED
    return value


def is_duration_error(result: float | ParseError) -> bool:
    return isinstance(result, ParseError)


def format_hours_decimal(value: float | Decimal | None) -> str:
    """Format hours with two decimals, e.g. "1.50 h". Unknown values give "—"."""
    if value is None:
        return "—"
    value = float(value)
    if not math.isfinite(value):
        return "—"
    return f"{value:.2f} h"


def to_stored_hours(value: float) -> Decimal:
    """Quantize decimal hours to hundredths for storing on a row."""
    if not math.isfinite(value):
        raise ValueError(f"hours must be finite, got {value!r}")
    return Decimal(str(value)).quantize(Decimal("0.01"), context=_STORED_HOURS_CONTEXT)
