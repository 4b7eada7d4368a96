"""Billing months: YYYY-MM tokens, UTC month starts and the selectable window.

Only fully completed months can be billed. The most recent selectable month
("max month") is normally the month before the current one, and any date a
caller picks is clamped down to it.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone

logger = logging.getLogger(__name__)

_MONTH_TOKEN_RE = re.compile(r"(\d{4})-(\d{2})", re.ASCII)

MONTH_NAMES = {
    "fr": [
        "janvier", "février", "mars", "avril", "mai", "juin",
        "juillet", "août", "septembre", "octobre", "novembre", "décembre",
    ],
    "en": [
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ],
}


def _as_utc(d: date | datetime) -> datetime:
    """Plain dates become UTC midnight; naive datetimes are taken as UTC."""
    if isinstance(d, datetime):
        if d.tzinfo is None:
            return d.replace(tzinfo=timezone.utc)
        return d.astimezone(timezone.utc)
    return datetime(d.year, d.month, d.day, tzinfo=timezone.utc)


def month_start(d: date | datetime) -> datetime:
    """UTC midnight on the first day of the month containing d."""
    d = _as_utc(d)
    return datetime(d.year, d.month, 1, tzinfo=timezone.utc)


def shift_month(ms: datetime, delta: int) -> datetime:
    """Month start `delta` months before (negative) or after ms."""
    index = ms.year * 12 + (ms.month - 1) + delta
    return datetime(index // 12, index % 12 + 1, 1, tzinfo=timezone.utc)


def next_month_start(ms: datetime) -> datetime:
    return shift_month(month_start(ms), 1)


def month_end(ms: datetime) -> datetime:
    """Last millisecond of the month starting at ms."""
    return next_month_start(ms) - timedelta(milliseconds=1)


def previous_completed_month_start(now: datetime | None = None) -> datetime:
    if now is None:
        now = datetime.now(timezone.utc)
    return shift_month(month_start(now), -1)


def parse_month_token(text: str) -> datetime | None:
    """Parse "YYYY-MM" into the UTC start of that month, or None if invalid."""
    match = _MONTH_TOKEN_RE.fullmatch(text)
    if not match:
        return None
    year, month = int(match.group(1)), int(match.group(2))
    if month < 1 or month > 12:
        return None
    if year < 1:
        # datetime cannot represent year 0000
        return None
    return datetime(year, month, 1, tzinfo=timezone.utc)


def format_month_token(instant: date | datetime) -> str:
    """Format the UTC month of an instant as "YYYY-MM"."""
    d = _as_utc(instant)
    return f"{d.year:04d}-{d.month:02d}"


def default_max_month(now: datetime | None = None) -> str:
    """Token of the most recently completed month."""
    return format_month_token(previous_completed_month_start(now))


def month_label(ms: datetime, locale: str = "fr") -> str:
    """Human label for a month, e.g. "février 2024" or "February 2024"."""
    names = MONTH_NAMES.get(locale, MONTH_NAMES["en"])
    return f"{names[ms.month - 1]} {ms.year}"


@dataclass(frozen=True)
class BillingWindow:
    """Selected month and the upper bound of what may be selected."""

    month_start: datetime
    max_month_start: datetime

    @property
    def max_selectable_instant(self) -> datetime:
        return month_end(self.max_month_start)

    @property
    def effective_month_start(self) -> datetime:
        """Selected month, clamped down to the max month."""
        return self.clamp_to_month_start(self.month_start)

    @property
    def at_max(self) -> bool:
        return self.effective_month_start >= self.max_month_start

    def is_selectable(self, d: date | datetime) -> bool:
        return _as_utc(d) <= self.max_selectable_instant

    def clamp_to_month_start(self, d: date | datetime) -> datetime:
        ms = month_start(d)
        if ms > self.max_month_start:
            return self.max_month_start
        return ms


def _resolve_token(token: str, now: datetime | None) -> datetime:
    ms = parse_month_token(token)
    if ms is None:
        logger.debug("Invalid month token %r, falling back to current month", token)
        return month_start(now or datetime.now(timezone.utc))
    return ms


def compute_selectable_window(
    selected: str, max_month: str, now: datetime | None = None
) -> BillingWindow:
    """Build the billing window for a selected month and the max month.

    Invalid tokens fall back to the current month rather than failing.
    """
    return BillingWindow(
        month_start=_resolve_token(selected, now),
        max_month_start=_resolve_token(max_month, now),
    )
