"""Calendar helpers for report date ranges and weeks."""

from __future__ import annotations

import re
from datetime import date, timedelta
from calendar import monthrange

_YMD_RE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


def parse_ymd(value: str) -> date | None:
    """Parse "YYYY-MM-DD" into a date, or None if it isn't a real date."""
    if not _YMD_RE.fullmatch(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def half_open_range(from_ymd: str, to_ymd: str) -> tuple[date, date]:
    """Turn an inclusive [from, to] range into [from, to_exclusive)."""
    start = parse_ymd(from_ymd)
    end = parse_ymd(to_ymd)
    if not start or not end:
        raise ValueError("Invalid date range. Expected YYYY-MM-DD.")
    return start, end + timedelta(days=1)


def get_week_start(d: date, first_weekday: int = 0) -> date:
    """Get the first day of the week containing d (Monday by default)."""
    days_since_start = (d.weekday() - first_weekday) % 7
    return d - timedelta(days=days_since_start)


def full_weeks_in_month(year: int, month: int) -> list[tuple[date, date]]:
    """Get (monday, sunday) tuples for the weeks lying entirely inside the month."""
    first_day = date(year, month, 1)
    last_day = date(year, month, monthrange(year, month)[1])

    week_start = get_week_start(first_day)
    if week_start < first_day:
        week_start += timedelta(days=7)

    weeks = []
    while week_start + timedelta(days=6) <= last_day:
        weeks.append((week_start, week_start + timedelta(days=6)))
        week_start = week_start + timedelta(days=7)

    return weeks
