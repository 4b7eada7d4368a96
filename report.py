"""In-memory reshaping of time-entry rows for billing reports."""

from __future__ import annotations

import math
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from billing_period import format_month_token, month_end
from duration import format_hours, format_hours_decimal, round_half_up
from models import (
    ClientMandat,
    MinuteTotals,
    MonthAggregate,
    ReportRow,
    ReportTotals,
    TeamMember,
)
from pluralize import pluralize
from text_filter import prefix_then_fuzzy_filter
from utils import full_weeks_in_month, half_open_range

ENTRY_WORD = {"fr": "entrée", "en": "entry"}

CENT = Decimal("0.01")


def _id_key(row_id: int | str | None) -> tuple[int, int | str]:
    """Numeric ids sort numerically, ahead of any other ids."""
    if isinstance(row_id, int) and not isinstance(row_id, bool):
        return (0, row_id)
    return (1, str(row_id))


def rows_in_range(
    rows: list[ReportRow],
    from_ymd: str,
    to_ymd: str,
    client_id: int | str | None = None,
) -> list[ReportRow]:
    """Rows with from <= doc <= to, ordered by date then id.

    A client_id of None or "all" keeps every client.
    """
    start, end_exclusive = half_open_range(from_ymd, to_ymd)

    selected = [r for r in rows if start <= r.doc < end_exclusive]
    if client_id is not None and client_id != "all":
        selected = [r for r in selected if str(r.client_id) == str(client_id)]

    return sorted(selected, key=lambda r: (r.doc, _id_key(r.id)))


def rows_for_month(
    rows: list[ReportRow], ms: datetime, client_id: int | str | None = None
) -> list[ReportRow]:
    """Rows falling in the calendar month starting at ms."""
    token = format_month_token(ms)
    last_day = month_end(ms).day
    return rows_in_range(rows, f"{token}-01", f"{token}-{last_day:02d}", client_id)


def filter_rows(rows: list[ReportRow], search: str) -> list[ReportRow]:
    """Keep rows whose client name matches the search."""
    return [r for r in rows if prefix_then_fuzzy_filter(r.client_name or "", search)]


def summarize(rows: list[ReportRow]) -> ReportTotals:
    return ReportTotals(
        count=len(rows),
        total_hours=sum((r.billed_hours for r in rows), Decimal("0")),
    )


def format_row_hours(hours: Decimal | None, hours_format: str = "hm") -> str:
    if hours is None:
        return "—"
    if hours_format == "decimal":
        return format_hours_decimal(hours)
    return format_hours(hours)


def format_totals(totals: ReportTotals, locale: str = "fr", hours_format: str = "decimal") -> str:
    """Totals line, e.g. "3 entrées • 4.50 h"."""
    word = ENTRY_WORD.get(locale, ENTRY_WORD["en"])
    entries = pluralize(word, locale, count=totals.count, inclusive=True)
    return f"{entries} • {format_row_hours(totals.total_hours, hours_format)}"


def row_minutes(row: ReportRow) -> int:
    if row.hours is None:
        return 0
    minutes = float(row.hours) * 60
    return round_half_up(minutes) if math.isfinite(minutes) else 0


def _add(totals: dict, key, minutes: int) -> None:
    totals[key] = totals.get(key, 0) + minutes


def _accumulate(totals: MinuteTotals, row: ReportRow, minutes: int) -> None:
    client_key = str(row.client_id)
    _add(totals.by_client, client_key, minutes)
    if row.mandat_id is not None:
        _add(totals.by_mandat, row.mandat_id, minutes)
    if row.employee_id is not None:
        _add(totals.by_client_employee, (client_key, str(row.employee_id)), minutes)


def aggregate_minutes(rows: list[ReportRow], ms: datetime) -> MonthAggregate:
    """Sum billed minutes for the month starting at ms.

    Month sums cover every row of the month. Week sums cover only the last
    full Monday-Sunday week inside the month. Rows worth zero minutes and
    rows without a client are left out.
    """
    weeks = full_weeks_in_month(ms.year, ms.month)
    last_full_week = weeks[-1] if weeks else None

    aggregate = MonthAggregate(
        month=MinuteTotals(),
        week=MinuteTotals(),
        full_weeks_count=len(weeks),
        last_full_week=last_full_week,
    )

    for row in rows_for_month(rows, ms):
        minutes = row_minutes(row)
        if not minutes or row.client_id is None:
            continue
        _accumulate(aggregate.month, row, minutes)
        if last_full_week and last_full_week[0] <= row.doc <= last_full_week[1]:
            _accumulate(aggregate.week, row, minutes)

    return aggregate


def mandat_monthly_revenue(mandat: ClientMandat) -> Decimal:
    """Monthly mandats bill their amount; hourly ones bill amount × quota."""
    if mandat.billing_type.lower() == "monthly":
        return mandat.amount
    return (mandat.amount * mandat.quota_max).quantize(CENT, rounding=ROUND_HALF_UP)


def mandat_hourly_equivalent(mandat: ClientMandat) -> Decimal | None:
    if mandat.billing_type.lower() == "hourly":
        return mandat.amount
    if mandat.quota_max > 0:
        return (mandat.amount / mandat.quota_max).quantize(CENT, rounding=ROUND_HALF_UP)
    return None


def team_monthly_cost(team: list[TeamMember]) -> Decimal:
    """Cost of a client team if every member works their full quota."""
    return sum((m.quota_max * m.rate for m in team), Decimal("0"))


def allocate_team_cost_to_mandat(
    mandat: ClientMandat, mandats: list[ClientMandat], team_cost: Decimal
) -> Decimal:
    """Share a client's team cost between its mandats by quota.

    Mandats without any quota split the cost evenly.
    """
    total_quota = sum((m.quota_max for m in mandats), Decimal("0"))
    if total_quota <= 0:
        if not mandats:
            return Decimal("0")
        share = team_cost / len(mandats)
    else:
        share = team_cost * mandat.quota_max / total_quota
    return share.quantize(CENT, rounding=ROUND_HALF_UP)
