from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from pathlib import Path


@dataclass
class ReportRow:
    id: int | str
    doc: date
    hours: Decimal | None = None
    client_id: int | str | None = None
    client_name: str | None = None
    details: str | None = None
    employee: str | None = None
    employee_id: int | str | None = None
    mandat_id: int | None = None
    service_id: int | None = None

    @property
    def billed_hours(self) -> Decimal:
        """Hours counted in totals; unknown amounts count as zero."""
        return self.hours if self.hours is not None else Decimal("0")


@dataclass
class ReportTotals:
    count: int = 0
    total_hours: Decimal = Decimal("0")


@dataclass
class ClientMandat:
    """A billing agreement: a monthly amount, or an hourly rate with a quota."""

    id: int
    client_id: int | str
    amount: Decimal = Decimal("0")
    quota_max: Decimal = Decimal("0")
    billing_type: str = "hourly"
    description: str | None = None


@dataclass
class TeamMember:
    """An employee assigned to a client with a monthly hour quota."""

    user_id: int | str
    client_id: int | str
    role: str = "helper"
    quota_max: Decimal = Decimal("0")
    rate: Decimal = Decimal("0")
    full_name: str | None = None


@dataclass
class MinuteTotals:
    """Billed minutes keyed by client, mandat and (client, employee)."""

    by_client: dict[str, int] = field(default_factory=dict)
    by_mandat: dict[int, int] = field(default_factory=dict)
    by_client_employee: dict[tuple[str, str], int] = field(default_factory=dict)


@dataclass
class MonthAggregate:
    """Minutes billed over a month and over its last full week."""

    month: MinuteTotals
    week: MinuteTotals
    full_weeks_count: int = 0
    last_full_week: tuple[date, date] | None = None


@dataclass
class Config:
    locale: str = "fr"
    hours_format: str = "hm"
    log_level: str = "WARNING"
    data_path: Path | None = None
