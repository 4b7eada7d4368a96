"""Shared fixtures for tests."""

from __future__ import annotations

import json
from datetime import date, datetime, timezone
from decimal import Decimal
from pathlib import Path

import pytest


@pytest.fixture
def now() -> datetime:
    """A fixed 'current' instant: mid-March 2024, so February is the max month."""
    return datetime(2024, 3, 15, 10, 30, tzinfo=timezone.utc)


@pytest.fixture
def window(now):
    """Billing window with January 2024 selected and February 2024 as max."""
    from billing_period import compute_selectable_window

    return compute_selectable_window("2024-01", "2024-02", now)


@pytest.fixture
def sample_rows():
    """Report rows spread across January to March 2024."""
    from models import ReportRow

    return [
        ReportRow(
            id=3,
            doc=date(2024, 2, 1),
            hours=Decimal("1.50"),
            client_id=10,
            client_name="Équipe Lévesque",
            details="Tenue de livres",
            employee="Marie Roy",
        ),
        ReportRow(
            id=1,
            doc=date(2024, 1, 31),
            hours=Decimal("2.00"),
            client_id=20,
            client_name="Boulangerie Côté",
            employee="Marie Roy",
        ),
        ReportRow(
            id=2,
            doc=date(2024, 2, 1),
            hours=None,
            client_id=20,
            client_name="Boulangerie Côté",
        ),
        ReportRow(
            id=4,
            doc=date(2024, 2, 29),
            hours=Decimal("0.75"),
            client_id=10,
            client_name="Équipe Lévesque",
        ),
        ReportRow(
            id=5,
            doc=date(2024, 3, 1),
            hours=Decimal("3.00"),
            client_id=10,
            client_name="Équipe Lévesque",
        ),
    ]


@pytest.fixture
def sample_config():
    """Create a sample Config for testing."""
    from models import Config

    return Config(locale="fr", hours_format="decimal")


@pytest.fixture
def rows_json(tmp_path: Path) -> Path:
    """A JSON export with numeric, duration and unusable rows."""
    data = [
        {
            "id": 1,
            "doc": "2024-02-05",
            "billed_amount": 1.5,
            "client_id": 10,
            "client": {"id": 10, "name": "Équipe Lévesque"},
            "details": "Rapprochement",
            "profiles": {"full_name": "Marie Roy"},
        },
        {
            "id": 2,
            "doc": "2024-02-06T00:00:00+00:00",
            "billed_amount": "1h30",
            "client_name": "Boulangerie Côté",
        },
        {
            "id": 3,
            "doc": "not a date",
            "billed_amount": 2,
        },
        {
            "id": 4,
            "doc": "2024-02-07",
            "billed_amount": "beaucoup",
        },
    ]
    path = tmp_path / "rows.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path
