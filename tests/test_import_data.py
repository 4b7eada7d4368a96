"""Tests for import_data.py - loading rows from a JSON export."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

import pytest

from import_data import duration_minutes, import_row, load_report_rows, parse_hours_value


class TestParseHoursValue:
    """Tests for parse_hours_value function."""

    def test_number(self):
        assert parse_hours_value(1.5) == Decimal("1.50")
        assert parse_hours_value(2) == Decimal("2.00")

    def test_duration_text(self):
        assert parse_hours_value("1h30") == Decimal("1.50")
        assert parse_hours_value("45min") == Decimal("0.75")
        assert parse_hours_value("1,25") == Decimal("1.25")

    def test_missing_values(self):
        assert parse_hours_value(None) is None
        assert parse_hours_value("") is None

    def test_unrecognized_text_is_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="import_data"):
            assert parse_hours_value("lots") is None
        assert "Unrecognized hours value" in caplog.text

    def test_non_finite_and_boolean(self):
        assert parse_hours_value(float("nan")) is None
        assert parse_hours_value(True) is None

    def test_huge_values(self):
        assert parse_hours_value("9" * 400) is None
        assert parse_hours_value("9" * 400 + "h30") is None
        assert parse_hours_value(10 ** 400) is None
        assert parse_hours_value(float("inf")) is None


class TestImportRow:
    """Tests for import_row function."""

    def test_nested_relations(self):
        row = import_row({
            "id": 7,
            "doc": "2024-02-05",
            "billed_amount": 3,
            "client": {"id": 10, "name": "Équipe Lévesque"},
            "profiles": {"full_name": "Marie Roy"},
            "details": "Paie",
        })
        assert row is not None
        assert row.id == 7
        assert row.doc == date(2024, 2, 5)
        assert row.hours == Decimal("3.00")
        assert row.client_id == 10
        assert row.client_name == "Équipe Lévesque"
        assert row.employee == "Marie Roy"
        assert row.details == "Paie"

    def test_timestamp_doc_keeps_date(self):
        row = import_row({"id": 1, "doc": "2024-02-06T00:00:00+00:00"})
        assert row is not None
        assert row.doc == date(2024, 2, 6)
        assert row.hours is None

    def test_invalid_doc_skipped(self):
        assert import_row({"id": 1, "doc": "06/02/2024"}) is None
        assert import_row({"id": 1}) is None

    def test_missing_id_skipped(self, caplog):
        with caplog.at_level(logging.WARNING, logger="import_data"):
            assert import_row({"doc": "2024-02-05", "billed_amount": 1}) is None
            assert import_row({"id": None, "doc": "2024-02-05"}) is None
        assert "without id" in caplog.text

    def test_huge_duration_text_keeps_row(self):
        row = import_row({"id": 8, "doc": "2024-02-05", "billed_amount": "9" * 400 + "h30"})
        assert row is not None
        assert row.hours is None

    def test_mandat_service_and_employee(self):
        row = import_row({
            "id": 9,
            "doc": "2024-02-05",
            "billed_amount": 1,
            "client_id": 10,
            "mandat": {"id": 3},
            "clients_services": {"id": 12},
            "user_id": "u-2",
            "created_by": "u-9",
        })
        assert row.mandat_id == 3
        assert row.service_id == 12
        assert row.employee_id == "u-2"

    def test_direct_ids_win_over_nested(self):
        row = import_row({
            "id": 9,
            "doc": "2024-02-05",
            "mandat_id": 4,
            "mandat": {"id": 3},
            "service_id": 5,
            "profile_id": "p-1",
            "user_id": "u-2",
        })
        assert row.mandat_id == 4
        assert row.service_id == 5
        assert row.employee_id == "p-1"

    def test_hours_fall_back_to_minutes(self):
        row = import_row({"id": 9, "doc": "2024-02-05", "billed_amount": None, "minutes": 90})
        assert row.hours == Decimal("1.50")

        row = import_row({"id": 9, "doc": "2024-02-05", "hours": 0.25})
        assert row.hours == Decimal("0.25")


class TestDurationMinutes:
    """Tests for duration_minutes function."""

    def test_billed_amount_wins(self):
        assert duration_minutes({"billed_amount": 1.5, "minutes": 10}) == 90

    def test_fallback_order(self):
        assert duration_minutes({"minutes": 45, "duration_min": 30}) == 45
        assert duration_minutes({"duration_min": 30, "hours": 2}) == 30
        assert duration_minutes({"hours": 2}) == 120

    def test_half_minute_rounds_up(self):
        assert duration_minutes({"billed_amount": 0.375}) == 23

    def test_unusable_values(self):
        assert duration_minutes({}) == 0
        assert duration_minutes({"billed_amount": "1h30"}) == 0
        assert duration_minutes({"minutes": True}) == 0
        assert duration_minutes({"hours": float("nan")}) == 0
        assert duration_minutes({"billed_amount": 1e308}) == 0


class TestLoadReportRows:
    """Tests for load_report_rows function."""

    def test_loads_usable_rows(self, rows_json):
        rows = load_report_rows(rows_json)

        assert [r.id for r in rows] == [1, 2, 4]
        assert rows[0].hours == Decimal("1.50")
        assert rows[1].hours == Decimal("1.50")
        assert rows[1].client_name == "Boulangerie Côté"
        assert rows[2].hours is None

    def test_rejects_non_list(self, tmp_path):
        path = tmp_path / "rows.json"
        path.write_text('{"id": 1}', encoding="utf-8")
        with pytest.raises(ValueError):
            load_report_rows(path)

    def test_non_object_items_skipped(self, tmp_path, caplog):
        path = tmp_path / "rows.json"
        path.write_text(
            '[1, "x", null, [], {"id": 5, "doc": "2024-02-05", "billed_amount": 2}]',
            encoding="utf-8",
        )
        with caplog.at_level(logging.WARNING, logger="import_data"):
            rows = load_report_rows(path)

        assert [r.id for r in rows] == [5]
        assert "not an object" in caplog.text

    def test_rejects_malformed_json(self, tmp_path):
        path = tmp_path / "rows.json"
        path.write_text("[{", encoding="utf-8")
        with pytest.raises(ValueError):
            load_report_rows(path)
