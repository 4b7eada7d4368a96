#!/usr/bin/env python3
"""Load time-entry report rows from a JSON export."""

from __future__ import annotations

import json
import logging
import math
from decimal import Decimal
from pathlib import Path

from duration import is_duration_error, parse_duration, round_half_up, to_stored_hours
from models import ReportRow
from utils import parse_ymd

logger = logging.getLogger(__name__)


def _finite_float(val) -> float | None:
    try:
        number = float(val)
    except OverflowError:
        return None
    return number if math.isfinite(number) else None


def parse_hours_value(val) -> Decimal | None:
    """Parse billed hours given as a number or a duration like '1h30'."""
    if val is None:
        return None
    if isinstance(val, bool):
        logger.warning("Ignoring boolean hours value %r", val)
        return None
    if isinstance(val, (int, float)):
        number = _finite_float(val)
        if number is None:
            logger.warning("Ignoring non-finite hours value %.40r", val)
            return None
        return to_stored_hours(number)

    result = parse_duration(str(val))
    if is_duration_error(result):
        if str(val).strip():
            logger.warning("Unrecognized hours value %.40r", val)
        return None
    return to_stored_hours(result)


def _number(val) -> float | None:
    if isinstance(val, bool) or not isinstance(val, (int, float)):
        return None
    return _finite_float(val)


def _to_minutes(value: float) -> int:
    return round_half_up(value) if math.isfinite(value) else 0


def duration_minutes(record: dict) -> int:
    """Minutes worked on a record.

    billed_amount (hours) wins, then minutes, duration_min and hours.
    Records with none of them are worth zero minutes.
    """
    if (billed := _number(record.get("billed_amount"))) is not None:
        return _to_minutes(billed * 60)
    for key in ("minutes", "duration_min"):
        if (minutes := _number(record.get(key))) is not None:
            return _to_minutes(minutes)
    if (hours := _number(record.get("hours"))) is not None:
        return _to_minutes(hours * 60)
    return 0


def _nested_value(record: dict, key: str, field: str):
    nested = record.get(key)
    if isinstance(nested, dict):
        return nested.get(field)
    return None


def _first_present(record: dict, *keys):
    for key in keys:
        if record.get(key) not in (None, ""):
            return record[key]
    return None


def _int_or_none(val) -> int | None:
    if isinstance(val, int) and not isinstance(val, bool):
        return val
    return None


def import_row(record: dict) -> ReportRow | None:
    """Reshape one exported record. Returns None if it has no id or a bad date."""
    row_id = record.get("id")
    if row_id is None:
        logger.warning("Skipping row without id dated %r", record.get("doc"))
        return None

    doc_val = record.get("doc") or ""
    # Timestamps keep only their date part
    doc = parse_ymd(str(doc_val)[:10])
    if not doc:
        logger.warning("Skipping row %r with invalid date %r", row_id, doc_val)
        return None

    client_id = record.get("client_id")
    if client_id is None:
        client_id = _nested_value(record, "client", "id")

    hours = parse_hours_value(record.get("billed_amount"))
    if hours is None and (minutes := duration_minutes(record)):
        hours = to_stored_hours(minutes / 60)

    mandat_id = _int_or_none(record.get("mandat_id"))
    if mandat_id is None:
        mandat_id = _int_or_none(_nested_value(record, "mandat", "id"))
    service_id = _int_or_none(record.get("service_id"))
    if service_id is None:
        service_id = _int_or_none(_nested_value(record, "clients_services", "id"))

    return ReportRow(
        id=row_id,
        doc=doc,
        hours=hours,
        client_id=client_id,
        client_name=_nested_value(record, "client", "name") or record.get("client_name"),
        details=record.get("details"),
        employee=_nested_value(record, "profiles", "full_name"),
        employee_id=_first_present(record, "profile_id", "user_id", "employee_id", "created_by"),
        mandat_id=mandat_id,
        service_id=service_id,
    )


def load_report_rows(json_path: Path) -> list[ReportRow]:
    """Load every usable row from a JSON list of time entries."""
    with open(json_path, encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON list of rows in {json_path}")

    rows = []
    for index, record in enumerate(data):
        if not isinstance(record, dict):
            logger.warning("Skipping item %d of %s: not an object", index, json_path)
            continue
        row = import_row(record)
        if row:
            rows.append(row)

    logger.info("Loaded %d of %d rows from %s", len(rows), len(data), json_path)
    return rows


if __name__ == "__main__":
    import sys

    for row in load_report_rows(Path(sys.argv[1])):
        print(f"{row.doc}  {row.client_name or '—':<30} {row.hours}")
