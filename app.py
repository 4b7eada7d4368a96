#!/usr/bin/env python3
"""Gétime billing report TUI application."""

from __future__ import annotations

import logging
from datetime import datetime

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.widgets import DataTable, Footer, Input

from billing_period import (
    BillingWindow,
    compute_selectable_window,
    default_max_month,
    format_month_token,
    month_start,
    parse_month_token,
    shift_month,
)
from config import load_config
from import_data import load_report_rows
from models import Config, ReportRow
from report import aggregate_minutes, filter_rows, format_row_hours, rows_for_month, summarize
from screens import DeleteEntryScreen, MonthSelectScreen, TimeEntryScreen
from widgets import MonthHeader, ReportSummary

logger = logging.getLogger(__name__)


class ReportDataTable(DataTable):
    """DataTable that hands left/right keys to the app for month navigation."""

    def on_key(self, event) -> None:
        if event.key == "left":
            if hasattr(self.app, "action_prev_month"):
                self.app.action_prev_month()  # type: ignore[attr-defined]
            event.prevent_default()
            event.stop()
        elif event.key == "right":
            if hasattr(self.app, "action_next_month"):
                self.app.action_next_month()  # type: ignore[attr-defined]
            event.prevent_default()
            event.stop()


class GetimeApp(App):
    """Monthly billing report over completed months."""

    CSS = """
    Screen {
        background: $surface;
    }

    #month-header {
        height: auto;
        background: $primary;
        color: $text;
        padding: 0 1;
        text-style: bold;
    }

    #client-filter {
        margin: 1 2 0 2;
    }

    #report-table {
        height: 1fr;
        margin: 1 2;
    }

    #report-summary {
        height: auto;
        padding: 1 2;
        color: $text;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("g", "pick_month", "Month"),
        Binding("a", "add_entry", "Add"),
        Binding("d", "delete_entry", "Delete"),
        Binding("slash", "focus_filter", "Filter"),
        Binding("escape", "focus_table", "Table", show=False),
    ]

    def __init__(
        self,
        rows: list[ReportRow] | None = None,
        config: Config | None = None,
        now: datetime | None = None,
    ):
        super().__init__()
        self.config = config or load_config()
        self.rows: list[ReportRow] = list(rows) if rows is not None else self._load_rows()

        # Start on the most recently completed month
        self.max_month = default_max_month(now)
        self.window: BillingWindow = compute_selectable_window(self.max_month, self.max_month, now)
        self.client_search = ""

    def _load_rows(self) -> list[ReportRow]:
        path = self.config.data_path
        if path is None:
            return []
        if not path.exists():
            logger.warning("Data file %s does not exist, starting empty", path)
            return []
        try:
            return load_report_rows(path)
        except (OSError, ValueError) as e:
            logger.warning("Could not load %s, starting empty: %s", path, e)
            return []

    def compose(self) -> ComposeResult:
        yield MonthHeader(self.window, self.config.locale, id="month-header")
        yield Input(placeholder="Filter clients…", id="client-filter")
        yield Container(ReportDataTable(id="report-table"), id="report-table-container")
        yield ReportSummary(id="report-summary")
        yield Footer()

    def on_mount(self):
        table = self.query_one("#report-table", DataTable)
        table.cursor_type = "row"
        table.add_column("Date", width=10)
        table.add_column("Employee", width=18)
        table.add_column("Client", width=24)
        table.add_column("Hours", width=9)
        table.add_column("Details", width=30)
        self._refresh_display()
        table.focus()

    def _month_rows(self) -> list[ReportRow]:
        """Rows of the displayed month that match the client filter."""
        rows = rows_for_month(self.rows, self.window.effective_month_start)
        return filter_rows(rows, self.client_search)

    def _next_row_id(self) -> int:
        int_ids = [r.id for r in self.rows if isinstance(r.id, int)]
        return max(int_ids, default=0) + 1

    def _apply_month(self, ms: datetime) -> None:
        """Select a month, clamped to the last completed one."""
        self.window = BillingWindow(
            month_start=self.window.clamp_to_month_start(ms),
            max_month_start=self.window.max_month_start,
        )

    def _refresh_display(self):
        ms = self.window.effective_month_start
        self.query_one("#month-header", MonthHeader).update_display(self.window)

        table = self.query_one("#report-table", DataTable)
        table.clear()
        rows = self._month_rows()
        for row in rows:
            table.add_row(
                row.doc.isoformat(),
                row.employee or "",
                row.client_name or "—",
                format_row_hours(row.hours, self.config.hours_format),
                row.details or "",
                key=str(row.id),
            )

        aggregate = aggregate_minutes(rows, ms)
        self.query_one("#report-summary", ReportSummary).update_display(
            summarize(rows),
            aggregate.full_weeks_count,
            self.config,
            last_week_minutes=sum(aggregate.week.by_client.values()),
        )

    def action_prev_month(self):
        self._apply_month(shift_month(self.window.effective_month_start, -1))
        self._refresh_display()

    def action_next_month(self):
        if self.window.at_max:
            self.notify("Only completed months can be selected", severity="warning")
            return
        self._apply_month(shift_month(self.window.effective_month_start, 1))
        self._refresh_display()

    def action_pick_month(self):
        self.push_screen(MonthSelectScreen(self.window), self._on_month_selected)

    def _on_month_selected(self, token: str | None) -> None:
        if not token:
            return
        ms = parse_month_token(token)
        if ms is None:
            return
        self._apply_month(ms)
        self._refresh_display()

    def action_add_entry(self):
        screen = TimeEntryScreen(
            self.window,
            self._next_row_id(),
            self.window.effective_month_start.date(),
        )
        self.push_screen(screen, self._on_entry_saved)

    def _on_entry_saved(self, row: ReportRow | None) -> None:
        if row is None:
            return
        self.rows.append(row)
        self._apply_month(month_start(row.doc))
        self._refresh_display()
        self.notify(f"Added entry for {row.doc.isoformat()}")

    def _selected_row(self) -> ReportRow | None:
        table = self.query_one("#report-table", DataTable)
        if not table.row_count:
            return None
        row_key, _ = table.coordinate_to_cell_key(table.cursor_coordinate)
        return next((r for r in self.rows if str(r.id) == row_key.value), None)

    def action_delete_entry(self):
        row = self._selected_row()
        if row is None:
            return

        def do_delete(confirmed: bool | None) -> None:
            if confirmed:
                self._remove_row(row)
                self._refresh_display()

        self.push_screen(DeleteEntryScreen(row, self.config.hours_format), do_delete)

    def _remove_row(self, row: ReportRow) -> None:
        self.rows = [r for r in self.rows if r is not row]

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "client-filter":
            self.client_search = event.value
            self._refresh_display()

    def action_focus_filter(self):
        self.query_one("#client-filter", Input).focus()

    def action_focus_table(self):
        self.query_one("#report-table", DataTable).focus()

    @property
    def month_token(self) -> str:
        return format_month_token(self.window.effective_month_start)


def main():
    import sys
    from pathlib import Path

    from textual.logging import TextualHandler

    config = load_config()
    logging.basicConfig(level=config.log_level, handlers=[TextualHandler()])

    if len(sys.argv) > 1:
        config.data_path = Path(sys.argv[1])

    app = GetimeApp(config=config)
    app.run()


if __name__ == "__main__":
    main()
