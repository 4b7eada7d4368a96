"""Modal screens for the Gétime application."""

from __future__ import annotations

from datetime import date

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Input, Label
from textual.screen import ModalScreen

from billing_period import BillingWindow, format_month_token, parse_month_token
from duration import to_stored_hours
from models import ReportRow
from report import format_row_hours
from utils import parse_ymd
from widgets import DurationInput


class DeleteEntryScreen(ModalScreen[bool]):
    """Asks before removing a time entry from the report."""

    CSS = """
    DeleteEntryScreen {
        align: center middle;
    }

    #delete-dialog {
        width: 56;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: thick $error;
    }

    #delete-title {
        text-style: bold;
        margin-bottom: 1;
    }

    #delete-details {
        color: $text-muted;
    }

    #delete-buttons {
        width: 100%;
        height: auto;
        margin-top: 1;
    }

    #delete-buttons Button {
        width: 1fr;
        margin: 0 1;
    }
    """

    BINDINGS = [
        Binding("escape", "keep", "Keep"),
        Binding("y", "delete", "Delete"),
        Binding("n", "keep", "Keep"),
    ]

    def __init__(self, row: ReportRow, hours_format: str = "hm"):
        super().__init__()
        self.row = row
        self.hours_format = hours_format

    @property
    def details_line(self) -> str:
        """e.g. "2024-02-01 · Boulangerie Côté · 1h30"."""
        return " · ".join([
            self.row.doc.isoformat(),
            self.row.client_name or "—",
            format_row_hours(self.row.hours, self.hours_format),
        ])

    def compose(self) -> ComposeResult:
        with Vertical(id="delete-dialog"):
            yield Label("Delete this entry?", id="delete-title")
            yield Label(self.details_line, id="delete-details")
            if self.row.details:
                yield Label(self.row.details)
            with Horizontal(id="delete-buttons"):
                yield Button("Delete (Y)", variant="error", id="delete")
                yield Button("Keep (N)", variant="default", id="keep")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "delete")

    def action_delete(self) -> None:
        self.dismiss(True)

    def action_keep(self) -> None:
        self.dismiss(False)


def resolve_month_input(window: BillingWindow, value: str) -> str | None:
    """Turn a typed month token or YYYY-MM-DD date into a clamped month token."""
    value = value.strip()
    ms = parse_month_token(value)
    if ms is None:
        d = parse_ymd(value)
        if d is None:
            return None
        return format_month_token(window.clamp_to_month_start(d))
    return format_month_token(window.clamp_to_month_start(ms))


class MonthSelectScreen(ModalScreen[str | None]):
    """Modal screen for jumping to a completed billing month."""

    CSS = """
    MonthSelectScreen {
        align: center middle;
    }

    #month-dialog {
        width: 60;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: thick $primary;
    }

    #month-title {
        width: 100%;
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }

    #month-hint {
        color: $text-muted;
        margin-bottom: 1;
    }

    #month-buttons {
        width: 100%;
        height: auto;
        margin-top: 1;
        align: center middle;
    }

    #month-buttons Button {
        width: auto;
        min-width: 12;
        margin: 0 2;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, window: BillingWindow):
        super().__init__()
        self.window = window

    def compose(self) -> ComposeResult:
        with Vertical(id="month-dialog"):
            yield Label("Select Month", id="month-title")
            yield Label(
                "Enter a month (YYYY-MM) or any date in it (YYYY-MM-DD). "
                "Completed months only.",
                id="month-hint",
            )
            yield Input(
                value=format_month_token(self.window.effective_month_start),
                placeholder="YYYY-MM",
                id="month-input",
            )
            with Horizontal(id="month-buttons"):
                yield Button("Go", variant="primary", id="go")
                yield Button("Cancel", variant="default", id="cancel")

    def on_mount(self) -> None:
        self.query_one("#month-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "month-input":
            self._submit()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "cancel":
            self.dismiss(None)
        elif event.button.id == "go":
            self._submit()

    def action_cancel(self) -> None:
        self.dismiss(None)

    def _submit(self) -> None:
        token = resolve_month_input(self.window, self.query_one("#month-input", Input).value)
        if token is None:
            self.app.notify("Invalid month. Use YYYY-MM or YYYY-MM-DD", severity="error")
            return
        self.dismiss(token)


def entry_from_fields(
    window: BillingWindow,
    row_id: int | str,
    date_text: str,
    client_text: str,
    hours: float | None,
    hours_blank: bool,
    details_text: str,
) -> tuple[ReportRow | None, str | None]:
    """Validate the new entry form. Returns (row, None) or (None, error message)."""
    doc = parse_ymd(date_text.strip())
    if doc is None:
        return None, "Invalid date. Use YYYY-MM-DD"
    if not window.is_selectable(doc):
        return None, "Only completed months can be billed"

    if hours_blank:
        return None, "Hours are required"
    if hours is None:
        return None, "Invalid duration. Use 1h30, 1:30, 90m or 1.5"

    row = ReportRow(
        id=row_id,
        doc=doc,
        hours=to_stored_hours(hours),
        client_name=client_text.strip() or None,
        details=details_text.strip() or None,
    )
    return row, None


class TimeEntryScreen(ModalScreen[ReportRow | None]):
    """Modal screen for adding a time entry to the report."""

    CSS = """
    TimeEntryScreen {
        align: center middle;
    }

    #entry-dialog {
        width: 70;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: thick $primary;
    }

    #entry-title {
        width: 100%;
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }

    .field-label {
        height: 1;
        margin-bottom: 0;
        color: $text-muted;
    }

    DurationInput.-invalid {
        border: tall $error;
    }

    #entry-buttons {
        width: 100%;
        height: auto;
        margin-top: 1;
        align: center middle;
    }

    #entry-buttons Button {
        width: auto;
        min-width: 12;
        margin: 0 2;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    FIELD_ORDER = ["entry-date", "entry-client", "entry-hours", "entry-details"]

    def __init__(self, window: BillingWindow, row_id: int | str, default_date: date):
        super().__init__()
        self.window = window
        self.row_id = row_id
        self.default_date = default_date

    def compose(self) -> ComposeResult:
        with Vertical(id="entry-dialog"):
            yield Label("New Time Entry", id="entry-title")
            yield Label("Date", classes="field-label")
            yield Input(value=self.default_date.isoformat(), placeholder="YYYY-MM-DD", id="entry-date")
            yield Label("Client", classes="field-label")
            yield Input(placeholder="", id="entry-client")
            yield Label("Hours", classes="field-label")
            yield DurationInput(id="entry-hours")
            yield Label("Details", classes="field-label")
            yield Input(placeholder="", id="entry-details")

            with Horizontal(id="entry-buttons"):
                yield Button("Save", variant="primary", id="save")
                yield Button("Cancel", variant="default", id="cancel")

    def on_mount(self) -> None:
        self.query_one("#entry-hours", DurationInput).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Move to next field on Enter, or save if on last field."""
        current_id = event.input.id
        if current_id in self.FIELD_ORDER:
            current_idx = self.FIELD_ORDER.index(current_id)
            if current_idx < len(self.FIELD_ORDER) - 1:
                next_id = self.FIELD_ORDER[current_idx + 1]
                self.query_one(f"#{next_id}", Input).focus()
            else:
                self._save()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "cancel":
            self.dismiss(None)
        elif event.button.id == "save":
            self._save()

    def action_cancel(self) -> None:
        self.dismiss(None)

    def _save(self) -> None:
        hours_input = self.query_one("#entry-hours", DurationInput)
        row, error = entry_from_fields(
            self.window,
            self.row_id,
            self.query_one("#entry-date", Input).value,
            self.query_one("#entry-client", Input).value,
            hours_input.hours,
            hours_input.is_blank,
            self.query_one("#entry-details", Input).value,
        )
        if error:
            self.app.notify(error, severity="error")
            return
        self.dismiss(row)
