"""Custom widgets for the Gétime application."""

from __future__ import annotations

from decimal import Decimal

from textual.validation import ValidationResult, Validator
from textual.widgets import Input, Static
from rich.text import Text

from billing_period import BillingWindow, format_month_token, month_label
from duration import ParseError, format_hours, is_duration_error, parse_duration
from models import Config, ReportTotals
from pluralize import pluralize
from report import format_row_hours, format_totals


class DurationValidator(Validator):
    """Accepts any duration notation; a blank field counts as valid (unset)."""

    def validate(self, value: str) -> ValidationResult:
        if is_duration_error(parse_duration(value)) and value.strip():
            return self.failure("Use 1h30, 1:30, 90m or 1.5")
        return self.success()


class DurationInput(Input):
    """Input for hours that keeps invalid text visible and flags it."""

    def __init__(self, hours: float | None = None, value: str | None = None, **kwargs):
        if value is None:
            value = format_hours(hours) if hours is not None else ""
        kwargs.setdefault("placeholder", "1h30")
        super().__init__(value=value, validators=[DurationValidator()], **kwargs)

    @property
    def hours(self) -> float | None:
        """Decimal hours typed so far, or None if blank or unrecognized."""
        result = parse_duration(self.value)
        if is_duration_error(result):
            return None
        return result

    @property
    def is_blank(self) -> bool:
        return parse_duration(self.value) is ParseError.EMPTY

    def set_hours(self, hours: float) -> None:
        self.value = format_hours(hours)


class MonthHeader(Static):
    """Shows the selected month on the left and month navigation on the right."""

    def __init__(self, window: BillingWindow, locale: str = "fr", **kwargs):
        super().__init__(**kwargs)
        self.window = window
        self.locale = locale
        self.left_arrow_pos = 0
        self.right_arrow_pos = 0

    def update_display(self, window: BillingWindow | None = None):
        if window is not None:
            self.window = window

        ms = self.window.effective_month_start
        title = month_label(ms, self.locale).capitalize()
        token = format_month_token(ms)

        # Navigation ends at column 60, aligned with the table
        target_end_col = 60
        nav_len = len(token) + 4
        nav_start = max(target_end_col - nav_len, len(title) + 2)

        self.left_arrow_pos = nav_start
        self.right_arrow_pos = nav_start + nav_len - 1

        text = Text()
        text.append(title, style="bold")
        text.append(" " * (nav_start - len(title)))
        text.append("◄ ", style="bold")
        text.append(token, style="bold")
        # Next month is locked once the last completed month is shown
        text.append(" ►", style="dim" if self.window.at_max else "bold")

        self.update(text)

    def on_click(self, event) -> None:
        """Handle clicks on the arrows for month navigation."""
        click_col = event.x

        if self.left_arrow_pos <= click_col < self.left_arrow_pos + 2:
            self.app.action_prev_month()  # type: ignore[attr-defined]
        elif self.right_arrow_pos - 1 <= click_col <= self.right_arrow_pos:
            self.app.action_next_month()  # type: ignore[attr-defined]


class ReportSummary(Static):
    """Shows entry totals, full weeks in the month and last full week hours."""

    def update_display(
        self,
        totals: ReportTotals,
        full_weeks: int,
        config: Config,
        last_week_minutes: int | None = None,
    ):
        text = Text()
        text.append(format_totals(totals, config.locale, config.hours_format) + "\n", style="bold")

        if config.locale == "fr":
            weeks_line = (
                f"{pluralize('semaine', 'fr', count=full_weeks, inclusive=True)} "
                f"{pluralize('complète', 'fr', count=full_weeks)}"
            )
        else:
            weeks_line = pluralize("full week", count=full_weeks, inclusive=True)
        text.append(weeks_line, style="dim" if full_weeks == 0 else "")

        if full_weeks and last_week_minutes is not None:
            label = "Dernière semaine complète" if config.locale == "fr" else "Last full week"
            hours = format_row_hours(Decimal(last_week_minutes) / 60, config.hours_format)
            text.append(f"\n{label}: {hours}", style="dim" if not last_week_minutes else "")

        self.update(text)
