"""Tests for duration.py - decimal hours and duration text."""

from decimal import Decimal

import pytest

from duration import (
    ParseError,
    format_hours,
    format_hours_decimal,
    is_duration_error,
    parse_duration,
    to_stored_hours,
)


class TestFormatHours:
    """Tests for format_hours function."""

    def test_half_hour(self):
        assert format_hours(1.5) == "1h30"

    def test_whole_hours_have_no_minute_suffix(self):
        assert format_hours(2.0) == "2h"
        assert format_hours(0) == "0h"

    def test_minutes_round_to_nearest(self):
        assert format_hours(1.25) == "1h15"
        assert format_hours(0.1) == "0h6"

    def test_sixty_minutes_carry_into_hours(self):
        """1.9999 would round to 60 minutes; it must become 2h, not 1h60."""
        assert format_hours(1.9999) == "2h"

    def test_negative_value_truncates_toward_zero(self):
        assert format_hours(-1.5) == "-1h30"

    def test_negative_fraction_keeps_sign(self):
        assert format_hours(-0.5) == "-0h30"

    def test_negative_carry(self):
        assert format_hours(-1.9999) == "-2h"

    def test_decimal_input(self):
        assert format_hours(Decimal("1.75")) == "1h45"

    def test_non_finite_gives_empty_string(self):
        assert format_hours(float("nan")) == ""
        assert format_hours(float("inf")) == ""
        assert format_hours(float("-inf")) == ""

    def test_half_minute_rounds_away_from_zero(self):
        """0.375 h is exactly 22.5 minutes."""
        assert format_hours(0.375) == "0h23"
        assert format_hours(-0.375) == "-0h23"
        assert format_hours(1.125) == "1h8"


class TestParseDuration:
    """Tests for parse_duration function."""

    @pytest.mark.parametrize("text, expected", [
        ("1.5", 1.5),
        ("1.5h", 1.5),
        ("2", 2.0),
        ("2H", 2.0),
        ("1,5", 1.5),
        ("  1.5h  ", 1.5),
    ])
    def test_decimal_notation(self, text, expected):
        assert parse_duration(text) == pytest.approx(expected)

    def test_hour_minute_notation(self):
        assert parse_duration("1h30") == pytest.approx(1.5)
        assert parse_duration("0h45") == pytest.approx(0.75)

    def test_minute_overflow_is_accepted(self):
        """Minutes above 59 spill into hours."""
        assert parse_duration("1h90") == pytest.approx(2.5)

    def test_colon_notation(self):
        assert parse_duration("1:30") == pytest.approx(1.5)
        assert parse_duration("0:05") == pytest.approx(5 / 60)

    @pytest.mark.parametrize("text, expected", [
        ("90m", 1.5),
        ("45min", 0.75),
        ("30mins", 0.5),
        ("7.5m", 0.125),
        ("90M", 1.5),
    ])
    def test_minutes_notation(self, text, expected):
        assert parse_duration(text) == pytest.approx(expected)

    def test_negative_values(self):
        assert parse_duration("-1.5") == pytest.approx(-1.5)
        assert parse_duration("-1h30") == pytest.approx(-1.5)
        assert parse_duration("-1:30") == pytest.approx(-1.5)
        assert parse_duration("-30m") == pytest.approx(-0.5)

    def test_empty_is_not_unrecognized(self):
        assert parse_duration("") is ParseError.EMPTY
        assert parse_duration("   ") is ParseError.EMPTY

    @pytest.mark.parametrize("text", [
        "abc",
        "h",
        "1h30m",
        "1h300",
        "1:",
        "1.5.5",
        "1 h 30",
        "-",
        "90 minutes",
    ])
    def test_unrecognized(self, text):
        assert parse_duration(text) is ParseError.UNRECOGNIZED

    @pytest.mark.parametrize("text", [
        "١h٣٠",
        "１.５",
        "１:３０",
    ])
    def test_non_ascii_digits_rejected(self, text):
        assert parse_duration(text) is ParseError.UNRECOGNIZED

    def test_huge_values_are_unrecognized(self):
        assert parse_duration("9" * 400) is ParseError.UNRECOGNIZED
        assert parse_duration("9" * 400 + "h30") is ParseError.UNRECOGNIZED
        assert parse_duration("9" * 400 + "m") is ParseError.UNRECOGNIZED
        assert parse_duration("9" * 5000 + ":30") is ParseError.UNRECOGNIZED

    def test_non_string_raises(self):
        with pytest.raises(TypeError):
            parse_duration(1.5)  # type: ignore[arg-type]

    def test_is_duration_error(self):
        assert is_duration_error(parse_duration("abc"))
        assert is_duration_error(parse_duration(""))
        assert not is_duration_error(parse_duration("1h"))

    @pytest.mark.parametrize("value", [0, 0.25, 1.5, 1.9999, 7.33, 12.01, -0.5, -3.75, 9999.99, -9999.5])
    def test_format_then_parse_recovers_value(self, value):
        """Formatting and parsing back loses at most one minute."""
        assert abs(parse_duration(format_hours(value)) - value) <= 1 / 60


class TestDisplayHelpers:
    """Tests for format_hours_decimal and to_stored_hours."""

    def test_format_hours_decimal(self):
        assert format_hours_decimal(1.5) == "1.50 h"
        assert format_hours_decimal(Decimal("2")) == "2.00 h"

    def test_format_hours_decimal_unknown(self):
        assert format_hours_decimal(None) == "—"
        assert format_hours_decimal(float("nan")) == "—"

    def test_to_stored_hours(self):
        assert to_stored_hours(1.5) == Decimal("1.50")
        assert to_stored_hours(1 + 20 / 60) == Decimal("1.33")

    def test_to_stored_hours_large_finite(self):
        assert to_stored_hours(1e300) == Decimal("1e300")

    def test_to_stored_hours_rejects_non_finite(self):
        with pytest.raises(ValueError):
            to_stored_hours(float("inf"))
        with pytest.raises(ValueError):
            to_stored_hours(float("nan"))
