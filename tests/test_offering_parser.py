"""Tests for offering and property payload parsing."""

import pytest
from datetime import date
from decimal import Decimal

from travelhub.models.pricing import FixedService, HourlyService
from travelhub.parsers.offering_parser import (
    parse_amount,
    parse_date,
    parse_service_selection,
    parse_stay_request,
)


class TestParseAmount:
    """Tests for parse_amount."""

    def test_decimal_string(self):
        """Test plain decimal strings."""
        assert parse_amount("120.50") == Decimal("120.50")

    def test_currency_and_thousands(self):
        """Test currency symbols and separators."""
        assert parse_amount("$1,234.56") == Decimal("1234.56")
        assert parse_amount("€ 1.234,56") == Decimal("1234.56")

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("$1,234", Decimal("1234")),
            ("1,234,567", Decimal("1234567")),
            ("12,50", Decimal("12.50")),
            ("0,5", Decimal("0.5")),
        ],
    )
    def test_lone_comma(self, value, expected):
        """Test a comma is a thousands separator only before a 3-digit group."""
        assert parse_amount(value) == expected

    def test_numbers(self):
        """Test int and float input."""
        assert parse_amount(45) == Decimal("45")
        assert parse_amount(19.99) == Decimal("19.99")

    @pytest.mark.parametrize("value", [None, "", "   ", "abc", "NaN", float("nan"), "-5"])
    def test_coerced_to_zero(self, value):
        """Test empty, invalid, NaN and negative values become 0."""
        assert parse_amount(value) == Decimal("0")


class TestParseDate:
    """Tests for parse_date."""

    def test_iso_date(self):
        assert parse_date("2025-06-01") == date(2025, 6, 1)

    def test_iso_datetime(self):
        """Test datetime strings keep the date part."""
        assert parse_date("2025-06-01T00:00:00.000Z") == date(2025, 6, 1)

    def test_invalid(self):
        """Test invalid and empty dates return None."""
        assert parse_date("not a date") is None
        assert parse_date("") is None
        assert parse_date(None) is None


class TestParseServiceSelection:
    """Tests for parse_service_selection."""

    def test_hourly_offering(self):
        """Test an hourly rate makes an hourly selection."""
        selection = parse_service_selection(
            {"id": "p-1", "businessName": "Chef Marco", "hourlyRate": "45.00"},
            duration=3,
        )
        assert isinstance(selection, HourlyService)
        assert selection.hourly_rate == Decimal("45.00")
        assert selection.duration == 3
        assert selection.name == "Chef Marco"

    def test_fixed_offering(self):
        """Test a fixed rate makes a fixed selection."""
        selection = parse_service_selection(
            {"id": "p-2", "hourlyRate": None, "fixedRate": "120"},
            duration=4,
        )
        assert isinstance(selection, FixedService)
        assert selection.fixed_rate == Decimal("120")

    def test_empty_hourly_rate_falls_back_to_fixed(self):
        """Test an empty hourly rate string is treated as absent."""
        selection = parse_service_selection({"id": "p-3", "hourlyRate": "", "fixedRate": "80"})
        assert isinstance(selection, FixedService)

    def test_no_rates(self):
        """Test an offering with no price resolves to a zero fixed selection."""
        selection = parse_service_selection({"id": "p-4"})
        assert isinstance(selection, FixedService)
        assert selection.fixed_rate == Decimal("0")

    def test_duration_floor(self):
        """Test durations below one hour are raised to one."""
        selection = parse_service_selection({"id": "p-5", "hourly_rate": "10"}, duration=0)
        assert selection.duration == 1


class TestParseStayRequest:
    """Tests for parse_stay_request."""

    def test_property_payload(self):
        stay = parse_stay_request({"pricePerNight": "150.00"}, "2025-06-01", "2025-06-05")
        assert stay.nightly_rate == Decimal("150.00")
        assert stay.check_in == date(2025, 6, 1)
        assert stay.check_out == date(2025, 6, 5)

    def test_missing_property(self):
        """Test a missing property prices at 0."""
        stay = parse_stay_request(None, "", None)
        assert stay.nightly_rate == Decimal("0")
        assert stay.check_in is None
        assert stay.check_out is None
