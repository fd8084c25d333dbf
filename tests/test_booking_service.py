"""Tests for booking submission and price authority."""

import pytest
import structlog
from datetime import date
from decimal import Decimal

from travelhub.config import PricingSettings
from travelhub.models.booking import BookingStatus, PaymentStatus
from travelhub.models.pricing import FixedService, HourlyService, StayRequest
from travelhub.services.booking_service import (
    BookingValidationError,
    DuplicateSelectionError,
    PriceMismatchError,
    build_submission,
    create_booking_record,
    validate_booking,
    verify_quote,
)
from travelhub.utils.booking_code import decode_booking_code
from travelhub.utils.logger import clear_request_context


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def settings():
    return PricingSettings()


@pytest.fixture
def stay():
    return StayRequest(
        nightly_rate=Decimal("100"),
        check_in=date(2025, 6, 1),
        check_out=date(2025, 6, 4),
    )


@pytest.fixture
def selections():
    return [
        HourlyService(
            id="chef-1",
            provider_id="prov-chef",
            name="Chef Marco",
            hourly_rate=Decimal("20"),
            duration=2,
        ),
        FixedService(id="guide-1", name="City Tour", fixed_rate=Decimal("50")),
    ]


# =============================================================================
# Validation Tests
# =============================================================================


class TestValidateBooking:
    """Tests for submit-time validation."""

    def test_valid(self, stay, selections):
        """Test a complete booking passes."""
        validate_booking("prop-1", stay, 2, selections, max_guests=4)

    def test_missing_property(self, stay):
        with pytest.raises(BookingValidationError, match="select a property and dates"):
            validate_booking(None, stay, 2, [])

    def test_missing_dates(self):
        with pytest.raises(BookingValidationError):
            validate_booking("prop-1", StayRequest(nightly_rate=Decimal("100")), 2, [])

    def test_checkout_before_checkin(self):
        """Test inverted dates are refused at submit time."""
        stay = StayRequest(
            nightly_rate=Decimal("100"),
            check_in=date(2025, 6, 4),
            check_out=date(2025, 6, 4),
        )
        with pytest.raises(BookingValidationError) as exc_info:
            validate_booking("prop-1", stay, 2, [])
        assert exc_info.value.details["check_in"] == "2025-06-04"

    def test_too_many_guests(self, stay):
        """Test guest count above capacity."""
        with pytest.raises(BookingValidationError) as exc_info:
            validate_booking("prop-1", stay, 6, [], max_guests=4)
        assert exc_info.value.details == {"guests": 6, "max_guests": 4}

    def test_no_guests(self, stay):
        with pytest.raises(BookingValidationError):
            validate_booking("prop-1", stay, 0, [])

    def test_duplicate_selection(self, stay, selections):
        """Test the same service cannot be selected twice."""
        with pytest.raises(DuplicateSelectionError) as exc_info:
            validate_booking("prop-1", stay, 2, selections + [selections[0]])
        assert exc_info.value.details["duplicate_ids"] == ["chef-1"]


# =============================================================================
# Submission Tests
# =============================================================================


class TestBuildSubmission:
    """Tests for the booking endpoint payload."""

    def test_payload_shape(self, stay, selections):
        """Test camelCase payload for the booking endpoint."""
        submission = build_submission("prop-1", stay, 2, selections)
        payload = submission.model_dump(by_alias=True, mode="json")

        assert payload["propertyId"] == "prop-1"
        assert payload["checkIn"] == "2025-06-01"
        assert payload["checkOut"] == "2025-06-04"
        assert payload["guests"] == 2

        chef, guide = payload["services"]
        assert chef == {
            "serviceProviderId": "prov-chef",
            "serviceName": "Chef Marco",
            "serviceDate": "2025-06-01",
            "duration": 2,
            "rate": "20",
            "total": "40",
            "status": "pending",
        }
        assert guide["serviceProviderId"] == "guide-1"
        assert guide["duration"] is None
        assert guide["total"] == "50"

    def test_service_date_override(self, stay, selections):
        submission = build_submission("prop-1", stay, 2, selections, service_date=date(2025, 6, 2))
        assert all(line.service_date == date(2025, 6, 2) for line in submission.services)

    def test_invalid_booking_raises(self, selections):
        with pytest.raises(BookingValidationError):
            build_submission("prop-1", StayRequest(), 2, selections)


# =============================================================================
# Authority Tests
# =============================================================================


class TestVerifyQuote:
    """Tests for server-side recomputation."""

    def test_matching_total(self, settings, stay, selections):
        """Test a matching client total returns the breakdown."""
        breakdown = verify_quote(Decimal("370.50"), stay, selections, settings=settings)
        assert breakdown.total == Decimal("370.50")

    def test_within_tolerance(self, settings, stay, selections):
        """Test a one-cent rounding gap is accepted."""
        verify_quote(Decimal("370.51"), stay, selections, settings=settings)

    def test_mismatch(self, settings, stay, selections):
        """Test a stale client total is refused."""
        with pytest.raises(PriceMismatchError) as exc_info:
            verify_quote(Decimal("350.00"), stay, selections, settings=settings)
        assert exc_info.value.details["expected_total"] == "370.50"

    def test_explicit_tolerance(self, settings, stay, selections):
        verify_quote(Decimal("370.00"), stay, selections, tolerance=Decimal("1"), settings=settings)


class TestCreateBookingRecord:
    """Tests for booking records."""

    def test_record(self, settings, stay, selections):
        """Test record amounts, status and booking code."""
        submission = build_submission("prop-1", stay, 2, selections)
        record = create_booking_record(submission, stay, selections, settings)

        assert record.property_total == Decimal("300.00")
        assert record.services_total == Decimal("90.00")
        assert record.discount_amount == Decimal("19.50")
        assert record.total_amount == Decimal("370.50")
        assert record.amount_cents == 37050
        assert record.status == BookingStatus.PENDING_PAYMENT
        assert record.payment_status == PaymentStatus.PENDING
        assert record.booking_code.startswith("TH-")
        assert decode_booking_code(record.booking_code) is not None

    def test_booking_code_bound_to_log_context(self, settings, stay, selections):
        """Test later log lines carry the new booking code."""
        clear_request_context()
        submission = build_submission("prop-1", stay, 2, selections)
        record = create_booking_record(submission, stay, selections, settings)

        assert structlog.contextvars.get_contextvars()["booking_code"] == record.booking_code
        clear_request_context()

    def test_amounts_rounded_to_cents(self, settings):
        """Test fractional cents are rounded half up."""
        stay = StayRequest(
            nightly_rate=Decimal("99.99"),
            check_in=date(2025, 6, 1),
            check_out=date(2025, 6, 2),
        )
        selections = [HourlyService(id="a", hourly_rate=Decimal("10.05"), duration=1)]
        submission = build_submission("prop-1", stay, 1, selections)
        record = create_booking_record(submission, stay, selections, settings)

        # (99.99 + 10.05) * 0.95 = 104.538
        assert record.breakdown.total == Decimal("104.538")
        assert record.total_amount == Decimal("104.54")
