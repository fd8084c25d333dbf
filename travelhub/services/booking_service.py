"""Booking submission and server-side price authority.

The client builds a submission for the booking endpoint; the server
recomputes the breakdown from its own rates and refuses totals that drift
from it before any payment is captured.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Sequence

from travelhub.config import PricingSettings, get_settings
from travelhub.models.booking import (
    BookingQuote,
    BookingServiceLine,
    BookingSubmission,
)
from travelhub.models.pricing import (
    BookingBreakdown,
    HourlyService,
    ServiceSelection,
    StayRequest,
    to_cents,
)
from travelhub.services.pricing import calculate_booking, count_nights, resolve_line_cost
from travelhub.utils.booking_code import generate_booking_code
from travelhub.utils.logger import bind_request_context, get_logger

logger = get_logger(__name__)


# =============================================================================
# Exceptions
# =============================================================================


class PricingError(Exception):
    """Base exception for booking pricing errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class BookingValidationError(PricingError):
    """Booking cannot be submitted as entered."""

    pass


class DuplicateSelectionError(BookingValidationError):
    """Same service selected more than once."""

    pass


class PriceMismatchError(PricingError):
    """Client-submitted total differs from the authoritative total."""

    pass


# =============================================================================
# Validation
# =============================================================================


def ensure_unique_selections(selections: Sequence[ServiceSelection]) -> None:
    """Raise DuplicateSelectionError if two selections share an id."""
    seen: set[str] = set()
    duplicates: list[str] = []
    for selection in selections:
        if selection.id in seen:
            duplicates.append(selection.id)
        seen.add(selection.id)

    if duplicates:
        raise DuplicateSelectionError(
            "Each service can only be selected once",
            details={"duplicate_ids": duplicates},
        )


def validate_booking(
    property_id: str | None,
    stay: StayRequest,
    guests: int,
    selections: Sequence[ServiceSelection],
    max_guests: int | None = None,
) -> None:
    """
    Submit-time validation of a booking.

    Raises:
        BookingValidationError: Missing property or dates, inverted dates,
            bad guest count or duplicate services
    """
    if not property_id or stay.check_in is None or stay.check_out is None:
        raise BookingValidationError(
            "Please select a property and dates.",
            details={"property_id": property_id},
        )

    if count_nights(stay.check_in, stay.check_out) == 0:
        raise BookingValidationError(
            "Check-out date must be after check-in date.",
            details={
                "check_in": stay.check_in.isoformat(),
                "check_out": stay.check_out.isoformat(),
            },
        )

    if guests < 1:
        raise BookingValidationError(
            "At least one guest is required.",
            details={"guests": guests},
        )

    if max_guests is not None and guests > max_guests:
        raise BookingValidationError(
            f"This property accommodates at most {max_guests} guests.",
            details={"guests": guests, "max_guests": max_guests},
        )

    ensure_unique_selections(selections)


# =============================================================================
# Submission
# =============================================================================


def _as_date(value: date) -> date:
    # datetime is a date subclass; the booking API takes plain dates
    return date(value.year, value.month, value.day)


def build_submission(
    property_id: str,
    stay: StayRequest,
    guests: int,
    selections: Sequence[ServiceSelection],
    service_date: date | None = None,
    max_guests: int | None = None,
) -> BookingSubmission:
    """
    Build the booking endpoint payload.

    Args:
        property_id: Booked property
        stay: Nightly rate and dates
        guests: Number of guests
        selections: Selected services
        service_date: Date services are delivered (defaults to check-in)
        max_guests: Property capacity, if known

    Returns:
        BookingSubmission (dump with ``by_alias=True`` for camelCase keys)

    Raises:
        BookingValidationError: If the booking is incomplete or invalid
    """
    validate_booking(property_id, stay, guests, selections, max_guests=max_guests)

    check_in = _as_date(stay.check_in)
    lines = []
    for selection in selections:
        hourly = isinstance(selection, HourlyService)
        lines.append(
            BookingServiceLine(
                service_provider_id=selection.provider_id or selection.id,
                service_name=selection.name,
                service_date=service_date or check_in,
                duration=selection.duration if hourly else None,
                rate=selection.hourly_rate if hourly else selection.fixed_rate,
                total=resolve_line_cost(selection),
            )
        )

    return BookingSubmission(
        property_id=property_id,
        check_in=check_in,
        check_out=_as_date(stay.check_out),
        guests=guests,
        services=lines,
    )


# =============================================================================
# Authority
# =============================================================================


def verify_quote(
    submitted_total: Decimal,
    stay: StayRequest,
    selections: Sequence[ServiceSelection],
    tolerance: Decimal | None = None,
    settings: PricingSettings | None = None,
) -> BookingBreakdown:
    """
    Recompute a booking total and compare it with what the client showed.

    Args:
        submitted_total: Total computed client-side
        stay: Stay built from server-side property rates
        selections: Selections built from server-side provider rates
        tolerance: Allowed absolute difference (defaults to settings)

    Returns:
        Authoritative BookingBreakdown

    Raises:
        PriceMismatchError: If the totals differ by more than the tolerance
    """
    settings = settings or get_settings().pricing
    if tolerance is None:
        tolerance = settings.quote_tolerance

    breakdown = calculate_booking(stay, selections, settings)
    difference = abs(breakdown.total - submitted_total)

    if difference > tolerance:
        logger.warning(
            "booking_price_mismatch",
            submitted=str(submitted_total),
            expected=str(breakdown.total),
            difference=str(difference),
        )
        raise PriceMismatchError(
            "Submitted total does not match the current price",
            details={
                "submitted_total": str(submitted_total),
                "expected_total": str(to_cents(breakdown.total)),
            },
        )

    return breakdown


def create_booking_record(
    submission: BookingSubmission,
    stay: StayRequest,
    selections: Sequence[ServiceSelection],
    settings: PricingSettings | None = None,
) -> BookingQuote:
    """
    Price a submission from authoritative rates and assign a booking code.

    Client-submitted line totals are ignored; amounts come from stay and
    selections, which the caller loads from its own records.
    """
    breakdown = calculate_booking(stay, selections, settings)

    quote = BookingQuote(
        booking_code=generate_booking_code(),
        property_id=submission.property_id,
        check_in=submission.check_in,
        check_out=submission.check_out,
        guests=submission.guests,
        nights=breakdown.nights,
        property_total=to_cents(breakdown.lodging_subtotal),
        services_total=to_cents(breakdown.services_subtotal),
        discount_amount=to_cents(breakdown.discount_amount),
        total_amount=to_cents(breakdown.total),
        breakdown=breakdown,
    )

    bind_request_context(booking_code=quote.booking_code)
    logger.info(
        "booking_record_created",
        property_id=quote.property_id,
        nights=quote.nights,
        total=str(quote.total_amount),
    )
    return quote
