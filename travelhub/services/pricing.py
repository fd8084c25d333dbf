"""Booking price calculation.

Single shared implementation of the booking total, used both for live price
previews and for the authoritative check before a payment is captured.
Every function here is pure: no I/O, no hidden state, and invalid or
incomplete input degrades to zero-valued results instead of raising.
"""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Sequence

from travelhub.config import PricingSettings, get_settings
from travelhub.models.pricing import (
    BookingBreakdown,
    CancellationQuote,
    FixedService,
    HourlyService,
    ServiceSelection,
    StayCost,
    StayRequest,
)
from travelhub.utils.logger import get_logger

logger = get_logger(__name__)

ZERO = Decimal("0")


# =============================================================================
# Stay Cost
# =============================================================================


def _as_datetime(value: date | datetime) -> datetime:
    """Naive datetime for span arithmetic; aware values are taken in UTC."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    return datetime(value.year, value.month, value.day)


def count_nights(check_in: date | datetime | None, check_out: date | datetime | None) -> int:
    """
    Count billable nights between two dates.

    Partial days round up, so a 25 hour span is 2 nights. Missing dates or a
    check-out not after check-in give 0.
    """
    if check_in is None or check_out is None:
        return 0

    delta: timedelta = _as_datetime(check_out) - _as_datetime(check_in)
    # ceil(delta / 1 day), exact for negative spans as well
    nights = delta.days + (1 if delta.seconds or delta.microseconds else 0)
    return max(nights, 0)


def calculate_stay_cost(
    nightly_rate: Decimal,
    check_in: date | datetime | None,
    check_out: date | datetime | None,
) -> StayCost:
    """
    Compute nights and lodging subtotal for a stay.

    Args:
        nightly_rate: Property price per night
        check_in: Check-in date (None while not selected)
        check_out: Check-out date (None while not selected)

    Returns:
        StayCost, zero-valued for an incomplete or inverted date range
    """
    nights = count_nights(check_in, check_out)
    if nights == 0:
        return StayCost()
    return StayCost(nights=nights, lodging_subtotal=nightly_rate * nights)


# =============================================================================
# Rate Resolver
# =============================================================================


def resolve_line_cost(selection: ServiceSelection) -> Decimal:
    """Line cost of one selected service."""
    if isinstance(selection, HourlyService):
        return selection.hourly_rate * max(1, selection.duration or 1)
    if isinstance(selection, FixedService):
        return selection.fixed_rate or ZERO
    return ZERO


def adjust_duration(selection: ServiceSelection, delta: int) -> ServiceSelection:
    """
    Return a copy of the selection with its duration changed by delta hours.

    Decrements stop at 1 hour; increments are unbounded. Fixed-price
    selections have no duration and are returned unchanged.
    """
    if not isinstance(selection, HourlyService):
        return selection
    return selection.model_copy(update={"duration": max(1, selection.duration + delta)})


# =============================================================================
# Bundle Discount
# =============================================================================


def bundle_discount_rate(
    service_count: int,
    settings: PricingSettings | None = None,
) -> Decimal:
    """
    Discount rate for a stay bundled with service_count services.

    Flat tiers: none for 0 services, the small bundle rate below the
    threshold, the large bundle rate at or above it.
    """
    settings = settings or get_settings().pricing

    if service_count <= 0:
        return ZERO
    if service_count >= settings.large_bundle_threshold:
        return settings.large_bundle_rate
    return settings.small_bundle_rate


# =============================================================================
# Booking Total
# =============================================================================


def calculate_booking(
    stay: StayRequest,
    selections: Sequence[ServiceSelection],
    settings: PricingSettings | None = None,
) -> BookingBreakdown:
    """
    Compose stay cost, service costs and bundle discount into a breakdown.

    Args:
        stay: Nightly rate and date range
        selections: Selected service offerings
        settings: Pricing rules (defaults to configured settings)

    Returns:
        BookingBreakdown where total == lodging + services - discount exactly
    """
    stay_cost = calculate_stay_cost(stay.nightly_rate, stay.check_in, stay.check_out)
    services_subtotal = sum((resolve_line_cost(s) for s in selections), ZERO)
    discount_rate = bundle_discount_rate(len(selections), settings)

    subtotal = stay_cost.lodging_subtotal + services_subtotal
    discount_amount = subtotal * discount_rate
    total = subtotal - discount_amount

    logger.debug(
        "booking_price_calculated",
        nights=stay_cost.nights,
        services=len(selections),
        discount_rate=str(discount_rate),
        total=str(total),
    )

    return BookingBreakdown(
        nights=stay_cost.nights,
        lodging_subtotal=stay_cost.lodging_subtotal,
        services_subtotal=services_subtotal,
        discount_rate=discount_rate,
        discount_amount=discount_amount,
        total=total,
    )


# =============================================================================
# Cancellation
# =============================================================================


def calculate_cancellation(
    total_amount: Decimal,
    fee_rate: Decimal | None = None,
) -> CancellationQuote:
    """Cancellation fee and refund for a booking total."""
    if fee_rate is None:
        fee_rate = get_settings().cancellation_fee_rate

    total_amount = max(total_amount, ZERO)
    fee = total_amount * fee_rate
    return CancellationQuote(
        total_amount=total_amount,
        fee_rate=fee_rate,
        cancellation_fee=fee,
        refund_amount=total_amount - fee,
    )
