"""Promotional code validation and discount calculation."""

from datetime import datetime, timezone
from decimal import Decimal

from travelhub.models.booking import (
    DiscountType,
    PromoCode,
    PromoScope,
    PromoValidation,
)
from travelhub.models.pricing import BookingBreakdown
from travelhub.utils.logger import get_logger

logger = get_logger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def _as_utc(value: datetime) -> datetime:
    # Naive promo timestamps are stored in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def validate_promo_code(
    promo: PromoCode | None,
    user_has_used: bool = False,
    now: datetime | None = None,
) -> PromoValidation:
    """
    Check whether a promo code can be used.

    Args:
        promo: Code looked up by the caller (None if not found)
        user_has_used: Whether this user already redeemed the code
        now: Current time (defaults to now; naive values are taken as UTC)

    Returns:
        PromoValidation with a user-facing message
    """
    if promo is None:
        return PromoValidation(valid=False, message="Invalid promo code")

    if not promo.is_active:
        return PromoValidation(valid=False, message="This promo code is no longer active")

    now = _as_utc(now or datetime.now(timezone.utc))
    if now < _as_utc(promo.valid_from) or now > _as_utc(promo.valid_until):
        return PromoValidation(valid=False, message="This promo code has expired")

    if promo.max_uses and promo.used_count >= promo.max_uses:
        return PromoValidation(
            valid=False,
            message="This promo code has reached its usage limit",
        )

    if user_has_used:
        return PromoValidation(valid=False, message="You have already used this promo code")

    logger.info("promo_code_validated", code=promo.code)
    return PromoValidation(
        valid=True,
        discount=promo.discount_value,
        message="Promo code applied successfully",
    )


def promo_base_amount(promo: PromoCode, breakdown: BookingBreakdown) -> Decimal:
    """Part of a booking a promo code applies to."""
    if promo.applicable_to == PromoScope.PROPERTIES:
        return breakdown.lodging_subtotal
    if promo.applicable_to == PromoScope.SERVICES:
        return breakdown.services_subtotal
    return breakdown.subtotal


def apply_promo_code(promo: PromoCode, breakdown: BookingBreakdown) -> Decimal:
    """
    Discount a promo code gives on a booking.

    Returns 0 below the minimum purchase; fixed amounts never exceed the
    amount they apply to.
    """
    base = promo_base_amount(promo, breakdown)
    if base <= ZERO or base < promo.minimum_purchase:
        return ZERO

    if promo.discount_type == DiscountType.PERCENTAGE:
        return base * promo.discount_value / HUNDRED
    return min(promo.discount_value, base)
