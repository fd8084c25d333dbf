"""Parsers for property and service offering payloads.

Read endpoints return prices as decimal strings (``pricePerNight``,
``hourlyRate``, ``fixedRate``). These helpers turn them into the typed
models the price calculator expects, coercing anything unparseable to 0.
"""

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from travelhub.models.pricing import (
    FixedService,
    HourlyService,
    ServiceSelection,
    StayRequest,
)
from travelhub.utils.logger import get_logger

logger = get_logger(__name__)

ZERO = Decimal("0")
THOUSANDS_GROUP = re.compile(r"^-?\d{1,3},\d{3}$")


# =============================================================================
# Amounts & Dates
# =============================================================================


def parse_amount(value: str | int | float | Decimal | None) -> Decimal:
    """
    Parse a price value to Decimal.

    Args:
        value: Price as string ("120.50", "$1,234.56", "1.234,56"), number or None

    Returns:
        Non-negative Decimal; empty, invalid, NaN and negative input give 0
    """
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    else:
        price_str = re.sub(r"[€$₺£¥₹\s]", "", value)
        if not price_str:
            return ZERO

        # Handle European format (1.234,56 -> 1234.56)
        if "," in price_str and "." in price_str:
            if price_str.index(",") > price_str.index("."):
                price_str = price_str.replace(".", "").replace(",", ".")
            else:
                price_str = price_str.replace(",", "")
        elif "," in price_str:
            # 1,234 and 1,234,567 are thousands; 12,50 is a decimal comma
            if price_str.count(",") > 1 or THOUSANDS_GROUP.search(price_str):
                price_str = price_str.replace(",", "")
            else:
                price_str = price_str.replace(",", ".")

        try:
            amount = Decimal(price_str)
        except InvalidOperation:
            logger.warning("price_parse_failed", price_str=value)
            return ZERO

    if not amount.is_finite():
        return ZERO
    if amount < 0:
        logger.warning("negative_price_coerced", price=str(amount))
        return ZERO
    return amount


def parse_date(value: str | date | None) -> date | None:
    """Parse an ISO date (or datetime) string; invalid or empty gives None."""
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value

    try:
        return date.fromisoformat(value)
    except ValueError:
        pass

    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError:
        logger.warning("date_parse_failed", value=value)
        return None


def _get(data: Mapping[str, Any], *keys: str) -> Any:
    """First non-empty value among camelCase / snake_case aliases."""
    for key in keys:
        value = data.get(key)
        if value not in (None, ""):
            return value
    return None


# =============================================================================
# Offerings
# =============================================================================


def parse_service_selection(
    offering: Mapping[str, Any],
    duration: int | None = None,
) -> ServiceSelection:
    """
    Build a ServiceSelection from a service provider / offering payload.

    An offering with an hourly rate is billed per hour, otherwise at its
    fixed rate.

    Args:
        offering: Provider payload (``id``, ``hourlyRate`` or ``fixedRate``, ...)
        duration: Selected hours, for hourly offerings (defaults to 1)

    Returns:
        HourlyService or FixedService
    """
    selection_id = str(_get(offering, "id", "serviceProviderId", "service_provider_id") or "")
    name = _get(offering, "businessName", "business_name", "serviceName", "service_name", "name")
    provider_id = _get(offering, "serviceProviderId", "service_provider_id", "id")
    hourly_rate = _get(offering, "hourlyRate", "hourly_rate")

    if hourly_rate is not None:
        return HourlyService(
            id=selection_id,
            hourly_rate=parse_amount(hourly_rate),
            duration=max(1, int(duration or _get(offering, "duration") or 1)),
            name=name,
            provider_id=str(provider_id) if provider_id is not None else None,
        )

    return FixedService(
        id=selection_id,
        fixed_rate=parse_amount(_get(offering, "fixedRate", "fixed_rate")),
        name=name,
        provider_id=str(provider_id) if provider_id is not None else None,
    )


def parse_stay_request(
    property_: Mapping[str, Any] | None,
    check_in: str | date | None,
    check_out: str | date | None,
) -> StayRequest:
    """Build a StayRequest from a property payload and selected dates."""
    nightly_rate = ZERO
    if property_:
        nightly_rate = parse_amount(_get(property_, "pricePerNight", "price_per_night"))

    return StayRequest(
        nightly_rate=nightly_rate,
        check_in=parse_date(check_in),
        check_out=parse_date(check_out),
    )
