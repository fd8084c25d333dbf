"""Pricing API routes."""

from decimal import Decimal
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from travelhub.config import PricingSettings, get_settings
from travelhub.models.booking import (
    BookingQuote,
    BookingSubmission,
    ServiceOrderItem,
    ServiceOrderQuote,
)
from travelhub.models.pricing import (
    BookingBreakdown,
    CancellationQuote,
    ServiceSelection,
    StayRequest,
)
from travelhub.parsers.offering_parser import parse_amount, parse_service_selection
from travelhub.services.booking_service import (
    BookingValidationError,
    PriceMismatchError,
    create_booking_record,
    validate_booking,
    verify_quote,
)
from travelhub.services.currency_service import SUPPORTED_CURRENCIES
from travelhub.services.pricing import calculate_booking, calculate_cancellation
from travelhub.services.service_order import quote_service_order
from travelhub.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Pricing"])


def get_pricing_settings() -> PricingSettings:
    """Pricing rules dependency (overridable in tests)."""
    return get_settings().pricing


def _parse_max_guests(value: Any) -> int | None:
    """Property capacity from the stored record; unreadable values are a 422."""
    if value is None or value == "":
        return None
    try:
        return int(value) if isinstance(value, (int, float)) else int(str(value).strip())
    except (TypeError, ValueError):
        logger.warning("invalid_max_guests", max_guests=repr(value))
        raise HTTPException(
            422,
            detail={"message": "Property capacity is not a valid number.", "max_guests": str(value)},
        ) from None


# =============================================================================
# Request/Response Models
# =============================================================================


class QuoteRequest(BaseModel):
    """Stay and selected services to price."""
    stay: StayRequest
    services: list[ServiceSelection] = []


class QuoteResponse(BaseModel):
    """Breakdown plus display-ready strings."""
    breakdown: BookingBreakdown
    display: dict[str, Any]


class VerifyRequest(BaseModel):
    """Client submission with the server's own property and provider records."""
    submission: BookingSubmission
    submitted_total: Decimal
    property: dict[str, Any]
    providers: dict[str, dict[str, Any]] = {}


class ServiceOrderRequest(BaseModel):
    items: list[ServiceOrderItem] = Field(min_length=1)


class CancellationRequest(BaseModel):
    total_amount: Decimal = Field(ge=0)


class CurrencyItem(BaseModel):
    code: str
    name: str
    symbol: str


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/pricing/quote", response_model=QuoteResponse)
async def quote_booking(
    request: QuoteRequest,
    settings: PricingSettings = Depends(get_pricing_settings),
):
    """
    Live price preview for a stay with bundled services.

    Never fails on incomplete input: missing or inverted dates price the
    stay at zero.
    """
    breakdown = calculate_booking(request.stay, request.services, settings)
    return QuoteResponse(breakdown=breakdown, display=breakdown.to_display())


@router.post("/pricing/verify", response_model=BookingQuote)
async def verify_booking(
    request: VerifyRequest,
    settings: PricingSettings = Depends(get_pricing_settings),
):
    """
    Recompute a submitted booking from server-side rates.

    Service lines whose provider is unknown are not charged. Returns 422 for
    an invalid booking and 409 when the client total is out of date.
    """
    submission = request.submission
    stay = StayRequest(
        nightly_rate=parse_amount(request.property.get("pricePerNight")),
        check_in=submission.check_in,
        check_out=submission.check_out,
    )

    selections = []
    for line in submission.services:
        provider = request.providers.get(line.service_provider_id)
        if provider is None:
            logger.warning("unknown_service_provider", provider_id=line.service_provider_id)
            continue
        selections.append(
            parse_service_selection(
                {**provider, "id": line.service_provider_id, "serviceName": line.service_name},
                duration=line.duration,
            )
        )

    max_guests = _parse_max_guests(request.property.get("maxGuests"))
    try:
        validate_booking(
            submission.property_id,
            stay,
            submission.guests,
            selections,
            max_guests=max_guests,
        )
        verify_quote(request.submitted_total, stay, selections, settings=settings)
    except BookingValidationError as e:
        raise HTTPException(422, detail={"message": e.message, **e.details})
    except PriceMismatchError as e:
        raise HTTPException(409, detail={"message": e.message, **e.details})

    return create_booking_record(submission, stay, selections, settings)


@router.post("/pricing/service-orders/quote", response_model=ServiceOrderQuote)
async def quote_order(request: ServiceOrderRequest):
    """Subtotal, tax and total for a service order."""
    return quote_service_order(request.items)


@router.post("/pricing/cancellation", response_model=CancellationQuote)
async def quote_cancellation(request: CancellationRequest):
    """Cancellation fee and refund for a booking total."""
    return calculate_cancellation(request.total_amount)


@router.get("/currencies", response_model=list[CurrencyItem])
async def list_currencies():
    """Supported display currencies."""
    return [CurrencyItem(code=c.code, name=c.name, symbol=c.symbol) for c in SUPPORTED_CURRENCIES]
