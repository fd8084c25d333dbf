"""Pydantic models for booking price calculation."""

from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

CENT = Decimal("0.01")


def to_cents(amount: Decimal) -> Decimal:
    """Round a money amount to two decimals (half up)."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


class StayRequest(BaseModel):
    """Property stay portion of a booking."""

    nightly_rate: Decimal = Field(default=Decimal("0"), ge=0)
    check_in: date | datetime | None = None
    check_out: date | datetime | None = None


# =============================================================================
# Service Selections
# =============================================================================


class HourlyService(BaseModel):
    """Service offering billed per hour."""

    pricing_mode: Literal["hourly"] = "hourly"
    id: str
    hourly_rate: Decimal = Field(ge=0)
    duration: int = Field(default=1, ge=1)  # hours
    name: str | None = None
    provider_id: str | None = None


class FixedService(BaseModel):
    """Service offering billed at a flat price."""

    pricing_mode: Literal["fixed"] = "fixed"
    id: str
    fixed_rate: Decimal = Field(default=Decimal("0"), ge=0)
    name: str | None = None
    provider_id: str | None = None


ServiceSelection = Annotated[
    Union[HourlyService, FixedService],
    Field(discriminator="pricing_mode"),
]


# =============================================================================
# Results
# =============================================================================


class StayCost(BaseModel):
    """Nights and lodging subtotal for a stay."""

    model_config = ConfigDict(frozen=True)

    nights: int = 0
    lodging_subtotal: Decimal = Decimal("0")


class BookingBreakdown(BaseModel):
    """Computed price breakdown of a booking (not persisted)."""

    model_config = ConfigDict(frozen=True)

    nights: int = 0
    lodging_subtotal: Decimal = Decimal("0")
    services_subtotal: Decimal = Decimal("0")
    discount_rate: Decimal = Decimal("0")
    discount_amount: Decimal = Decimal("0")
    total: Decimal = Decimal("0")

    @property
    def subtotal(self) -> Decimal:
        """Lodging plus services, before discount."""
        return self.lodging_subtotal + self.services_subtotal

    def to_display(self) -> dict[str, str | int]:
        """Render amounts with two decimals for price previews."""
        return {
            "nights": self.nights,
            "lodging_subtotal": str(to_cents(self.lodging_subtotal)),
            "services_subtotal": str(to_cents(self.services_subtotal)),
            "discount_percent": f"{self.discount_rate * 100:.0f}%",
            "discount_amount": str(to_cents(self.discount_amount)),
            "total": str(to_cents(self.total)),
        }


class CancellationQuote(BaseModel):
    """Fee and refund for cancelling a booking."""

    model_config = ConfigDict(frozen=True)

    total_amount: Decimal
    fee_rate: Decimal
    cancellation_fee: Decimal
    refund_amount: Decimal
