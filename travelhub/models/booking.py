"""Pydantic models for booking submission, service orders and promo codes."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from travelhub.models.pricing import BookingBreakdown


class CamelModel(BaseModel):
    """Model serialised with camelCase keys, as the booking API expects."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Enums
# =============================================================================


class BookingStatus(str, Enum):
    """Booking lifecycle status."""

    PENDING_PAYMENT = "pending_payment"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class PaymentStatus(str, Enum):
    """Payment status."""

    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"
    FAILED = "failed"


# =============================================================================
# Booking Submission
# =============================================================================


class BookingServiceLine(CamelModel):
    """One service line of a booking submission."""

    service_provider_id: str
    service_name: str | None = None
    service_date: date
    duration: int | None = None  # None for fixed-price services
    rate: Decimal
    total: Decimal
    status: Literal["pending", "confirmed", "cancelled"] = "pending"


class BookingSubmission(CamelModel):
    """Payload for the booking creation endpoint."""

    property_id: str
    check_in: date
    check_out: date
    guests: int = Field(ge=1)
    services: list[BookingServiceLine] = Field(default_factory=list)


class BookingQuote(CamelModel):
    """Authoritative booking amounts, ready to persist and charge."""

    booking_code: str
    property_id: str
    check_in: date
    check_out: date
    guests: int
    nights: int
    property_total: Decimal
    services_total: Decimal
    discount_amount: Decimal
    total_amount: Decimal
    status: BookingStatus = BookingStatus.PENDING_PAYMENT
    payment_status: PaymentStatus = PaymentStatus.PENDING
    breakdown: BookingBreakdown

    @property
    def amount_cents(self) -> int:
        """Total in cents, as payment processors expect."""
        return int(self.total_amount * 100)


# =============================================================================
# Service Orders
# =============================================================================


class ServiceOrderItem(CamelModel):
    """Menu item or task in a standalone service order."""

    item_type: Literal["menu_item", "task"]
    item_name: str
    unit_price: Decimal = Field(ge=0)
    quantity: int = Field(default=1, ge=1)

    @property
    def total_price(self) -> Decimal:
        return self.unit_price * self.quantity


class ServiceOrderQuote(CamelModel):
    """Subtotal, tax and total of a service order."""

    model_config = ConfigDict(frozen=True)

    items: list[ServiceOrderItem]
    subtotal: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    total_amount: Decimal


# =============================================================================
# Promotional Codes
# =============================================================================


class DiscountType(str, Enum):
    """Promo code discount kind."""

    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed_amount"


class PromoScope(str, Enum):
    """What part of a booking a promo code discounts."""

    ALL = "all"
    PROPERTIES = "properties"
    SERVICES = "services"


class PromoCode(CamelModel):
    """Promotional code definition."""

    code: str
    description: str | None = None
    discount_type: DiscountType
    discount_value: Decimal = Field(ge=0)
    minimum_purchase: Decimal = Decimal("0")
    max_uses: int | None = None
    used_count: int = 0
    valid_from: datetime
    valid_until: datetime
    applicable_to: PromoScope = PromoScope.ALL
    is_active: bool = True


class PromoValidation(CamelModel):
    """Result of validating a promo code for a user."""

    valid: bool
    discount: Decimal | None = None
    message: str
