"""Pricing and booking models."""

from .pricing import (
    BookingBreakdown,
    CancellationQuote,
    FixedService,
    HourlyService,
    ServiceSelection,
    StayCost,
    StayRequest,
)

__all__ = [
    "BookingBreakdown",
    "CancellationQuote",
    "FixedService",
    "HourlyService",
    "ServiceSelection",
    "StayCost",
    "StayRequest",
]
