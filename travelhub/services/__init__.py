"""Pricing services."""

from .pricing import (
    adjust_duration,
    bundle_discount_rate,
    calculate_booking,
    calculate_cancellation,
    calculate_stay_cost,
    resolve_line_cost,
)

__all__ = [
    "adjust_duration",
    "bundle_discount_rate",
    "calculate_booking",
    "calculate_cancellation",
    "calculate_stay_cost",
    "resolve_line_cost",
]
