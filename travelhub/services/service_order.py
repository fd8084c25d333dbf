"""Pricing for standalone service orders (menu items, provider tasks)."""

from decimal import Decimal
from typing import Sequence

from travelhub.config import get_settings
from travelhub.models.booking import ServiceOrderItem, ServiceOrderQuote


def quote_service_order(
    items: Sequence[ServiceOrderItem],
    tax_rate: Decimal | None = None,
) -> ServiceOrderQuote:
    """
    Compute subtotal, tax and total for a service order.

    Args:
        items: Ordered menu items / tasks
        tax_rate: Tax applied to the subtotal (defaults to settings)

    Returns:
        ServiceOrderQuote
    """
    if tax_rate is None:
        tax_rate = get_settings().service_order_tax_rate

    subtotal = sum((item.total_price for item in items), Decimal("0"))
    tax_amount = subtotal * tax_rate

    return ServiceOrderQuote(
        items=list(items),
        subtotal=subtotal,
        tax_rate=tax_rate,
        tax_amount=tax_amount,
        total_amount=subtotal + tax_amount,
    )
