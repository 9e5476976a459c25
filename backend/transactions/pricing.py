# transactions/pricing.py
"""Discount arithmetic for transactions and their item lines."""

from decimal import Decimal
from typing import NamedTuple

CENT = Decimal("0.01")

PERCENTAGE = "PERCENTAGE"
AMOUNT = "AMOUNT"


class PriceBreakdown(NamedTuple):
    subtotal: Decimal
    discount_amount: Decimal
    total: Decimal


def _money(value) -> Decimal:
    return Decimal(value).quantize(CENT)


def calculate_discount(subtotal, discount_type=None, discount_value=None) -> PriceBreakdown:
    """
    Apply a PERCENTAGE or AMOUNT discount to `subtotal`.

    A missing type or a zero/negative value means no discount. The discount
    never exceeds the subtotal, so the total is never negative.
    """
    subtotal = _money(subtotal)
    if not discount_type or discount_value is None or Decimal(discount_value) <= 0:
        return PriceBreakdown(subtotal, Decimal("0.00"), subtotal)

    value = Decimal(discount_value)
    if discount_type == PERCENTAGE:
        discount = subtotal * value / Decimal(100)
    elif discount_type == AMOUNT:
        discount = value
    else:
        raise ValueError(f"Unknown discount type: {discount_type}")

    discount = _money(min(discount, subtotal))
    return PriceBreakdown(subtotal, discount, subtotal - discount)


def calculate_item_total(quantity, unit_price, discount_type=None, discount_value=None) -> PriceBreakdown:
    return calculate_discount(Decimal(quantity) * Decimal(unit_price), discount_type, discount_value)
