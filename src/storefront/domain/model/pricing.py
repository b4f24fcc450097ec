"""Discount arithmetic on minor currency units."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from storefront.domain.exceptions import ValidationError


def validate_discount_percent(discount_percent: int | None) -> int | None:
    if discount_percent is None:
        return None
    if isinstance(discount_percent, bool) or not isinstance(discount_percent, int):
        raise ValidationError("Discount percent must be an integer")
    if not 0 <= discount_percent <= 100:
        raise ValidationError("Discount percent must be between 0 and 100")
    return discount_percent


def discounted_price(price: int, discount_percent: int | None) -> int:
    """Return ``round(price * (1 - discount_percent / 100))``.

    No discount (None or 0) returns the price unchanged.  Rounding is half-up
    on exact decimals, so 10% off 10005 is 9005 (not banker's 9004).

    >>> discounted_price(10000, 15)
    8500
    """
    if not discount_percent:
        return price
    factor = (Decimal(100) - Decimal(discount_percent)) / Decimal(100)
    return int((Decimal(price) * factor).quantize(Decimal(1), rounding=ROUND_HALF_UP))
