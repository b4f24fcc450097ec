"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.exceptions import ValidationError

DEFAULT_CURRENCY = "INR"
MAX_ITEM_QUANTITY = 99


@dataclass(frozen=True)
class Money:
    """Monetary amount in minor currency units (paise, cents).

    Integers end-to-end: conversion to major units only happens when the
    amount is displayed.
    """

    amount: int
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise ValidationError(
                f"Money amount must be an integer of minor units, "
                f"got {type(self.amount).__name__}"
            )
        if self.amount < 0:
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, factor: int) -> Money:
        if isinstance(factor, bool) or not isinstance(factor, int):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        return Money(self.amount * factor, self.currency)

    def __lt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount > other.amount

    def __ge__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount >= other.amount

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        major, minor = divmod(self.amount, 100)
        return f"{self.currency} {major}.{minor:02d}"

    # --- Internal helpers -----------------------------------------------------

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def zero(currency: str = DEFAULT_CURRENCY) -> Money:
        return Money(0, currency)


@dataclass(frozen=True)
class Quantity:
    """A per-item quantity between 1 and 99."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")
        if self.value > MAX_ITEM_QUANTITY:
            raise ValidationError(f"Quantity cannot exceed {MAX_ITEM_QUANTITY}")

    def __str__(self) -> str:
        return str(self.value)


def _clean(value: str | None, field_name: str, max_length: int, required: bool = True) -> str | None:
    cleaned = value.strip() if value is not None else ""
    if not cleaned:
        if required:
            raise ValidationError(f"{field_name} is required")
        return None
    if len(cleaned) > max_length:
        raise ValidationError(f"{field_name} must be at most {max_length} characters")
    return cleaned


@dataclass(frozen=True)
class ShippingAddress:
    """Delivery address copied onto the order at checkout."""

    line1: str
    city: str
    state: str
    postal_code: str
    country: str = "IN"
    line2: str | None = None

    @staticmethod
    def create(
        line1: str,
        city: str,
        state: str,
        postal_code: str,
        country: str | None = None,
        line2: str | None = None,
    ) -> ShippingAddress:
        """Trim and validate raw address fields."""
        country_code = _clean(country, "Country", 2, required=False) or "IN"
        if len(country_code) != 2:
            raise ValidationError("Country must be a 2-letter code")
        return ShippingAddress(
            line1=_clean(line1, "Address line 1", 200),
            line2=_clean(line2, "Address line 2", 200, required=False),
            city=_clean(city, "City", 100),
            state=_clean(state, "State", 100),
            postal_code=_clean(postal_code, "Postal code", 20),
            country=country_code.upper(),
        )

    def __str__(self) -> str:
        lines = [self.line1]
        if self.line2:
            lines.append(self.line2)
        lines.append(f"{self.city}, {self.state} {self.postal_code}, {self.country}")
        return "\n".join(lines)
