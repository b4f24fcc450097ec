"""Product aggregate.

Products live independently of orders. They have their own lifecycle:
prices change, discounts come and go, stock moves, products are
deactivated.  None of this affects existing orders because order items
carry a snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.exceptions import InsufficientStockError, ValidationError
from storefront.domain.model.pricing import discounted_price, validate_discount_percent
from storefront.domain.model.value_objects import Money


@dataclass
class Product:
    """A product in the catalog.

    Invariants:
    - ``stock`` is never negative
    - ``price`` is the authoritative server value, never taken from a client
    """

    id: str
    name: str
    price: Money
    stock: int = 0
    discount_percent: int | None = None
    is_active: bool = True

    @property
    def unit_price(self) -> Money:
        """Current price after discount."""
        return Money(
            discounted_price(self.price.amount, self.discount_percent),
            self.price.currency,
        )

    @property
    def is_available(self) -> bool:
        return self.is_active and self.stock > 0

    def update_price(self, new_price: Money) -> None:
        """Change the product price.

        This does NOT affect any existing orders because orders
        capture a price snapshot at creation time.
        """
        if new_price.amount <= 0:
            raise ValidationError("Product price must be greater than zero")
        self.price = new_price

    def update_discount(self, discount_percent: int | None) -> None:
        self.discount_percent = validate_discount_percent(discount_percent)

    def set_stock(self, stock: int) -> None:
        if isinstance(stock, bool) or not isinstance(stock, int) or stock < 0:
            raise ValidationError("Stock must be a non-negative integer")
        self.stock = stock

    def has_stock_for(self, quantity: int) -> bool:
        return self.stock >= quantity

    def decrement_stock(self, quantity: int) -> None:
        """Deduct sold units.

        Raises InsufficientStockError rather than ever going below zero.
        """
        if quantity <= 0:
            raise ValidationError("Stock decrement must be positive")
        if not self.has_stock_for(quantity):
            raise InsufficientStockError(self.name, self.stock, quantity)
        self.stock -= quantity

    def restore_stock(self, quantity: int) -> None:
        """Put units back (e.g. on cancellation of a confirmed order)."""
        if quantity <= 0:
            raise ValidationError("Stock restore must be positive")
        self.stock += quantity

    def activate(self) -> None:
        self.is_active = True

    def deactivate(self) -> None:
        self.is_active = False
