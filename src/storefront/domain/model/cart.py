"""Cart aggregate.

One cart per user, created lazily.  A cart is never deleted, only
emptied: items leave it through explicit removal or because a confirmed
order bought their product.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.value_objects import MAX_ITEM_QUANTITY, Quantity


@dataclass
class CartItem:
    id: str
    product_id: str
    quantity: int


@dataclass
class Cart:
    """Aggregate root for a user's cart."""

    id: str
    user_id: str | None
    items: list[CartItem] = field(default_factory=list)

    def find_item(self, item_id: str) -> CartItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def find_by_product(self, product_id: str) -> CartItem | None:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None

    def add(self, item_id: str, product_id: str, quantity: int) -> CartItem:
        """Add *quantity* of a product, merging with an existing row.

        Merged quantities are capped at 99.  ``item_id`` is only used when
        a new row has to be created.
        """
        Quantity(quantity)
        existing = self.find_by_product(product_id)
        if existing is not None:
            existing.quantity = min(existing.quantity + quantity, MAX_ITEM_QUANTITY)
            return existing
        item = CartItem(id=item_id, product_id=product_id, quantity=quantity)
        self.items.append(item)
        return item

    def remove_item(self, item_id: str) -> CartItem:
        item = self.find_item(item_id)
        if item is None:
            raise EntityNotFoundError("Cart item not found")
        self.items.remove(item)
        return item

    def remove_products(self, product_ids: set[str]) -> list[CartItem]:
        """Drop only the rows whose product is in *product_ids*."""
        removed = [item for item in self.items if item.product_id in product_ids]
        self.items = [item for item in self.items if item.product_id not in product_ids]
        return removed
