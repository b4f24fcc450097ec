"""Application service: Merge Cart use case.

Folds externally supplied (product, quantity) pairs, typically a guest
cart kept on the client, into the caller's persisted cart.

- Existing rows are never deleted or overwritten; quantities add up,
  capped at 99.
- Bad entries (quantity out of range, unknown, inactive or sold-out
  product) are skipped so one bad item does not block the rest.
- The cart is re-read inside the transaction so concurrent merges do not
  lose each other's updates.
"""

from __future__ import annotations

import logging

from storefront.application.cart_access import get_or_create_cart, new_id
from storefront.application.dto import CartItemSpec, MergeResultDTO
from storefront.application.mapping import cart_to_dto
from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import MAX_ITEM_QUANTITY
from storefront.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

MAX_MERGE_ITEMS = 100


class MergeCartHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, user_id: str, items: list[CartItemSpec]) -> MergeResultDTO:
        if len(items) > MAX_MERGE_ITEMS:
            raise ValidationError(f"Cannot merge more than {MAX_MERGE_ITEMS} items")

        skipped: list[str] = []
        with self._uow:
            cart = get_or_create_cart(self._uow, user_id)

            for spec in items:
                product_id = (spec.product_id or "").strip()
                if not product_id or not self._valid_quantity(spec.quantity):
                    skipped.append(product_id or "<blank>")
                    continue

                product = self._uow.products.get_by_id(product_id)
                if product is None or not product.is_available:
                    skipped.append(product_id)
                    continue

                cart.add(new_id(), product_id, spec.quantity)

            self._uow.carts.save(cart)
            dto = cart_to_dto(cart, self._uow.products)
            self._uow.commit()

        if skipped:
            logger.info("Cart merge for user %s skipped %s", user_id, ", ".join(skipped))
        return MergeResultDTO(cart=dto, skipped=skipped)

    @staticmethod
    def _valid_quantity(quantity: int) -> bool:
        return (
            isinstance(quantity, int)
            and not isinstance(quantity, bool)
            and 1 <= quantity <= MAX_ITEM_QUANTITY
        )
