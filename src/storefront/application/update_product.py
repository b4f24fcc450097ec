"""Application service: Update Product use case (admin)."""

from __future__ import annotations

from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.unit_of_work import UnitOfWork


class UpdateProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        product_id: str,
        price: int | None = None,
        discount_percent: int | None = None,
        clear_discount: bool = False,
        stock: int | None = None,
        is_active: bool | None = None,
    ) -> Product:
        """Update a product's price, discount, stock or visibility.

        This does NOT affect any existing orders; they captured a
        price snapshot at creation time.
        """
        if all(v is None for v in (price, discount_percent, stock, is_active)) and not clear_discount:
            raise ValidationError("Nothing to update")

        with self._uow:
            product = self._uow.products.get_by_id(product_id)
            if product is None:
                raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

            if price is not None:
                product.update_price(Money(price, product.price.currency))
            if clear_discount:
                product.update_discount(None)
            elif discount_percent is not None:
                product.update_discount(discount_percent)
            if stock is not None:
                product.set_stock(stock)
            if is_active is True:
                product.activate()
            elif is_active is False:
                product.deactivate()

            self._uow.products.save(product)
            self._uow.commit()
        return product
