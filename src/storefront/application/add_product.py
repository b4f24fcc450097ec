"""Application service: Add Product use case (admin)."""

from __future__ import annotations

from storefront.domain.exceptions import ConflictError, ValidationError
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.unit_of_work import UnitOfWork


class AddProductHandler:

    def __init__(self, uow: UnitOfWork, currency: str) -> None:
        self._uow = uow
        self._currency = currency

    def handle(
        self,
        name: str,
        price: int,
        stock: int = 0,
        discount_percent: int | None = None,
        is_active: bool = True,
    ) -> Product:
        """Add a new product to the catalog.

        *price* is in minor currency units.
        """
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        if len(name.strip()) > 200:
            raise ValidationError("Product name must be at most 200 characters")

        with self._uow:
            existing = self._uow.products.get_by_name(name.strip())
            if existing is not None:
                raise ConflictError(f"Product '{name.strip()}' already exists")

            # Auto-assign ID based on existing products
            all_products = self._uow.products.list_all()
            if all_products:
                next_id = str(max(int(p.id) for p in all_products) + 1)
            else:
                next_id = "1"

            product = Product(id=next_id, name=name.strip(), price=Money.zero(self._currency))
            product.update_price(Money(price, self._currency))
            product.set_stock(stock)
            product.update_discount(discount_percent)
            if not is_active:
                product.deactivate()

            self._uow.products.save(product)
            self._uow.commit()
        return product
