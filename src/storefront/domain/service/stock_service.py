"""Domain service: Stock.

Coordinates the cross-aggregate operation of taking an order's
quantities out of product stock, or putting them back.  Runs inside the
caller's UnitOfWork so the check and the decrement see the same rows.

The two-phase approach (validate-then-mutate) ensures we never leave
stock partially decremented if one product fails validation.
"""

from __future__ import annotations

from storefront.domain.exceptions import FatalInternalError, InsufficientStockError
from storefront.domain.model.order import Order, OrderItem
from storefront.domain.model.product import Product
from storefront.domain.repository.product_repository import ProductRepository


class StockService:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def check_for_order(self, order: Order) -> list[tuple[Product, int]]:
        """Load every product of the order and validate stock.

        Raises InsufficientStockError naming the first product that cannot
        cover its item.  Nothing is mutated.
        """
        products: dict[str, Product] = {}
        required: dict[str, int] = {}
        names: dict[str, str] = {}

        for item in order.items:
            product = products.get(item.product_id) or self._load(item)
            products[item.product_id] = product
            required[item.product_id] = required.get(item.product_id, 0) + item.quantity
            names[item.product_id] = item.product_name

        for product_id, qty in required.items():
            product = products[product_id]
            if not product.has_stock_for(qty):
                raise InsufficientStockError(names[product_id], product.stock, qty)

        return [(products[pid], qty) for pid, qty in required.items()]

    def decrement_for_order(self, order: Order) -> None:
        """Deduct every item's quantity from stock.

        Phase 1: load and validate (``check_for_order``), fails before
                 any mutation.
        Phase 2: mutate and persist.
        """
        for product, qty in self.check_for_order(order):
            product.decrement_stock(qty)
            self._product_repo.save(product)

    def restore_for_order(self, order: Order) -> None:
        """Return every item's quantity to stock (cancellation)."""
        for item in order.items:
            product = self._load(item)
            product.restore_stock(item.quantity)
            self._product_repo.save(product)

    def _load(self, item: OrderItem) -> Product:
        product = self._product_repo.get_by_id(item.product_id)
        if product is None:
            raise FatalInternalError(
                f"Order item {item.id} references missing product '{item.product_id}'"
            )
        return product
