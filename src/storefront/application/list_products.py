"""Application service: List Products use case (query)."""

from __future__ import annotations

from storefront.domain.model.product import Product
from storefront.domain.repository.unit_of_work import UnitOfWork


class ListProductsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, include_inactive: bool = False) -> list[Product]:
        with self._uow:
            products = self._uow.products.list_all()
        if not include_inactive:
            products = [p for p in products if p.is_active]
        return sorted(products, key=lambda p: int(p.id) if p.id.isdigit() else p.id)
