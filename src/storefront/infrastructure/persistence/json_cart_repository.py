"""JSON-backed implementation of CartRepository."""

from __future__ import annotations

from storefront.domain.model.cart import Cart, CartItem
from storefront.domain.repository.cart_repository import CartRepository


class JsonCartRepository(CartRepository):

    def __init__(self, records: list[dict]) -> None:
        self._records = records

    def get_by_user_id(self, user_id: str) -> Cart | None:
        for raw in self._records:
            if raw["user_id"] == user_id:
                return self._to_domain(raw)
        return None

    def save(self, cart: Cart) -> None:
        for i, raw in enumerate(self._records):
            if raw["id"] == cart.id:
                self._records[i] = self._to_raw(cart)
                return
        if cart.user_id is not None and self.get_by_user_id(cart.user_id) is not None:
            raise ValueError(f"User {cart.user_id} already has a cart")
        self._records.append(self._to_raw(cart))

    @staticmethod
    def _to_raw(cart: Cart) -> dict:
        return {
            "id": cart.id,
            "user_id": cart.user_id,
            "items": [
                {"id": item.id, "product_id": item.product_id, "quantity": item.quantity}
                for item in cart.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Cart:
        return Cart(
            id=raw["id"],
            user_id=raw.get("user_id"),
            items=[
                CartItem(id=i["id"], product_id=i["product_id"], quantity=i["quantity"])
                for i in raw.get("items", [])
            ],
        )
