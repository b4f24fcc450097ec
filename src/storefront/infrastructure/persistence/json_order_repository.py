"""JSON-backed implementation of OrderRepository."""

from __future__ import annotations

from datetime import datetime

from storefront.domain.model.order import Order, OrderItem, OrderStatus
from storefront.domain.model.value_objects import Money, ShippingAddress
from storefront.domain.repository.order_repository import OrderRepository


class JsonOrderRepository(OrderRepository):

    def __init__(self, records: list[dict]) -> None:
        self._records = records

    # --- OrderRepository interface --------------------------------------------

    def next_id(self) -> int:
        if not self._records:
            return 1
        return max(o["id"] for o in self._records) + 1

    def get_by_id(self, order_id: int) -> Order | None:
        for raw in self._records:
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def get_for_user(self, order_id: int, user_id: str) -> Order | None:
        for raw in self._records:
            if raw["id"] == order_id and raw["user_id"] == user_id:
                return self._to_domain(raw)
        return None

    def list_for_user(self, user_id: str) -> list[Order]:
        return self._newest_first(r for r in self._records if r["user_id"] == user_id)

    def list_all(self, status: OrderStatus | None = None) -> list[Order]:
        return self._newest_first(
            r for r in self._records if status is None or r["status"] == status.value
        )

    def save(self, order: Order) -> None:
        if order.id is None:
            order.id = self.next_id()

        # Upsert: replace if exists, otherwise append
        for i, raw in enumerate(self._records):
            if raw["id"] == order.id:
                self._records[i] = self._to_raw(order)
                return
        self._records.append(self._to_raw(order))

    # --- Serialization --------------------------------------------------------

    def _newest_first(self, records) -> list[Order]:
        return sorted((self._to_domain(r) for r in records), key=lambda o: o.id, reverse=True)

    @staticmethod
    def _to_raw(order: Order) -> dict:
        address = order.shipping_address
        return {
            "id": order.id,
            "user_id": order.user_id,
            "status": order.status.value,
            "total_amount": order.total_amount.amount,
            "currency": order.total_amount.currency,
            "address": {
                "line1": address.line1,
                "line2": address.line2,
                "city": address.city,
                "state": address.state,
                "postal_code": address.postal_code,
                "country": address.country,
            },
            "gateway_order_ref": order.gateway_order_ref,
            "gateway_payment_ref": order.gateway_payment_ref,
            "gateway_signature": order.gateway_signature,
            "paid_at": order.paid_at.isoformat() if order.paid_at else None,
            "created_at": order.created_at.isoformat(),
            "updated_at": order.updated_at.isoformat(),
            "items": [
                {
                    "id": item.id,
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "quantity": item.quantity,
                    "unit_price": item.unit_price.amount,
                    "discount_percent": item.discount_percent,
                    "final_price": item.final_price.amount,
                }
                for item in order.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        currency = raw.get("currency", "INR")
        items = [
            OrderItem(
                id=i["id"],
                product_id=i["product_id"],
                product_name=i["product_name"],
                quantity=i["quantity"],
                unit_price=Money(i["unit_price"], currency),
                discount_percent=i.get("discount_percent"),
                final_price=Money(i["final_price"], currency),
            )
            for i in raw["items"]
        ]
        return Order(
            id=raw["id"],
            user_id=raw["user_id"],
            items=items,
            total_amount=Money(raw["total_amount"], currency),
            shipping_address=ShippingAddress(**raw["address"]),
            status=OrderStatus(raw["status"]),
            gateway_order_ref=raw.get("gateway_order_ref"),
            gateway_payment_ref=raw.get("gateway_payment_ref"),
            gateway_signature=raw.get("gateway_signature"),
            paid_at=datetime.fromisoformat(raw["paid_at"]) if raw.get("paid_at") else None,
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw.get("updated_at", raw["created_at"])),
        )
