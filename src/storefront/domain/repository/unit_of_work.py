"""Abstract transaction boundary over all repositories.

Usage::

    with uow:
        order = uow.orders.get_by_id(order_id)
        ...
        uow.commit()

Leaving the block without ``commit()`` (or by an exception) rolls back.
Implementations must guarantee that a read followed by a conditional
write inside one block cannot interleave with another block's writes to
the same rows, and that a commit is applied all-or-nothing.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.repository.user_repository import UserRepository


class UnitOfWork(ABC):

    products: ProductRepository
    carts: CartRepository
    orders: OrderRepository
    users: UserRepository

    def __enter__(self) -> UnitOfWork:
        self.begin()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.rollback()

    @abstractmethod
    def begin(self) -> None:
        """Open a transaction and bind fresh repositories to it."""

    @abstractmethod
    def commit(self) -> None:
        """Make every change since ``begin()`` durable and visible."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard uncommitted changes and end the transaction.

        Must be a no-op after a successful ``commit()``.
        """
