"""Unit of work over a single JSON document.

All aggregates live in one ``store.json``::

    {"products": [...], "carts": [...], "orders": [...], "users": [...]}

``begin()`` takes an exclusive lock on ``store.json.lock`` and loads a
snapshot; repositories read and write that snapshot in memory.
``commit()`` writes it to a temporary file and renames it over the store,
so readers see either the old or the new document, never a partial one.
Holding the lock for the whole block serializes transactions.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from storefront.domain.exceptions import FatalInternalError
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.infrastructure.persistence.atomic_write import write_json_atomic
from storefront.infrastructure.persistence.file_lock import FileLock
from storefront.infrastructure.persistence.json_cart_repository import JsonCartRepository
from storefront.infrastructure.persistence.json_order_repository import JsonOrderRepository
from storefront.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from storefront.infrastructure.persistence.json_user_repository import JsonUserRepository

logger = logging.getLogger(__name__)

SECTIONS = ("products", "carts", "orders", "users")


class JsonUnitOfWork(UnitOfWork):

    def __init__(self, store_path: Path, lock_timeout: float = 5.0) -> None:
        self._store_path = store_path
        self._lock = FileLock(store_path.with_name(store_path.name + ".lock"), lock_timeout)
        self._snapshot: dict[str, list[dict]] | None = None

    def begin(self) -> None:
        self._lock.acquire()
        try:
            self._snapshot = self._load_raw()
        except Exception:
            self._lock.release()
            raise
        self.products = JsonProductRepository(self._snapshot["products"])
        self.carts = JsonCartRepository(self._snapshot["carts"])
        self.orders = JsonOrderRepository(self._snapshot["orders"])
        self.users = JsonUserRepository(self._snapshot["users"])

    def commit(self) -> None:
        if self._snapshot is None or not self._lock.held:
            raise RuntimeError("commit() called outside a transaction")
        self._persist_raw(self._snapshot)
        self._end()

    def rollback(self) -> None:
        self._end()

    def _end(self) -> None:
        self._snapshot = None
        self._lock.release()

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> dict[str, list[dict]]:
        if not self._store_path.exists():
            return {section: [] for section in SECTIONS}
        try:
            data = json.loads(self._store_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            logger.critical("Store %s is not valid JSON: %s", self._store_path, exc)
            raise FatalInternalError(f"Corrupt store file {self._store_path}") from exc
        for section in SECTIONS:
            data.setdefault(section, [])
        return data

    def _persist_raw(self, data: dict[str, list[dict]]) -> None:
        write_json_atomic(self._store_path, data)
