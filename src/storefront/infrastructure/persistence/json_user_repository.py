"""JSON-backed implementation of UserRepository."""

from __future__ import annotations

import hmac

from storefront.domain.model.user import User
from storefront.domain.repository.user_repository import UserRepository


class JsonUserRepository(UserRepository):

    def __init__(self, records: list[dict]) -> None:
        self._records = records

    def get_by_id(self, user_id: str) -> User | None:
        for raw in self._records:
            if raw["id"] == user_id:
                return self._to_domain(raw)
        return None

    def get_by_email(self, email: str) -> User | None:
        wanted = email.strip().lower()
        for raw in self._records:
            if raw["email"] == wanted:
                return self._to_domain(raw)
        return None

    def get_by_token_hash(self, token_hash: str) -> User | None:
        for raw in self._records:
            if hmac.compare_digest(raw["token_hash"], token_hash):
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[User]:
        return [self._to_domain(raw) for raw in self._records]

    def save(self, user: User) -> None:
        for i, raw in enumerate(self._records):
            if raw["id"] == user.id:
                self._records[i] = self._to_raw(user)
                return
        self._records.append(self._to_raw(user))

    @staticmethod
    def _to_raw(user: User) -> dict:
        return {
            "id": user.id,
            "email": user.email,
            "token_hash": user.token_hash,
            "is_admin": user.is_admin,
        }

    @staticmethod
    def _to_domain(raw: dict) -> User:
        return User(
            id=raw["id"],
            email=raw["email"],
            token_hash=raw["token_hash"],
            is_admin=raw.get("is_admin", False),
        )
