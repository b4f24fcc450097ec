"""User aggregate: identity and API credentials."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass

from storefront.domain.exceptions import ValidationError


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


@dataclass
class User:
    """A customer or administrator.

    Only the SHA-256 hash of the API token is stored.
    """

    id: str
    email: str
    token_hash: str
    is_admin: bool = False

    @staticmethod
    def create(user_id: str, email: str, token: str, is_admin: bool = False) -> User:
        cleaned = (email or "").strip().lower()
        if not cleaned or "@" not in cleaned or len(cleaned) > 254:
            raise ValidationError("A valid email address is required")
        return User(id=user_id, email=cleaned, token_hash=hash_token(token), is_admin=is_admin)
