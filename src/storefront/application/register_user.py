"""Application service: Register User use case.

The very first user of a fresh store becomes an admin and needs no
credentials; after that only admins can register users.  The API token
is returned exactly once and only its hash is stored.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass

from storefront.application.cart_access import new_id
from storefront.application.security import Identity
from storefront.domain.exceptions import AuthorizationError, ConflictError
from storefront.domain.model.user import User
from storefront.domain.repository.unit_of_work import UnitOfWork


@dataclass(frozen=True)
class RegisteredUserDTO:
    user_id: str
    email: str
    is_admin: bool
    token: str


class RegisterUserHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, email: str, is_admin: bool, caller: Identity | None) -> RegisteredUserDTO:
        token = secrets.token_urlsafe(32)

        with self._uow:
            first_user = not self._uow.users.list_all()
            if not first_user and (caller is None or not caller.is_admin):
                raise AuthorizationError("Admin access required")

            user = User.create(
                user_id=f"user_{new_id()}",
                email=email,
                token=token,
                is_admin=is_admin or first_user,
            )
            if self._uow.users.get_by_email(user.email) is not None:
                raise ConflictError("A user with this email already exists")

            self._uow.users.save(user)
            self._uow.commit()

        return RegisteredUserDTO(
            user_id=user.id, email=user.email, is_admin=user.is_admin, token=token
        )
