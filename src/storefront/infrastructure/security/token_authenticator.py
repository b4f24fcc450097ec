"""Resolves API tokens to users stored in the JSON store."""

from __future__ import annotations

import logging

from storefront.application.security import Authenticator, Identity
from storefront.domain.exceptions import AuthorizationError
from storefront.domain.model.user import hash_token
from storefront.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class TokenAuthenticator(Authenticator):

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def resolve(self, token: str | None) -> Identity:
        token = (token or "").strip()
        if not token:
            raise AuthorizationError("Authentication required")

        with self._uow:
            user = self._uow.users.get_by_token_hash(hash_token(token))

        if user is None:
            logger.info("Rejected unknown API token")
            raise AuthorizationError("Authentication required")
        return Identity(user_id=user.id, is_admin=user.is_admin)
