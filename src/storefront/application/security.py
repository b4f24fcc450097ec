"""Access ports: who is calling, and may they call again right now.

Handlers never trust an identity from request input; the CLI resolves the
caller through an ``Authenticator`` and passes the resulting user id on.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from storefront.domain.exceptions import AuthorizationError, RateLimitExceededError


@dataclass(frozen=True)
class Identity:
    user_id: str
    is_admin: bool = False


@dataclass(frozen=True)
class RateLimit:
    max_count: int
    window_ms: int


ONE_MINUTE_MS = 60 * 1000

RATE_LIMITS: dict[str, RateLimit] = {
    "order:create": RateLimit(10, ONE_MINUTE_MS),
    "payment:verify": RateLimit(10, ONE_MINUTE_MS),
    "cart:merge": RateLimit(20, ONE_MINUTE_MS),
    "admin:orders:update": RateLimit(20, ONE_MINUTE_MS),
    "admin:products:create": RateLimit(10, ONE_MINUTE_MS),
}


class Authenticator(ABC):

    @abstractmethod
    def resolve(self, token: str | None) -> Identity:
        """Return the verified identity behind *token*.

        Raises AuthorizationError (with a generic message) otherwise.
        """


class RateLimiter(ABC):

    @abstractmethod
    def check(self, key: str, max_count: int, window_ms: int) -> bool:
        """Count one call for *key*; False once the window's budget is spent."""


def require_admin(identity: Identity) -> Identity:
    if not identity.is_admin:
        raise AuthorizationError("Admin access required")
    return identity


def enforce_rate_limit(limiter: RateLimiter, action: str, client_id: str) -> None:
    limit = RATE_LIMITS[action]
    if not limiter.check(f"{action}:{client_id}", limit.max_count, limit.window_ms):
        raise RateLimitExceededError("Too many requests. Please try again later.")
