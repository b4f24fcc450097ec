"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from storefront.infrastructure.config import Settings
from storefront.infrastructure.gateway.razorpay_gateway import RazorpayGateway
from storefront.infrastructure.persistence.json_unit_of_work import JsonUnitOfWork
from storefront.infrastructure.security.json_rate_limiter import JsonRateLimiter
from storefront.infrastructure.security.token_authenticator import TokenAuthenticator


def settings() -> Settings:
    return Settings.from_env()


def unit_of_work() -> JsonUnitOfWork:
    s = settings()
    return JsonUnitOfWork(s.store_path, lock_timeout=s.lock_timeout)


def payment_gateway() -> RazorpayGateway:
    s = settings()
    return RazorpayGateway(
        key_id=s.gateway_key_id,
        key_secret=s.gateway_key_secret,
        base_url=s.gateway_base_url,
        timeout=s.gateway_timeout,
    )


def authenticator() -> TokenAuthenticator:
    return TokenAuthenticator(unit_of_work())


def rate_limiter() -> JsonRateLimiter:
    s = settings()
    return JsonRateLimiter(s.rate_limit_path, lock_timeout=s.lock_timeout)
