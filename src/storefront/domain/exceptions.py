"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """Bad input shape or range."""


class AuthorizationError(DomainException):
    """Caller is not authenticated, not the owner, or not an admin.

    Messages stay generic so they never reveal which users or orders exist.
    """


class EntityNotFoundError(DomainException):
    """A requested entity does not exist (or is not visible to the caller)."""


class ConflictError(DomainException):
    """The request is well-formed but conflicts with current state."""


class IllegalTransitionError(ConflictError):

    def __init__(self, current, requested) -> None:
        self.current = current
        self.requested = requested
        super().__init__(
            f"Cannot change order status from {current.value} to {requested.value}"
        )


class InsufficientStockError(ConflictError):

    def __init__(self, product_name: str, available: int, requested: int) -> None:
        self.product_name = product_name
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for {product_name}. "
            f"Available: {available}, Requested: {requested}"
        )


class ReconciliationRequiredError(InsufficientStockError):
    """Payment was captured by the gateway but the order cannot be fulfilled.

    Nothing is refunded automatically; the order is left in PAYMENT_FAILED
    with its gateway references stored so an operator can settle it.
    """

    def __init__(self, order_id: int, payment_ref: str, cause: InsufficientStockError) -> None:
        self.product_name = cause.product_name
        self.available = cause.available
        self.requested = cause.requested
        self.order_id = order_id
        self.payment_ref = payment_ref
        ConflictError.__init__(
            self,
            f"{cause} Payment for order #{order_id} was captured and "
            f"requires manual reconciliation.",
        )


class PaymentVerificationError(ConflictError):
    """The claimed payment does not match what the gateway and order say."""


class ExternalDependencyError(DomainException):
    """A collaborator (payment gateway, store) was unreachable or malformed.

    Retryable by the caller; the order state is left consistent.
    """


class FatalInternalError(DomainException):
    """An invariant was violated. Details are logged, never shown."""

    public_message = "An internal error occurred"


class RateLimitExceededError(DomainException):
    """Too many requests from the same client in the current window."""
