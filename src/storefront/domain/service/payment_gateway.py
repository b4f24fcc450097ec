"""Payment gateway port.

The gateway creates a remote payment order ("intent") for an amount, and
later reports the completed payment.  Amounts are integers in minor
currency units on both sides.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from storefront.domain.model.value_objects import Money

PAYMENT_CAPTURED = "captured"


@dataclass(frozen=True)
class PaymentIntent:
    gateway_order_ref: str
    amount: int
    currency: str


@dataclass(frozen=True)
class GatewayPayment:
    payment_ref: str
    status: str
    gateway_order_ref: str | None
    amount: int
    currency: str

    @property
    def is_captured(self) -> bool:
        return self.status == PAYMENT_CAPTURED


class PaymentGateway(ABC):

    @abstractmethod
    def create_intent(self, amount: Money, internal_order_id: int) -> PaymentIntent:
        """Create a payment order at the gateway.

        Raises ExternalDependencyError if the gateway is unreachable or
        answers with something unusable.
        """

    @abstractmethod
    def fetch_payment(self, payment_ref: str) -> GatewayPayment | None:
        """Fetch a payment from the gateway's own API, or None if unknown."""

    @abstractmethod
    def verify_signature(self, gateway_order_ref: str, payment_ref: str, signature: str) -> bool:
        """Check the callback signature using a timing-safe comparison."""
