"""HTTP client for the Razorpay payments API.

Creates payment orders and re-fetches payments server-to-server so the
application never has to trust what the browser reports.  Callback
signatures are HMAC-SHA256 over ``"<order_id>|<payment_id>"`` keyed with
the account secret.
"""

from __future__ import annotations

import hashlib
import hmac
import logging

import httpx

from storefront.domain.exceptions import ExternalDependencyError
from storefront.domain.model.value_objects import Money
from storefront.domain.service.payment_gateway import (
    GatewayPayment,
    PaymentGateway,
    PaymentIntent,
)

logger = logging.getLogger(__name__)


def compute_signature(secret: str, gateway_order_ref: str, payment_ref: str) -> str:
    message = f"{gateway_order_ref}|{payment_ref}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


def _minor_units(value) -> int:
    # Amounts are integer paise; 18000.4 or "18000" is a malformed response.
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"amount must be an integer, got {value!r}")
    return value


class RazorpayGateway(PaymentGateway):

    def __init__(
        self,
        key_id: str | None,
        key_secret: str | None,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._key_id = key_id
        self._key_secret = key_secret
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport

    # --- PaymentGateway interface ---------------------------------------------

    def create_intent(self, amount: Money, internal_order_id: int) -> PaymentIntent:
        payload = {
            "amount": amount.amount,
            "currency": amount.currency,
            "receipt": f"order_{internal_order_id}",
            "notes": {"order_id": str(internal_order_id)},
        }
        data = self._request("POST", "/orders", json=payload)
        if data is None:
            raise ExternalDependencyError("Payment gateway rejected the order")
        try:
            return PaymentIntent(
                gateway_order_ref=str(data["id"]),
                amount=_minor_units(data["amount"]),
                currency=str(data["currency"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            logger.error("Malformed order response from gateway: %r", data)
            raise ExternalDependencyError("Payment gateway returned a malformed response") from exc

    def fetch_payment(self, payment_ref: str) -> GatewayPayment | None:
        data = self._request("GET", f"/payments/{payment_ref}")
        if data is None:
            return None
        try:
            return GatewayPayment(
                payment_ref=str(data["id"]),
                status=str(data["status"]),
                gateway_order_ref=data.get("order_id"),
                amount=_minor_units(data["amount"]),
                currency=str(data["currency"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            logger.error("Malformed payment response from gateway: %r", data)
            raise ExternalDependencyError("Payment gateway returned a malformed response") from exc

    def verify_signature(self, gateway_order_ref: str, payment_ref: str, signature: str) -> bool:
        expected = compute_signature(self._secret(), gateway_order_ref, payment_ref)
        return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))

    # --- HTTP helpers ---------------------------------------------------------

    def _secret(self) -> str:
        if not self._key_id or not self._key_secret:
            raise ExternalDependencyError("Payment gateway is not configured")
        return self._key_secret

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self._base_url,
            auth=(self._key_id or "", self._secret()),
            timeout=self._timeout,
            transport=self._transport,
        )

    def _request(self, method: str, path: str, json: dict | None = None) -> dict | None:
        """Send a request; None on 404, ExternalDependencyError on anything unusable."""
        try:
            with self._client() as client:
                response = client.request(method, path, json=json)
        except httpx.RequestError as exc:
            logger.warning("Payment gateway %s %s failed: %s", method, path, exc)
            raise ExternalDependencyError("Payment gateway is unreachable") from exc

        if response.status_code == 404:
            return None
        if response.status_code >= 400:
            logger.error(
                "Payment gateway %s %s answered %s: %s",
                method, path, response.status_code, response.text[:500],
            )
            raise ExternalDependencyError(
                f"Payment gateway error (HTTP {response.status_code})"
            )

        try:
            data = response.json()
        except ValueError as exc:
            logger.error("Payment gateway %s %s returned non-JSON body", method, path)
            raise ExternalDependencyError("Payment gateway returned a malformed response") from exc
        if not isinstance(data, dict):
            raise ExternalDependencyError("Payment gateway returned a malformed response")
        return data
