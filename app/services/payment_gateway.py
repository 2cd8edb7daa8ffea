import hashlib
import hmac
import logging
import secrets
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from app.config import settings
from app.exceptions import GatewayError

logger = logging.getLogger(__name__)


@dataclass
class GatewayCheckout:
    reference: str
    authorization_url: str


@dataclass
class GatewayVerification:
    reference: str
    success: bool
    amount: Optional[int]           # major units
    order_id: Optional[int]
    raw: Dict[str, Any]


def _as_int(value) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class PaymentGateway:
    """
    HTTP client for the hosted payment page.

    The provider takes an amount in minor units and an order reference and
    answers with a URL to redirect the customer to. Success is reported
    later through the webhook (signed with the secret key) or the browser
    callback, which is verified back against the provider.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        secret_key: Optional[str] = None,
        currency: Optional[str] = None,
        callback_url: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        self.base_url = (base_url or settings.payment_gateway_base_url).rstrip("/")
        self.secret_key = secret_key if secret_key is not None else settings.payment_gateway_secret_key
        self.currency = currency or settings.payment_currency
        self.callback_url = callback_url or settings.callback_url
        self.timeout = timeout or settings.payment_gateway_timeout

    @staticmethod
    def generate_reference() -> str:
        return f"PSK_{int(time.time() * 1000)}_{secrets.token_hex(5)}"

    @staticmethod
    def to_minor_units(amount: int) -> int:
        return int(amount) * 100

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.secret_key}",
            "Content-Type": "application/json",
        }

    def initialize(
        self,
        *,
        reference: str,
        amount: int,
        email: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> GatewayCheckout:
        if not self.secret_key:
            raise GatewayError("Payment service not configured")
        if amount <= 0 or not email:
            raise GatewayError("Invalid payment parameters")

        payload = {
            "email": email,
            "amount": self.to_minor_units(amount),
            "reference": reference,
            "callback_url": self.callback_url,
            "currency": self.currency,
            "metadata": metadata or {},
        }

        try:
            response = requests.post(
                f"{self.base_url}/transaction/initialize",
                json=payload,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Payment gateway unreachable: %s", exc)
            raise GatewayError("Payment provider unreachable") from exc

        if response.status_code >= 400:
            logger.error("Payment gateway error (%s): %s", response.status_code, response.text)
            raise GatewayError(f"Payment provider error: {response.status_code}")

        try:
            body = response.json()
        except ValueError as exc:
            raise GatewayError("Payment provider returned an invalid response") from exc

        data = body.get("data") or {}
        url = data.get("authorization_url")
        if not body.get("status") or not url:
            raise GatewayError(body.get("message") or "Payment provider returned no payment URL")

        return GatewayCheckout(reference=data.get("reference") or reference, authorization_url=url)

    def verify_transaction(self, reference: str) -> GatewayVerification:
        try:
            response = requests.get(
                f"{self.base_url}/transaction/verify/{reference}",
                headers=self._headers(),
                timeout=self.timeout,
            )
            body = response.json()
        except requests.RequestException as exc:
            raise GatewayError("Payment provider unreachable") from exc
        except ValueError as exc:
            raise GatewayError("Payment provider returned an invalid response") from exc

        data = body.get("data") or {}
        return self.parse_transaction(data, success=bool(body.get("status")))

    @staticmethod
    def parse_transaction(data: Dict[str, Any], success: bool = True) -> GatewayVerification:
        metadata = data.get("metadata")
        if not isinstance(metadata, dict):
            metadata = {}
        order_id = _as_int(metadata.get("order_id"))
        amount = _as_int(data.get("amount"))
        if data.get("amount") is not None and amount is None:
            # an unreadable amount cannot confirm a payment
            logger.warning("Unreadable amount for transaction %s", data.get("reference"))
            success = False
        return GatewayVerification(
            reference=data.get("reference"),
            success=success and data.get("status") == "success",
            amount=amount // 100 if amount is not None else None,
            order_id=order_id,
            raw=data,
        )

    def sign(self, body: bytes) -> str:
        return hmac.new(self.secret_key.encode(), body, hashlib.sha512).hexdigest()

    def verify_signature(self, body: bytes, signature: Optional[str]) -> bool:
        if not signature or not self.secret_key:
            return False
        return hmac.compare_digest(self.sign(body), signature)


payment_gateway = PaymentGateway()


def get_payment_gateway() -> PaymentGateway:
    return payment_gateway
