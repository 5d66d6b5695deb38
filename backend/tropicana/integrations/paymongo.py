"""
PayMongo API client
Checkout sessions and payment intents over the PayMongo REST API
"""
import base64
import hashlib
import hmac
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

import httpx

from tropicana.config import settings
from tropicana.services.exceptions import PaymentGatewayError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.paymongo.com/v1"

CHECKOUT_PAYMENT_METHODS = [
    "card",
    "paymaya",
    "gcash",
    "grab_pay",
    "billease",
    "dob",
    "dob_ubp",
    "brankas_bdo",
    "brankas_landbank",
    "brankas_metrobank",
]


def to_centavos(amount) -> int:
    """PayMongo amounts are integers in the smallest currency unit"""
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class PayMongoClient:
    """
    Synchronous PayMongo client

    Every call returns the ``data`` object of the response. API and transport
    failures raise PaymentGatewayError.
    """

    def __init__(self, secret_key: str, base_url: str = DEFAULT_BASE_URL,
                 timeout: float = 30.0, transport: Optional[httpx.BaseTransport] = None):
        if not secret_key:
            raise PaymentGatewayError("PayMongo secret key is not configured")
        self.secret_key = secret_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    @property
    def headers(self) -> Dict[str, str]:
        token = base64.b64encode(f"{self.secret_key}:".encode()).decode()
        return {
            "Authorization": f"Basic {token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def get_client(self) -> httpx.Client:
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                base_url=self.base_url,
                headers=self.headers,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    def close(self) -> None:
        if self._client and not self._client.is_closed:
            self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        errors = body.get("errors") if isinstance(body, dict) else None
        if errors:
            return errors[0].get("detail") or errors[0].get("code") or "Unknown error"
        return f"HTTP {response.status_code}"

    def _request(self, method: str, endpoint: str, attributes: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        client = self.get_client()
        body = {"data": {"attributes": attributes}} if attributes is not None else None
        try:
            response = client.request(method, endpoint, json=body)
        except httpx.RequestError as e:
            logger.error(f"PayMongo request {method} {endpoint} failed: {e}")
            raise PaymentGatewayError(f"PayMongo Error: {e}")

        if response.status_code >= 400:
            detail = self._error_detail(response)
            logger.warning(f"PayMongo {method} {endpoint} returned {response.status_code}: {detail}")
            raise PaymentGatewayError(f"PayMongo Error: {detail}", provider_status=response.status_code)

        return response.json()["data"]

    # ============== Checkout sessions ==============

    def create_checkout_session(self, *, line_items: List[Dict[str, Any]], success_url: str,
                                cancel_url: str, description: str,
                                billing: Optional[Dict[str, Any]] = None,
                                reference_number: Optional[str] = None,
                                metadata: Optional[Dict[str, Any]] = None,
                                payment_method_types: Optional[List[str]] = None,
                                send_email_receipt: bool = True,
                                show_description: bool = True,
                                show_line_items: bool = True) -> Dict[str, Any]:
        attributes = {
            "line_items": line_items,
            "payment_method_types": payment_method_types or CHECKOUT_PAYMENT_METHODS,
            "success_url": success_url,
            "cancel_url": cancel_url,
            "description": description,
            "send_email_receipt": send_email_receipt,
            "show_description": show_description,
            "show_line_items": show_line_items,
        }
        if billing:
            attributes["billing"] = billing
        if reference_number:
            attributes["reference_number"] = reference_number
        if metadata:
            # PayMongo metadata values must be strings
            attributes["metadata"] = {k: str(v) for k, v in metadata.items() if v is not None}
        return self._request("POST", "/checkout_sessions", attributes)

    def get_checkout_session(self, session_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/checkout_sessions/{session_id}")

    # ============== Payment intents ==============

    def create_payment_intent(self, *, amount: int, currency: str = "PHP",
                              description: Optional[str] = None,
                              metadata: Optional[Dict[str, Any]] = None,
                              payment_method_allowed: Optional[List[str]] = None) -> Dict[str, Any]:
        attributes = {
            "amount": amount,
            "currency": currency,
            "payment_method_allowed": payment_method_allowed or ["card", "paymaya", "gcash", "grab_pay"],
            "payment_method_options": {"card": {"request_three_d_secure": "any"}},
            "capture_type": "automatic",
        }
        if description:
            attributes["description"] = description
        if metadata:
            attributes["metadata"] = {k: str(v) for k, v in metadata.items() if v is not None}
        return self._request("POST", "/payment_intents", attributes)

    def get_payment_intent(self, intent_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/payment_intents/{intent_id}")


# ============== Webhook signatures ==============

def _hmac_hex(secret: str, message: bytes) -> str:
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


def verify_webhook_signature(payload: bytes, signature_header: str, secret: str,
                             livemode: bool = False) -> bool:
    """
    Check a ``paymongo-signature`` header

    Accepts PayMongo's ``t=<ts>,te=<sig>,li=<sig>`` form, where the signed
    message is ``<ts>.<body>``, and a bare hex digest of the body.
    """
    if not signature_header or not secret:
        return False

    parts = dict(
        item.strip().split("=", 1) for item in signature_header.split(",") if "=" in item
    )
    if "t" in parts:
        expected = _hmac_hex(secret, parts["t"].encode() + b"." + payload)
        provided = parts.get("li") if livemode else parts.get("te")
        return bool(provided) and hmac.compare_digest(expected, provided)

    return hmac.compare_digest(_hmac_hex(secret, payload), signature_header.strip())


def get_paymongo_client():
    """Dependency: PayMongo client built from settings, closed after the request"""
    client = PayMongoClient(
        secret_key=settings.PAYMONGO_SECRET_KEY,
        base_url=settings.PAYMONGO_BASE_URL,
        timeout=settings.PAYMONGO_TIMEOUT,
    )
    try:
        yield client
    finally:
        client.close()
