"""
Payment provider client.

PaymentGateway is the capability the API depends on. StripeGateway talks to
Stripe; MockGateway is an in-memory stand-in that signs and verifies webhook
payloads with the same "t=...,v1=..." HMAC-SHA256 scheme, so local runs and
tests exercise the real verification path.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional
import hashlib
import hmac
import json
import logging
import time
import uuid

import stripe

from app.core.errors import GatewayUnavailable, InvalidSignature

logger = logging.getLogger(__name__)

# Seconds a webhook timestamp may lag behind the current time
SIGNATURE_TOLERANCE = 300

CURRENCY_SYMBOLS = {
    "usd": "$",
    "eur": "€",
    "gbp": "£",
    "jpy": "¥",
    "cad": "CA$",
    "aud": "A$",
}

# Currencies whose minor unit is the major unit
ZERO_DECIMAL_CURRENCIES = {"jpy", "krw", "vnd", "clp", "isk", "ugx", "xof", "xaf"}


def format_price(amount: int, currency: str = "usd") -> str:
    """
    Format an amount in minor units the way en-US Intl currency formatting does.

    format_price(9900) -> "$99.00"; format_price(123456, "eur") -> "€1,234.56"
    Zero-decimal currencies (JPY and friends) are already in whole units.
    """
    code = (currency or "usd").lower()
    digits = 0 if code in ZERO_DECIMAL_CURRENCIES else 2
    value = (Decimal(amount) / Decimal(10) ** digits).quantize(
        Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP
    )
    sign = "-" if value < 0 else ""
    number = f"{abs(value):,.{digits}f}"
    symbol = CURRENCY_SYMBOLS.get(code)
    if symbol:
        return f"{sign}{symbol}{number}"
    return f"{sign}{code.upper()}\xa0{number}"


@dataclass
class CheckoutSession:
    id: str
    url: Optional[str] = None


class PaymentGateway(ABC):
    @property
    @abstractmethod
    def configured(self) -> bool: ...

    @abstractmethod
    def create_checkout_session(
        self,
        price_id: str,
        success_url: str,
        cancel_url: str,
        customer_email: Optional[str] = None,
        metadata: Optional[Dict[str, str]] = None,
        mode: str = "payment",
    ) -> CheckoutSession: ...

    @abstractmethod
    def verify_webhook_signature(
        self, raw_body: bytes, signature_header: str, secret: str
    ) -> Dict[str, Any]: ...


def _parse_event(raw_body: bytes) -> Dict[str, Any]:
    try:
        event = json.loads(raw_body.decode("utf-8") if isinstance(raw_body, bytes) else raw_body)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise InvalidSignature(f"Invalid payload: {e}")
    if not isinstance(event, dict):
        raise InvalidSignature("Invalid payload: expected a JSON object")
    return event


class StripeGateway(PaymentGateway):
    def __init__(self, secret_key: Optional[str] = None):
        self.secret_key = secret_key

    @property
    def configured(self) -> bool:
        return bool(self.secret_key)

    def create_checkout_session(
        self,
        price_id,
        success_url,
        cancel_url,
        customer_email=None,
        metadata=None,
        mode="payment",
    ):
        if not self.secret_key:
            raise GatewayUnavailable("Stripe secret key not configured. Set STRIPE_SECRET_KEY in environment.")

        params: Dict[str, Any] = {
            "mode": mode,
            "line_items": [{"price": price_id, "quantity": 1}],
            "success_url": success_url,
            "cancel_url": cancel_url,
            "metadata": metadata or {},
        }
        if customer_email:
            params["customer_email"] = customer_email
        if mode == "subscription" and metadata:
            # Copy purchase metadata onto the subscription so invoice events carry it too
            params["subscription_data"] = {"metadata": metadata}

        session = stripe.checkout.Session.create(api_key=self.secret_key, **params)
        return CheckoutSession(id=session.id, url=session.url)

    def verify_webhook_signature(self, raw_body, signature_header, secret):
        if not secret:
            raise GatewayUnavailable("STRIPE_WEBHOOK_SECRET not configured")
        try:
            stripe.Webhook.construct_event(raw_body, signature_header, secret, tolerance=SIGNATURE_TOLERANCE)
        except ValueError as e:
            raise InvalidSignature(f"Invalid payload: {e}")
        except stripe.SignatureVerificationError as e:
            raise InvalidSignature(f"Signature verification failed: {e}")
        return _parse_event(raw_body)


def compute_signature(payload: bytes, secret: str, timestamp: int) -> str:
    signed = f"{timestamp}.".encode() + payload
    return hmac.new(secret.encode(), signed, hashlib.sha256).hexdigest()


def sign_payload(payload: bytes, secret: str, timestamp: Optional[int] = None) -> str:
    """Build a signature header for payload, as the provider would send it."""
    ts = int(time.time()) if timestamp is None else timestamp
    return f"t={ts},v1={compute_signature(payload, secret, ts)}"


def _parse_signature_header(header: str):
    timestamp = None
    signatures = []
    for item in header.split(","):
        key, sep, value = item.strip().partition("=")
        if not sep:
            continue
        if key == "t":
            try:
                timestamp = int(value)
            except ValueError:
                return None, []
        elif key == "v1":
            signatures.append(value)
    return timestamp, signatures


@dataclass
class MockGateway(PaymentGateway):
    """In-memory gateway. Records checkout calls for inspection."""
    sessions: List[Dict[str, Any]] = field(default_factory=list)
    tolerance: int = SIGNATURE_TOLERANCE

    @property
    def configured(self) -> bool:
        return True

    def create_checkout_session(
        self,
        price_id,
        success_url,
        cancel_url,
        customer_email=None,
        metadata=None,
        mode="payment",
    ):
        session_id = f"cs_mock_{uuid.uuid4().hex}"
        self.sessions.append({
            "id": session_id,
            "price_id": price_id,
            "success_url": success_url,
            "cancel_url": cancel_url,
            "customer_email": customer_email,
            "metadata": dict(metadata or {}),
            "mode": mode,
        })
        return CheckoutSession(id=session_id, url=f"/mockpay/{session_id}")

    def verify_webhook_signature(self, raw_body, signature_header, secret):
        if not secret:
            raise GatewayUnavailable("STRIPE_WEBHOOK_SECRET not configured")
        timestamp, signatures = _parse_signature_header(signature_header or "")
        if timestamp is None or not signatures:
            raise InvalidSignature("Unable to extract timestamp and signatures from header")
        expected = compute_signature(raw_body, secret, timestamp)
        if not any(hmac.compare_digest(expected, sig) for sig in signatures):
            raise InvalidSignature("No signatures found matching the expected signature for payload")
        if self.tolerance and timestamp < time.time() - self.tolerance:
            raise InvalidSignature("Timestamp outside the tolerance zone")
        return _parse_event(raw_body)


def build_payment_gateway(settings) -> PaymentGateway:
    backend = (settings.PAYMENT_BACKEND or "stripe").lower()
    if backend == "mock":
        logger.info("Using mock payment gateway")
        return MockGateway()
    if not settings.STRIPE_SECRET_KEY:
        logger.warning("STRIPE_SECRET_KEY not configured; checkout and webhooks will report 503")
    return StripeGateway(secret_key=settings.STRIPE_SECRET_KEY)
