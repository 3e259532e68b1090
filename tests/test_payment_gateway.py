"""Payment gateway client tests"""
import json
import time
from types import SimpleNamespace

import pytest
import stripe

from app.core.errors import GatewayUnavailable, InvalidSignature
from app.services.payment_gateway import (
    MockGateway,
    StripeGateway,
    format_price,
    sign_payload,
)

SECRET = "whsec_gateway_test"
EVENT = {"id": "evt_1", "type": "invoice.payment_failed", "data": {"object": {"subscription": "sub_1"}}}


@pytest.mark.parametrize("amount,currency,expected", [
    (9900, "usd", "$99.00"),
    (0, "usd", "$0.00"),
    (123456789, "usd", "$1,234,567.89"),
    (-500, "usd", "-$5.00"),
    (1999, "EUR", "€19.99"),
    (500, "jpy", "¥500"),
    (9900, "chf", "CHF\xa099.00"),
])
def test_format_price(amount, currency, expected):
    assert format_price(amount, currency) == expected


def test_format_price_defaults_to_usd():
    assert format_price(2500) == "$25.00"


def test_mock_gateway_verifies_signed_payload():
    payload = json.dumps(EVENT).encode()
    event = MockGateway().verify_webhook_signature(payload, sign_payload(payload, SECRET), SECRET)
    assert event == EVENT


def test_mock_gateway_rejects_wrong_secret():
    payload = json.dumps(EVENT).encode()
    with pytest.raises(InvalidSignature):
        MockGateway().verify_webhook_signature(payload, sign_payload(payload, "whsec_wrong"), SECRET)


def test_mock_gateway_rejects_non_object_payload():
    payload = b"[1, 2, 3]"
    with pytest.raises(InvalidSignature):
        MockGateway().verify_webhook_signature(payload, sign_payload(payload, SECRET), SECRET)


def test_mock_gateway_requires_secret():
    payload = json.dumps(EVENT).encode()
    with pytest.raises(GatewayUnavailable):
        MockGateway().verify_webhook_signature(payload, sign_payload(payload, SECRET), None)


def test_mock_gateway_records_sessions():
    gateway = MockGateway()
    session = gateway.create_checkout_session("price_1", "https://a/s", "https://a/c", metadata={"productId": "p1"})
    assert session.id.startswith("cs_mock_")
    assert session.url.endswith(session.id)
    assert gateway.sessions[0]["metadata"] == {"productId": "p1"}


def test_stripe_gateway_verifies_provider_signature():
    """The provider's own verification accepts headers built by sign_payload"""
    payload = json.dumps(EVENT).encode()
    gateway = StripeGateway(secret_key="sk_test_123")
    event = gateway.verify_webhook_signature(payload, sign_payload(payload, SECRET), SECRET)
    assert event["type"] == "invoice.payment_failed"
    assert event["data"]["object"]["subscription"] == "sub_1"


def test_stripe_gateway_rejects_bad_signature():
    payload = json.dumps(EVENT).encode()
    gateway = StripeGateway(secret_key="sk_test_123")
    with pytest.raises(InvalidSignature):
        gateway.verify_webhook_signature(payload, f"t={int(time.time())},v1=deadbeef", SECRET)


def test_stripe_gateway_rejects_malformed_header():
    payload = json.dumps(EVENT).encode()
    with pytest.raises(InvalidSignature):
        StripeGateway(secret_key="sk_test_123").verify_webhook_signature(payload, "garbage", SECRET)


def test_stripe_gateway_without_key_is_unavailable():
    gateway = StripeGateway(secret_key=None)
    assert not gateway.configured
    with pytest.raises(GatewayUnavailable):
        gateway.create_checkout_session("price_1", "https://a/s", "https://a/c")


def test_stripe_gateway_creates_session(monkeypatch):
    captured = {}

    def fake_create(**params):
        captured.update(params)
        return SimpleNamespace(id="cs_test_abc", url="https://checkout.stripe.com/c/cs_test_abc")

    monkeypatch.setattr(stripe.checkout.Session, "create", fake_create)
    gateway = StripeGateway(secret_key="sk_test_123")
    session = gateway.create_checkout_session(
        "price_1", "https://a/s", "https://a/c",
        customer_email="buyer@example.com",
        metadata={"productId": "p1", "storeId": "s1"},
        mode="subscription",
    )
    assert session.id == "cs_test_abc"
    assert captured["api_key"] == "sk_test_123"
    assert captured["line_items"] == [{"price": "price_1", "quantity": 1}]
    assert captured["customer_email"] == "buyer@example.com"
    assert captured["mode"] == "subscription"
    assert captured["subscription_data"] == {"metadata": {"productId": "p1", "storeId": "s1"}}
