"""Checkout session endpoint tests"""
from fastapi.testclient import TestClient

from app.core.errors import GatewayUnavailable
from app.main import create_app
from app.services.payment_gateway import MockGateway, StripeGateway
from tests.conftest import make_settings

METADATA = {"productId": "p1", "storeId": "s1", "productType": "digital"}


class FailingGateway(MockGateway):
    def create_checkout_session(self, *args, **kwargs):
        raise RuntimeError("provider exploded")


class UnavailableGateway(MockGateway):
    def create_checkout_session(self, *args, **kwargs):
        raise GatewayUnavailable()


def _client(gateway):
    return TestClient(create_app(make_settings(), payment_gateway=gateway, record_store=None))


def test_checkout_returns_session_id_only(client, gateway):
    response = client.post("/checkout", json={"priceId": "price_123", "metadata": METADATA})
    assert response.status_code == 200
    body = response.json()
    assert list(body.keys()) == ["sessionId"]
    assert body["sessionId"] == gateway.sessions[0]["id"]


def test_checkout_missing_price_id(client, gateway):
    """Missing priceId is a 400 and the gateway is never called"""
    response = client.post("/checkout", json={"metadata": METADATA})
    assert response.status_code == 400
    assert response.json() == {"error": "Price ID is required"}
    assert gateway.sessions == []


def test_checkout_empty_price_id(client, gateway):
    response = client.post("/checkout", json={"priceId": ""})
    assert response.status_code == 400
    assert gateway.sessions == []


def test_checkout_default_redirect_urls(client, gateway):
    client.post("/checkout", json={"priceId": "price_123"})
    session = gateway.sessions[0]
    assert session["success_url"] == "https://shop.example.com/success"
    assert session["cancel_url"] == "https://shop.example.com/cancel"
    assert session["mode"] == "payment"


def test_checkout_forwards_request_fields(client, gateway):
    client.post("/checkout", json={
        "priceId": "price_123",
        "successUrl": "https://creator.example.com/thanks",
        "cancelUrl": "https://creator.example.com/back",
        "customerEmail": "buyer@example.com",
        "metadata": {**METADATA, "campaign": "spring"},
    })
    session = gateway.sessions[0]
    assert session["price_id"] == "price_123"
    assert session["success_url"] == "https://creator.example.com/thanks"
    assert session["cancel_url"] == "https://creator.example.com/back"
    assert session["customer_email"] == "buyer@example.com"
    assert session["metadata"] == {**METADATA, "campaign": "spring"}


def test_checkout_metadata_requires_product_and_store(client, gateway):
    response = client.post("/checkout", json={"priceId": "price_123", "metadata": {"productId": "p1"}})
    assert response.status_code == 400
    assert "storeId" in response.json()["error"]
    assert gateway.sessions == []


def test_checkout_subscription_mode(client, gateway):
    response = client.post("/checkout", json={"priceId": "price_monthly", "mode": "subscription", "metadata": METADATA})
    assert response.status_code == 200
    assert gateway.sessions[0]["mode"] == "subscription"


def test_checkout_rejects_unknown_mode(client, gateway):
    response = client.post("/checkout", json={"priceId": "price_123", "mode": "setup"})
    assert response.status_code == 400
    assert gateway.sessions == []


def test_checkout_gateway_not_configured():
    """An unconfigured provider is reported distinctly from other failures"""
    response = _client(StripeGateway(secret_key=None)).post("/checkout", json={"priceId": "price_123"})
    assert response.status_code == 503
    assert "not configured" in response.json()["error"]


def test_checkout_gateway_unavailable_raised_by_gateway():
    response = _client(UnavailableGateway()).post("/checkout", json={"priceId": "price_123"})
    assert response.status_code == 503
    assert response.json() == {"error": "Payment system is not configured"}


def test_checkout_generic_failure():
    response = _client(FailingGateway()).post("/checkout", json={"priceId": "price_123"})
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to create checkout session"}


def test_checkout_config_exposes_publishable_key(client):
    response = client.get("/checkout/config")
    assert response.status_code == 200
    assert response.json() == {"publishableKey": "pk_test_123"}
