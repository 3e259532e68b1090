import json
import time

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.db.record_store import InMemoryRecordStore
from app.main import create_app
from app.services.fulfillment import FulfillmentRegistry
from app.services.payment_gateway import MockGateway, sign_payload

WEBHOOK_SECRET = "whsec_test_secret"


class RecordingFulfillment(FulfillmentRegistry):
    """Registry whose actions only record (product_type, product_id, email) calls."""

    def __init__(self):
        super().__init__()
        self.calls = []
        for product_type in ("digital", "booking", "membership"):
            self.register(product_type, self._recorder(product_type))

    def _recorder(self, product_type):
        def action(product_id, customer_email):
            self.calls.append((product_type, product_id, customer_email))
        return action


def make_settings(**overrides):
    values = dict(
        APP_URL="https://shop.example.com",
        PAYMENT_BACKEND="mock",
        STRIPE_SECRET_KEY=None,
        STRIPE_PUBLISHABLE_KEY="pk_test_123",
        STRIPE_WEBHOOK_SECRET=WEBHOOK_SECRET,
        DATABASE_URL="memory://",
        DATABASE_KEY=None,
        ORDER_IDEMPOTENCY_CHECK=False,
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


def signed(event, secret=WEBHOOK_SECRET, timestamp=None):
    """Serialize event and build a matching signature header."""
    payload = json.dumps(event).encode()
    return payload, sign_payload(payload, secret, timestamp or int(time.time()))


def checkout_completed_event(metadata=None, email="buyer@example.com", payment_intent="pi_123", amount=9900):
    return {
        "id": "evt_checkout_1",
        "type": "checkout.session.completed",
        "data": {
            "object": {
                "id": "cs_test_1",
                "customer_email": email,
                "customer_details": {"name": "Ada Buyer", "email": email},
                "amount_total": amount,
                "payment_intent": payment_intent,
                "metadata": metadata if metadata is not None else {
                    "productId": "p1", "storeId": "s1", "productType": "digital",
                },
            }
        },
    }


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def store():
    return InMemoryRecordStore()


@pytest.fixture
def gateway():
    return MockGateway()


@pytest.fixture
def fulfillment():
    return RecordingFulfillment()


@pytest.fixture
def client(settings, gateway, store, fulfillment):
    app = create_app(settings, payment_gateway=gateway, record_store=store, fulfillment=fulfillment)
    return TestClient(app)
