"""Basic app tests"""
from fastapi.testclient import TestClient

from app.main import create_app
from tests.conftest import make_settings


def test_health_endpoint(client):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_root_endpoint(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["message"] == "Storefront API"


def test_app_builds_from_configuration_alone():
    """Gateway and store are picked from settings when not passed in"""
    app = create_app(make_settings())
    assert type(app.state.payment_gateway).__name__ == "MockGateway"
    assert type(app.state.record_store).__name__ == "InMemoryRecordStore"


def test_app_without_database_url_has_no_store():
    app = create_app(make_settings(DATABASE_URL=None))
    assert app.state.record_store is None


def test_stripe_backend_selected_by_default():
    app = create_app(make_settings(PAYMENT_BACKEND="stripe", STRIPE_SECRET_KEY="sk_test_123"))
    gateway = app.state.payment_gateway
    assert type(gateway).__name__ == "StripeGateway"
    assert gateway.configured


def test_cors_headers_on_error_response(client):
    """Errors still carry CORS headers for allowed origins"""
    response = client.post("/checkout", json={}, headers={"Origin": "http://localhost:3000"})
    assert response.status_code == 400
    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"


def test_malformed_json_body_is_a_client_error():
    client = TestClient(create_app(make_settings()))
    response = client.post("/checkout", content=b"{not json", headers={"Content-Type": "application/json"})
    assert response.status_code == 400
    assert "error" in response.json()
