from fastapi import Request
from typing import Optional
from app.core.config import Settings
from app.db.record_store import RecordStore
from app.services.fulfillment import FulfillmentRegistry
from app.services.payment_gateway import PaymentGateway


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_payment_gateway(request: Request) -> PaymentGateway:
    return request.app.state.payment_gateway


def get_record_store(request: Request) -> Optional[RecordStore]:
    """None when DATABASE_URL is not configured."""
    return request.app.state.record_store


def get_fulfillment_registry(request: Request) -> FulfillmentRegistry:
    return request.app.state.fulfillment
