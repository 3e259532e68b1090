"""
Payment provider webhook handler.
Verifies webhook signatures and dispatches events to order fulfillment.
"""
from fastapi import APIRouter, Request, Header, Depends
from starlette.concurrency import run_in_threadpool
from typing import Optional
import logging

from app.api.deps import get_settings, get_payment_gateway, get_record_store, get_fulfillment_registry
from app.core.config import Settings
from app.core.errors import InvalidRequest, GatewayUnavailable, StoreUnavailable, UnexpectedFailure
from app.db.record_store import RecordStore
from app.services.fulfillment import FulfillmentRegistry
from app.services.payment_gateway import PaymentGateway
from app.services.webhook_processor import WebhookDispatcher

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/payment")
@router.post("/stripe", include_in_schema=False)
async def payment_webhook(
    request: Request,
    settings: Settings = Depends(get_settings),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    store: Optional[RecordStore] = Depends(get_record_store),
    fulfillment: FulfillmentRegistry = Depends(get_fulfillment_registry),
    stripe_signature: Optional[str] = Header(None, alias="stripe-signature"),
    signature: Optional[str] = Header(None),
):
    """
    Handle payment provider webhook events.

    - 400 when the signature header is missing or does not verify
    - 503 when the payment gateway or the database is not configured
    - 200 {"received": true} for every verified event, even if fulfillment failed
    """
    signature_header = stripe_signature or signature
    if not signature_header:
        raise InvalidRequest("Missing stripe-signature header")

    if not gateway.configured or not settings.STRIPE_WEBHOOK_SECRET:
        logger.error("[WEBHOOK] Payment gateway or STRIPE_WEBHOOK_SECRET not configured")
        raise GatewayUnavailable("Stripe is not configured")

    if store is None:
        logger.error("[WEBHOOK] DATABASE_URL not configured")
        raise StoreUnavailable()

    # Raw body is required for signature verification
    body = await request.body()

    try:
        event = gateway.verify_webhook_signature(body, signature_header, settings.STRIPE_WEBHOOK_SECRET)
    except Exception as e:
        logger.error(f"[WEBHOOK] Webhook signature verification failed: {e}")
        raise

    dispatcher = WebhookDispatcher(
        store,
        fulfillment,
        idempotent_orders=settings.ORDER_IDEMPOTENCY_CHECK,
    )
    try:
        # Record store calls block; keep them off the event loop
        await run_in_threadpool(dispatcher.dispatch, event)
    except Exception as e:
        logger.exception(
            f"[WEBHOOK] Error processing event {event.get('id')} ({event.get('type')}): {e}"
        )
        raise UnexpectedFailure("Webhook processing failed")

    return {"received": True}
