"""
Checkout session endpoint.
Validates the purchase request and hands it to the payment gateway.
"""
from fastapi import APIRouter, Depends
import logging

from app.api.deps import get_settings, get_payment_gateway
from app.core.config import Settings
from app.core.errors import InvalidRequest, GatewayUnavailable, StorefrontError, UnexpectedFailure
from app.schemas.checkout import (
    CheckoutRequest,
    CheckoutResponse,
    CheckoutConfigResponse,
    PurchaseMetadata,
)
from app.services.payment_gateway import PaymentGateway

logger = logging.getLogger(__name__)

router = APIRouter()

CHECKOUT_MODES = ("payment", "subscription")


def _validated_metadata(metadata):
    if metadata is None:
        return None
    purchase = PurchaseMetadata.from_metadata(metadata)
    if purchase is None:
        raise InvalidRequest("Metadata must include productId and storeId")
    return purchase.to_metadata()


@router.post("", response_model=CheckoutResponse)
def create_checkout(
    body: CheckoutRequest,
    settings: Settings = Depends(get_settings),
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    """
    Create a hosted checkout session and return its id.

    - 400 when priceId is missing or metadata lacks productId/storeId
    - 503 when the payment provider is not configured
    - 500 on any other failure
    """
    if not body.price_id:
        raise InvalidRequest("Price ID is required")
    if body.mode not in CHECKOUT_MODES:
        raise InvalidRequest(f"Unsupported checkout mode: {body.mode}")
    metadata = _validated_metadata(body.metadata)

    try:
        session = gateway.create_checkout_session(
            price_id=body.price_id,
            success_url=body.success_url or settings.default_success_url(),
            cancel_url=body.cancel_url or settings.default_cancel_url(),
            customer_email=body.customer_email,
            metadata=metadata,
            mode=body.mode,
        )
    except GatewayUnavailable:
        logger.error("[CHECKOUT] Payment gateway not configured")
        raise
    except StorefrontError:
        raise
    except Exception as e:
        logger.exception(f"[CHECKOUT] Error creating checkout session: {e}")
        raise UnexpectedFailure("Failed to create checkout session")

    logger.info(f"[CHECKOUT] Created session {session.id} for price {body.price_id}")
    return CheckoutResponse(sessionId=session.id)


@router.get("/config", response_model=CheckoutConfigResponse)
def get_checkout_config(settings: Settings = Depends(get_settings)):
    """Publishable key for the storefront's client-side payment SDK."""
    return CheckoutConfigResponse(publishableKey=settings.STRIPE_PUBLISHABLE_KEY)
