"""
Fulfillment dispatcher for verified payment webhook events.

Handles:
- checkout.session.completed -> record order, run product-type fulfillment
- invoice.payment_succeeded -> subscription active, refresh period end
- invoice.payment_failed -> subscription past_due
- customer.subscription.deleted -> subscription canceled

Record store failures are logged and swallowed per branch; the caller
acknowledges every verified event regardless.
"""
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional
import logging

from app.db.record_store import RecordStore
from app.models.order import OrderStatus
from app.models.subscription import SubscriptionStatus
from app.schemas.checkout import PurchaseMetadata
from app.schemas.webhook import (
    EventKind,
    classify_event,
    CheckoutSessionObject,
    CustomerDetails,
    InvoiceObject,
    SubscriptionObject,
)
from app.services.fulfillment import FulfillmentRegistry

logger = logging.getLogger(__name__)


def _period_end(epoch_seconds: Optional[int]) -> Optional[datetime]:
    if epoch_seconds is None:
        return None
    return datetime.fromtimestamp(epoch_seconds, tz=timezone.utc)


class WebhookDispatcher:
    def __init__(
        self,
        store: RecordStore,
        fulfillment: FulfillmentRegistry,
        idempotent_orders: bool = False,
    ):
        self.store = store
        self.fulfillment = fulfillment
        self.idempotent_orders = idempotent_orders
        self.handlers: Dict[EventKind, Callable[[Dict[str, Any]], None]] = {
            EventKind.CHECKOUT_COMPLETED: self._process_checkout_completed,
            EventKind.INVOICE_PAYMENT_SUCCEEDED: self._process_invoice_payment_succeeded,
            EventKind.INVOICE_PAYMENT_FAILED: self._process_invoice_payment_failed,
            EventKind.SUBSCRIPTION_DELETED: self._process_subscription_deleted,
        }

    def dispatch(self, event: Dict[str, Any]) -> Optional[EventKind]:
        """Run the handler for event. Returns the kind handled, or None if ignored."""
        event_type = event.get("type")
        data = (event.get("data") or {}).get("object") or {}
        kind = classify_event(event_type)

        if kind is None:
            logger.info(f"[WEBHOOK] Unhandled event type: {event_type}")
            return None

        logger.info(f"[WEBHOOK] Processing {event_type} (ID: {event.get('id')})")
        self.handlers[kind](data)
        return kind

    def _process_checkout_completed(self, data: Dict[str, Any]) -> None:
        session = CheckoutSessionObject.model_validate(data)
        purchase = PurchaseMetadata.from_metadata(session.metadata)
        if purchase is None:
            logger.error(f"[WEBHOOK] Missing metadata in checkout session {session.id}")
            return

        if self.idempotent_orders and session.payment_intent_id:
            existing = self.store.select_one(
                "orders", {"stripe_payment_intent_id": session.payment_intent_id}
            )
            if existing.ok and existing.data is not None:
                logger.info(
                    f"[WEBHOOK] Order for payment intent {session.payment_intent_id} already recorded - skipping"
                )
                return

        details = session.customer_details or CustomerDetails()
        customer_email = session.customer_email or details.email
        result = self.store.insert("orders", {
            "store_id": purchase.store_id,
            "product_id": purchase.product_id,
            "customer_email": customer_email or "",
            "customer_name": details.name or "",
            "amount": session.amount_total or 0,
            "status": OrderStatus.PAID.value,
            "stripe_payment_intent_id": session.payment_intent_id,
        })
        if not result.ok:
            logger.error(f"[WEBHOOK] Error creating order: {result.error}")
            return

        if customer_email:
            self._fulfill(purchase, customer_email)

    def _fulfill(self, purchase: PurchaseMetadata, customer_email: str) -> None:
        action = self.fulfillment.get(purchase.product_type)
        if action is None:
            logger.info(
                f"[WEBHOOK] No fulfillment for product type {purchase.product_type!r} (product {purchase.product_id})"
            )
            return
        try:
            action(purchase.product_id, customer_email)
        except Exception as e:
            # The order is already recorded; a redelivery would duplicate it
            logger.exception(
                f"[WEBHOOK] Fulfillment for {purchase.product_type} product {purchase.product_id} failed: {e}"
            )

    def _update_subscription(self, subscription_id: str, patch: Dict[str, Any]) -> None:
        result = self.store.update(
            "subscriptions", {"stripe_subscription_id": subscription_id}, patch
        )
        if not result.ok:
            logger.error(f"[WEBHOOK] Error updating subscription {subscription_id}: {result.error}")
        elif result.rowcount == 0:
            logger.info(f"[WEBHOOK] No subscription found for {subscription_id}")

    @staticmethod
    def _invoice_subscription_id(invoice: InvoiceObject) -> Optional[str]:
        if isinstance(invoice.subscription, str) and invoice.subscription:
            return invoice.subscription
        return None

    def _process_invoice_payment_succeeded(self, data: Dict[str, Any]) -> None:
        invoice = InvoiceObject.model_validate(data)
        subscription_id = self._invoice_subscription_id(invoice)
        if not subscription_id:
            return
        patch = {"status": SubscriptionStatus.ACTIVE.value}
        period_end = _period_end(invoice.period_end)
        if period_end is not None:
            patch["current_period_end"] = period_end
        self._update_subscription(subscription_id, patch)

    def _process_invoice_payment_failed(self, data: Dict[str, Any]) -> None:
        invoice = InvoiceObject.model_validate(data)
        subscription_id = self._invoice_subscription_id(invoice)
        if not subscription_id:
            return
        self._update_subscription(subscription_id, {"status": SubscriptionStatus.PAST_DUE.value})

    def _process_subscription_deleted(self, data: Dict[str, Any]) -> None:
        subscription = SubscriptionObject.model_validate(data)
        self._update_subscription(subscription.id, {"status": SubscriptionStatus.CANCELED.value})
