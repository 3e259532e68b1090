from pydantic import BaseModel
from typing import Any, Dict, Optional
import enum


class EventKind(str, enum.Enum):
    CHECKOUT_COMPLETED = "checkout_completed"
    INVOICE_PAYMENT_SUCCEEDED = "invoice_payment_succeeded"
    INVOICE_PAYMENT_FAILED = "invoice_payment_failed"
    SUBSCRIPTION_DELETED = "subscription_deleted"


# Provider event type -> kind handled by the dispatcher
PROVIDER_EVENT_KINDS = {
    "checkout.session.completed": EventKind.CHECKOUT_COMPLETED,
    "invoice.payment_succeeded": EventKind.INVOICE_PAYMENT_SUCCEEDED,
    "invoice.payment_failed": EventKind.INVOICE_PAYMENT_FAILED,
    "customer.subscription.deleted": EventKind.SUBSCRIPTION_DELETED,
}


def classify_event(event_type: Optional[str]) -> Optional[EventKind]:
    return PROVIDER_EVENT_KINDS.get(event_type or "")


class CustomerDetails(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None


class CheckoutSessionObject(BaseModel):
    id: Optional[str] = None
    customer_email: Optional[str] = None
    customer_details: Optional[CustomerDetails] = None
    amount_total: Optional[int] = None
    # String id, or the object itself when expanded
    payment_intent: Optional[Any] = None
    metadata: Optional[Dict[str, Any]] = None

    @property
    def payment_intent_id(self) -> Optional[str]:
        if isinstance(self.payment_intent, dict):
            return self.payment_intent.get("id")
        return self.payment_intent or None


class InvoiceObject(BaseModel):
    id: Optional[str] = None
    # Expanded subscriptions arrive as objects; only string ids are looked up
    subscription: Optional[Any] = None
    period_end: Optional[int] = None


class SubscriptionObject(BaseModel):
    id: str
    status: Optional[str] = None
