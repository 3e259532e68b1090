"""
Per-product-type fulfillment actions run after an order is recorded.

Actions are looked up by product type, so a new type only needs
registry.register("type", action).
"""
from typing import Callable, Dict, Optional
import logging

from app.models.product import ProductType

logger = logging.getLogger(__name__)

FulfillmentAction = Callable[[str, str], None]


def deliver_digital_product(product_id: str, customer_email: str) -> None:
    # TODO: send a signed, expiring download link once the mailer integration lands
    logger.info(f"[FULFILLMENT] Digital product delivery for {product_id} to {customer_email}")


def confirm_booking(product_id: str, customer_email: str) -> None:
    logger.info(f"[FULFILLMENT] Booking confirmation for {product_id} to {customer_email}")


def activate_membership(product_id: str, customer_email: str) -> None:
    logger.info(f"[FULFILLMENT] Membership activation for {product_id} to {customer_email}")


class FulfillmentRegistry:
    def __init__(self, actions: Optional[Dict[str, FulfillmentAction]] = None):
        self._actions: Dict[str, FulfillmentAction] = dict(actions or {})

    def register(self, product_type: str, action: FulfillmentAction) -> None:
        self._actions[str(product_type)] = action

    def get(self, product_type: Optional[str]) -> Optional[FulfillmentAction]:
        if not product_type:
            return None
        return self._actions.get(product_type)

    def __contains__(self, product_type) -> bool:
        return product_type in self._actions


def default_registry() -> FulfillmentRegistry:
    return FulfillmentRegistry({
        ProductType.DIGITAL.value: deliver_digital_product,
        ProductType.BOOKING.value: confirm_booking,
        ProductType.MEMBERSHIP.value: activate_membership,
    })
