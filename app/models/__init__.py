from app.models.user import User
from app.models.store import Store
from app.models.product import Product, ProductType
from app.models.order import Order, OrderStatus
from app.models.subscription import Subscription, SubscriptionStatus

__all__ = [
    "User", "Store", "Product", "ProductType",
    "Order", "OrderStatus", "Subscription", "SubscriptionStatus",
]
