from sqlalchemy import Column, String, DateTime, Integer
import uuid
import enum
from datetime import datetime
from app.db.session import Base


class OrderStatus(str, enum.Enum):
    PAID = "paid"


class Order(Base):
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    # Opaque ids from checkout metadata; not constrained to the catalog tables
    store_id = Column(String, nullable=False, index=True)
    product_id = Column(String, nullable=False, index=True)
    customer_email = Column(String, nullable=False, default="")
    customer_name = Column(String, nullable=False, default="")
    amount = Column(Integer, nullable=False, default=0)  # Store in cents to avoid floating point issues
    status = Column(String, nullable=False, index=True)
    stripe_payment_intent_id = Column(String, nullable=True, index=True)  # Not unique: redeliveries are not deduplicated
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
