from sqlalchemy import Column, String, DateTime
import uuid
import enum
from datetime import datetime
from app.db.session import Base


class SubscriptionStatus(str, enum.Enum):
    ACTIVE = "active"
    PAST_DUE = "past_due"
    CANCELED = "canceled"


class Subscription(Base):
    __tablename__ = "subscriptions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    stripe_subscription_id = Column(String, nullable=False, unique=True, index=True)
    store_id = Column(String, nullable=True, index=True)
    product_id = Column(String, nullable=True, index=True)
    customer_email = Column(String, nullable=True)
    status = Column(String, nullable=False, index=True)  # active, past_due, canceled
    current_period_end = Column(DateTime(timezone=True), nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
