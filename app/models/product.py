from sqlalchemy import Column, String, DateTime, Text, Integer, Boolean, ForeignKey, JSON
import uuid
import enum
from datetime import datetime
from app.db.session import Base


class ProductType(str, enum.Enum):
    DIGITAL = "digital"
    BOOKING = "booking"
    MEMBERSHIP = "membership"
    CUSTOM = "custom"  # Custom offers are sold but have no automatic fulfillment


class Product(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    store_id = Column(String(36), ForeignKey("stores.id"), nullable=False, index=True)
    name = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    price = Column(Integer, nullable=True)  # Minor currency units
    type = Column(String, nullable=True)  # digital, booking, membership, custom
    settings = Column(JSON, nullable=True)
    is_active = Column(Boolean, default=True, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=True)
