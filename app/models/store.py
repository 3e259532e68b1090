from sqlalchemy import Column, String, DateTime, Text, Boolean, ForeignKey, JSON
import uuid
from datetime import datetime
from app.db.session import Base


class Store(Base):
    __tablename__ = "stores"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    theme = Column(JSON, nullable=True)
    settings = Column(JSON, nullable=True)
    is_published = Column(Boolean, default=False, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=True)
