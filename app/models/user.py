from sqlalchemy import Column, String, DateTime, Text
import uuid
from datetime import datetime
from app.db.session import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    username = Column(String, nullable=True, unique=True, index=True)
    display_name = Column(String, nullable=True)
    bio = Column(Text, nullable=True)
    avatar_url = Column(Text, nullable=True)
    custom_domain = Column(String, nullable=True)
    stripe_account_id = Column(String, nullable=True)  # Connected account receiving payouts
    created_at = Column(DateTime, default=datetime.utcnow, nullable=True)
