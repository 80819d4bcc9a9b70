"""Business (tenant) model.

Every staff member, service, appointment and queue entry hangs off a
business. The `settings` blob holds operating hours and notification
toggles; always read it through `BusinessSettings.from_storage`.
"""

from sqlalchemy import Column, String, DateTime, Boolean
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.types import JSON
from sqlalchemy.orm import relationship
import uuid
from datetime import datetime
from app.core.database import Base


class Business(Base):
    __tablename__ = "businesses"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    slug = Column(String, unique=True, index=True, nullable=False)  # public routing key
    phone = Column(String, nullable=False)
    address = Column(String, nullable=True)
    timezone = Column(String, nullable=False, default="UTC")
    is_active = Column(Boolean, default=True)

    # {"hours": {"mon": {"open": "09:00", "close": "19:00", "closed": false}, ...},
    #  "notifications": {"email_confirmation": true, ...}}
    settings = Column(JSON, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    users = relationship("User", back_populates="business")
    staff = relationship("Staff", back_populates="business", cascade="all, delete-orphan")
    services = relationship("Service", back_populates="business", cascade="all, delete-orphan")
