"""Walk-in queue ticket model."""

from sqlalchemy import Column, String, DateTime, Integer, ForeignKey, Enum as SQLEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import uuid
from datetime import datetime
import enum
from app.core.database import Base


class QueueStatus(str, enum.Enum):
    WAITING = "waiting"
    CALLED = "called"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class QueueEntry(Base):
    __tablename__ = "queue_entries"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    business_id = Column(UUID(as_uuid=True), ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False, index=True)
    customer_name = Column(String, nullable=False)
    customer_phone = Column(String, nullable=False)
    service_id = Column(UUID(as_uuid=True), ForeignKey("services.id"), nullable=False)

    # Sequential per business per day (day = business-local date of created_at).
    # Not unique at the storage layer: concurrent joins may share a number.
    queue_number = Column(Integer, nullable=False)
    status = Column(
        SQLEnum(
            QueueStatus,
            name="queue_status",
            values_callable=lambda e: [m.value for m in e],
        ),
        default=QueueStatus.WAITING,
        nullable=False,
        index=True,
    )
    estimated_wait_minutes = Column(Integer, nullable=True)
    notified_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)  # UTC

    # Relationships
    business = relationship("Business")
    service = relationship("Service")
