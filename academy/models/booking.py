import uuid
import enum
from sqlalchemy import Column, String, DateTime, func, ForeignKey, Text, Uuid
from sqlalchemy.orm import relationship
from academy.db.session import Base


class BookingStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    slot_id = Column(Uuid(as_uuid=True), ForeignKey("slots.id"), nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=True, index=True)  # NULL for guests
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    phone = Column(String(20), nullable=False)
    message = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value, index=True)
    link_notified_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    slot = relationship("Slot", back_populates="bookings")
    user = relationship("User")
