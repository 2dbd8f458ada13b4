import uuid
from datetime import datetime, timedelta
from sqlalchemy import Column, String, Boolean, Date, Time, DateTime, func, Integer, Text, Uuid, CheckConstraint
from sqlalchemy.orm import relationship
from academy.db.session import Base
from academy.models.catalog import ItemKind

class Slot(Base):
    __tablename__ = "slots"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    slot_date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=True)
    meeting_link = Column(Text, nullable=True)
    price = Column(Integer, nullable=False, default=0)  # minor currency units
    currency = Column(String(3), nullable=False, default="INR")
    capacity = Column(Integer, nullable=True)  # NULL = unlimited
    booked_count = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    bookings = relationship("Booking", back_populates="slot")

    __table_args__ = (
        CheckConstraint("capacity IS NULL OR capacity > 0", name="ck_slot_capacity_positive"),
        CheckConstraint("booked_count >= 0", name="ck_slot_booked_non_negative"),
        CheckConstraint("capacity IS NULL OR booked_count <= capacity", name="ck_slot_not_overbooked"),
        CheckConstraint("price >= 0", name="ck_slot_price_non_negative"),
    )

    # Pricing-resolver surface
    kind = ItemKind.MOCK_INTERVIEW
    sale_price = None

    @property
    def is_free(self) -> bool:
        return not self.price

    def scheduled_start(self) -> datetime:
        return datetime.combine(self.slot_date, self.start_time)

    def scheduled_end(self, default_minutes: int) -> datetime:
        """Slot end, or start + default_minutes when no end time is set."""
        if self.end_time is not None:
            end = datetime.combine(self.slot_date, self.end_time)
            # An end time before the start rolls over midnight
            if end <= self.scheduled_start():
                end += timedelta(days=1)
            return end
        return self.scheduled_start() + timedelta(minutes=default_minutes)
