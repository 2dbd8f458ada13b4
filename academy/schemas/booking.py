from typing import Optional
from pydantic import BaseModel, EmailStr, UUID4
from datetime import datetime

from academy.schemas.slot import SlotSummary


# Booking: Create (POST /mock-interviews/bookings), guests allowed
class BookingCreate(BaseModel):
    slot_id: UUID4
    name: str
    email: EmailStr
    phone: str
    message: Optional[str] = None


class Booking(BaseModel):
    id: UUID4
    slot_id: UUID4
    name: str
    email: str
    phone: str
    message: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None
    slot: Optional[SlotSummary] = None

    class Config:
        from_attributes = True


# Booking: Admin status change (PATCH /admin/mock-interviews/bookings/{id}/status)
class BookingStatusUpdate(BaseModel):
    status: str


# Link gate result (GET /mock-interviews/bookings/{id}/access)
class BookingAccess(BaseModel):
    booking_id: UUID4
    status: str
    state: str                       # "starting_soon" | "open" | "ended"
    can_access_link: bool
    meeting_link: Optional[str] = None
    opens_at: datetime
    closes_at: datetime
    seconds_until_open: int
