from typing import Optional
from pydantic import BaseModel, UUID4
from datetime import date, time, datetime

from academy.schemas.pricing import Pricing


# Slot: Create (admin POST /admin/mock-interviews/slots)
class SlotCreate(BaseModel):
    slot_date: date
    start_time: time = time(10, 0)
    end_time: Optional[time] = None
    meeting_link: Optional[str] = None
    price: int = 0
    currency: Optional[str] = None
    capacity: Optional[int] = None          # omit or null for unlimited
    is_active: bool = True
    sort_order: int = 0


# Slot: Update (admin PATCH). Send capacity: null explicitly to make a slot unlimited.
class SlotUpdate(BaseModel):
    slot_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    meeting_link: Optional[str] = None
    price: Optional[int] = None
    currency: Optional[str] = None
    capacity: Optional[int] = None
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None


class SlotAvailability(BaseModel):
    remaining: Optional[int] = None
    remaining_text: str
    severity: str
    color: str
    bookable: bool


# Public slot listing (meeting link withheld)
class Slot(BaseModel):
    id: UUID4
    slot_date: date
    start_time: time
    end_time: Optional[time] = None
    price: int
    currency: str
    capacity: Optional[int] = None
    booked_count: int = 0
    is_active: bool = True
    sort_order: int = 0
    availability: SlotAvailability
    pricing: Pricing


class AdminSlot(Slot):
    meeting_link: Optional[str] = None
    created_at: Optional[datetime] = None


# Compact slot for booking responses
class SlotSummary(BaseModel):
    id: UUID4
    slot_date: date
    start_time: time
    end_time: Optional[time] = None

    class Config:
        from_attributes = True


class SlotDeleteResponse(BaseModel):
    id: UUID4
    result: str   # "deleted" | "deactivated"
