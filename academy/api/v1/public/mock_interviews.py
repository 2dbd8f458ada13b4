from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from academy.db.session import get_db
from academy.api.deps import get_request_context
from academy.core.context import RequestContext
from academy.models.slot import Slot
from academy.schemas.booking import Booking as BookingSchema, BookingAccess, BookingCreate
from academy.schemas.pricing import Pricing
from academy.schemas.slot import AdminSlot, Slot as SlotSchema, SlotAvailability
from academy.services import bookings as booking_service
from academy.services.availability import availability
from academy.services.flash_sales import get_active_flash_sale
from academy.services.pricing import resolve_pricing

router = APIRouter(prefix="/mock-interviews", tags=["Mock Interviews"])


def serialize_slot(slot: Slot, ctx: RequestContext, flash_sale=None, admin: bool = False):
    """Slot fields plus availability and resolved pricing."""
    state = availability(slot, ctx.today)
    schema = AdminSlot if admin else SlotSchema
    extra = {"meeting_link": slot.meeting_link, "created_at": slot.created_at} if admin else {}
    return schema(
        id=slot.id,
        slot_date=slot.slot_date,
        start_time=slot.start_time,
        end_time=slot.end_time,
        price=slot.price,
        currency=slot.currency,
        capacity=slot.capacity,
        booked_count=slot.booked_count,
        is_active=slot.is_active,
        sort_order=slot.sort_order,
        availability=SlotAvailability(
            remaining=state.remaining,
            remaining_text=state.remaining_text,
            severity=state.severity.value,
            color=state.color,
            bookable=state.bookable,
        ),
        pricing=Pricing.from_result(resolve_pricing(slot, flash_sale)),
        **extra,
    )


# ---------------------------------------------------------------------------
# Slots
# ---------------------------------------------------------------------------


@router.get("/slots", response_model=List[SlotSchema])
def list_slots(
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    """Upcoming active slots with remaining capacity and current price."""
    sale = get_active_flash_sale(db, ctx.now)
    return [serialize_slot(s, ctx, sale) for s in booking_service.list_upcoming_slots(db, ctx)]


# ---------------------------------------------------------------------------
# Bookings
# ---------------------------------------------------------------------------


@router.post("/bookings", response_model=BookingSchema, status_code=status.HTTP_201_CREATED)
def create_booking(
    data: BookingCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    """Book a seat. Guests may book; signed-in users get the booking on their account."""
    return booking_service.create_booking(db, ctx, data)


@router.get("/bookings/mine", response_model=List[BookingSchema])
def my_bookings(
    email: Optional[str] = Query(None, description="Guest lookup when not signed in"),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    return booking_service.list_my_bookings(db, ctx, email)


@router.get("/bookings/{booking_id}/access", response_model=BookingAccess)
def booking_access(
    booking_id: UUID,
    email: Optional[str] = Query(None, description="Booking email, for guests"),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    """Whether the meeting link is open for this booking right now.

    The link itself is only returned while the window is open and the
    booking is confirmed.
    """
    booking, access = booking_service.get_booking_access(db, ctx, booking_id, email)
    return BookingAccess(
        booking_id=booking.id,
        status=booking.status,
        state=access.state.value,
        can_access_link=access.can_access_link,
        meeting_link=booking.slot.meeting_link if access.can_access_link else None,
        opens_at=access.opens_at,
        closes_at=access.closes_at,
        seconds_until_open=access.seconds_until_open,
    )
