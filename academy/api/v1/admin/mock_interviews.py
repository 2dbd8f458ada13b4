from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from academy.db.session import get_db
from academy.api.deps import get_current_admin_user, get_request_context
from academy.api.v1.public.mock_interviews import serialize_slot
from academy.core.context import RequestContext
from academy.models.booking import Booking
from academy.models.user import User
from academy.schemas.booking import Booking as BookingSchema, BookingStatusUpdate
from academy.schemas.common import PaginatedResponse, paginate
from academy.schemas.slot import AdminSlot, SlotCreate, SlotDeleteResponse, SlotUpdate
from academy.services import bookings as booking_service
from academy.services.booking_state import transition_booking_status
from academy.services.flash_sales import get_active_flash_sale
from academy.services.notifications import Notifier, get_notifier

router = APIRouter(prefix="/admin/mock-interviews", tags=["Admin - Mock Interviews"])


# ---------------------------------------------------------------------------
# Slots
# ---------------------------------------------------------------------------


@router.get("/slots", response_model=List[AdminSlot])
def list_slots(
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
    admin: User = Depends(get_current_admin_user),
):
    """Every slot, past and inactive included, with its meeting link."""
    sale = get_active_flash_sale(db, ctx.now)
    return [serialize_slot(s, ctx, sale, admin=True) for s in booking_service.list_all_slots(db)]


@router.post("/slots", response_model=AdminSlot, status_code=status.HTTP_201_CREATED)
def create_slot(
    data: SlotCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
    admin: User = Depends(get_current_admin_user),
):
    slot = booking_service.create_slot(db, data)
    return serialize_slot(slot, ctx, get_active_flash_sale(db, ctx.now), admin=True)


@router.patch("/slots/{slot_id}", response_model=AdminSlot)
def update_slot(
    slot_id: UUID,
    data: SlotUpdate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
    admin: User = Depends(get_current_admin_user),
):
    """Partial update. ``capacity: null`` makes the slot unlimited."""
    slot = booking_service.update_slot(db, slot_id, data)
    return serialize_slot(slot, ctx, get_active_flash_sale(db, ctx.now), admin=True)


@router.delete("/slots/{slot_id}", response_model=SlotDeleteResponse)
def delete_slot(
    slot_id: UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin_user),
):
    """Delete, or deactivate when the slot already has bookings."""
    result = booking_service.delete_slot(db, slot_id)
    return SlotDeleteResponse(id=slot_id, result=result)


# ---------------------------------------------------------------------------
# Bookings
# ---------------------------------------------------------------------------


@router.get("/bookings", response_model=PaginatedResponse[BookingSchema])
def list_bookings(
    slot_id: Optional[UUID] = Query(None),
    status: Optional[str] = Query(None, description="PENDING | CONFIRMED | CANCELLED | COMPLETED"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin_user),
):
    query = booking_service.admin_bookings_query(db, slot_id, status)
    return paginate(query, page, limit, order_by=[Booking.created_at.desc()])


@router.patch("/bookings/{booking_id}/status", response_model=BookingSchema)
def update_booking_status(
    booking_id: UUID,
    data: BookingStatusUpdate,
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
    admin: User = Depends(get_current_admin_user),
):
    """Move a booking through its lifecycle. The requester is emailed; mail failures are not fatal."""
    return transition_booking_status(db, booking_id, data.status, notifier=notifier)
