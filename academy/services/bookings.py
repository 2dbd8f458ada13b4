"""
Mock-interview slots and bookings.

Capacity is enforced at write time with a single conditional UPDATE on the
slot row, so two requests racing for the last seat cannot both succeed.
"""

import logging
from typing import Any, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from academy.core.config import settings
from academy.core.context import RequestContext
from academy.core.exceptions import CapacityExceededError, NotFoundError, ValidationError
from academy.models.booking import Booking, BookingStatus
from academy.models.slot import Slot
from academy.schemas.booking import BookingCreate
from academy.schemas.slot import SlotCreate, SlotUpdate
from academy.services.link_gate import LinkAccess, booking_link_access

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Slots
# ---------------------------------------------------------------------------


def _validate_slot_values(price: Optional[int], capacity: Optional[int], booked_count: int = 0) -> None:
    if price is not None and price < 0:
        raise ValidationError("Price cannot be negative")
    if capacity is not None:
        if capacity <= 0:
            raise ValidationError("Capacity must be a positive integer, or null for unlimited")
        if capacity < booked_count:
            raise ValidationError(
                f"Capacity cannot be lower than the {booked_count} existing booking(s)",
                details={"booked_count": booked_count},
            )


def list_upcoming_slots(db: Session, ctx: RequestContext) -> List[Slot]:
    """Active slots dated today or later, in display order."""
    return (
        db.query(Slot)
        .filter(Slot.is_active == True, Slot.slot_date >= ctx.today)  # noqa: E712
        .order_by(Slot.slot_date, Slot.sort_order, Slot.start_time)
        .all()
    )


def list_all_slots(db: Session) -> List[Slot]:
    return db.query(Slot).order_by(Slot.slot_date, Slot.sort_order, Slot.start_time).all()


def get_slot(db: Session, slot_id: UUID) -> Slot:
    slot = db.query(Slot).filter(Slot.id == slot_id).first()
    if not slot:
        raise NotFoundError("Slot not found")
    return slot


def create_slot(db: Session, data: SlotCreate) -> Slot:
    _validate_slot_values(data.price, data.capacity)
    slot = Slot(
        slot_date=data.slot_date,
        start_time=data.start_time,
        end_time=data.end_time,
        meeting_link=data.meeting_link or None,
        price=data.price,
        currency=data.currency or settings.DEFAULT_CURRENCY,
        capacity=data.capacity,
        is_active=data.is_active,
        sort_order=data.sort_order,
    )
    db.add(slot)
    db.commit()
    db.refresh(slot)
    return slot


def update_slot(db: Session, slot_id: UUID, data: SlotUpdate) -> Slot:
    slot = get_slot(db, slot_id)
    changes = data.model_dump(exclude_unset=True)

    price = changes.get("price", slot.price)
    if price is None:
        raise ValidationError("Price cannot be null")
    capacity = changes["capacity"] if "capacity" in changes else slot.capacity
    _validate_slot_values(price, capacity, slot.booked_count)

    for field, value in changes.items():
        if field in ("slot_date", "start_time", "is_active", "sort_order", "currency") and value is None:
            continue
        if field == "meeting_link":
            value = value or None
        setattr(slot, field, value)

    db.commit()
    db.refresh(slot)
    return slot


def delete_slot(db: Session, slot_id: UUID) -> str:
    """Delete a slot, or soft-disable it when bookings reference it."""
    slot = get_slot(db, slot_id)
    has_bookings = db.query(Booking.id).filter(Booking.slot_id == slot.id).first() is not None
    if has_bookings:
        slot.is_active = False
        db.commit()
        logger.info("Slot %s has bookings; deactivated instead of deleting", slot.id)
        return "deactivated"
    db.delete(slot)
    db.commit()
    return "deleted"


# ---------------------------------------------------------------------------
# Bookings
# ---------------------------------------------------------------------------


def reserve_seat(db: Session, slot_id: UUID) -> bool:
    """Take one seat if the slot is active and has room. Atomic per row."""
    updated = (
        db.query(Slot)
        .filter(
            Slot.id == slot_id,
            Slot.is_active == True,  # noqa: E712
            or_(Slot.capacity == None, Slot.booked_count < Slot.capacity),  # noqa: E711
        )
        .update({Slot.booked_count: Slot.booked_count + 1}, synchronize_session=False)
    )
    return updated == 1


def _required(value: Optional[str], field: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError("Slot, name, email and phone are required", details={"field": field})
    return cleaned


def create_booking(db: Session, ctx: RequestContext, data: BookingCreate) -> Booking:
    """Book a seat on a slot for a guest or the signed-in user.

    Raises:
        ValidationError: a required field is blank or the slot date has passed.
        NotFoundError: the slot does not exist or is inactive.
        CapacityExceededError: the slot has no seats left.
    """
    name = _required(data.name, "name")
    email = _required(str(data.email), "email")
    phone = _required(data.phone, "phone")

    slot = db.query(Slot).filter(Slot.id == data.slot_id, Slot.is_active == True).first()  # noqa: E712
    if not slot:
        raise NotFoundError("Slot not found or inactive")
    if slot.slot_date < ctx.today:
        raise ValidationError("This slot has already passed")

    try:
        if not reserve_seat(db, slot.id):
            db.refresh(slot)
            if not slot.is_active:
                raise NotFoundError("Slot not found or inactive")
            raise CapacityExceededError(slot.id, slot.capacity)

        booking = Booking(
            slot_id=slot.id,
            user_id=ctx.user.id if ctx.user else None,
            name=name,
            email=email,
            phone=phone,
            message=data.message.strip() if data.message and data.message.strip() else None,
            status=BookingStatus.PENDING.value,
        )
        db.add(booking)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(booking)
    logger.info("Booking %s created on slot %s", booking.id, slot.id)
    return booking


def list_my_bookings(db: Session, ctx: RequestContext, email: Optional[str] = None) -> List[Booking]:
    """Bookings of the signed-in user (including guest bookings under their email), else those made with ``email``."""
    query = db.query(Booking).options(joinedload(Booking.slot))
    if ctx.user:
        query = query.filter(or_(
            Booking.user_id == ctx.user.id,
            func.lower(Booking.email) == ctx.user.email.lower(),
        ))
    elif email and email.strip():
        query = query.filter(Booking.email == email.strip())
    else:
        return []
    return query.order_by(Booking.created_at.desc()).all()


def admin_bookings_query(db: Session, slot_id: Optional[UUID] = None, status: Optional[str] = None):
    query = db.query(Booking).options(joinedload(Booking.slot))
    if slot_id:
        query = query.filter(Booking.slot_id == slot_id)
    if status:
        query = query.filter(Booking.status == status.upper())
    return query


def get_booking_access(
    db: Session,
    ctx: RequestContext,
    booking_id: UUID,
    email: Optional[str] = None,
) -> Tuple[Booking, LinkAccess]:
    """Link-gate state for a booking the requester owns (by account or email)."""
    booking = (
        db.query(Booking)
        .options(joinedload(Booking.slot))
        .filter(Booking.id == booking_id)
        .first()
    )
    if not booking or not _owns(ctx, booking, email):
        raise NotFoundError("Booking not found")
    return booking, booking_link_access(booking, ctx.now)


def _owns(ctx: RequestContext, booking: Any, email: Optional[str]) -> bool:
    if ctx.is_admin:
        return True
    if ctx.user is not None and (
        booking.user_id == ctx.user.id or booking.email.lower() == ctx.user.email.lower()
    ):
        return True
    return bool(email) and booking.email.lower() == email.strip().lower()
