"""
Booking lifecycle.

    PENDING ──> CONFIRMED ──> COMPLETED
       │            │
       │            └──────> CANCELLED
       ├──────────────────> COMPLETED
       └──────────────────> CANCELLED

CANCELLED and COMPLETED are terminal. Transitions are admin-driven; each one
notifies the requester best effort.
"""

import logging
from typing import Any, Optional

from sqlalchemy.orm import Session, joinedload

from academy.core.exceptions import InvalidStatusTransitionError, NotFoundError, ValidationError
from academy.models.booking import Booking, BookingStatus
from academy.models.slot import Slot
from academy.services.notifications import (
    Notifier,
    STATUS_LABELS,
    add_in_app_notification,
    notify_safely,
)

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({
        BookingStatus.CONFIRMED,
        BookingStatus.CANCELLED,
        BookingStatus.COMPLETED,
    }),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED}),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.COMPLETED: frozenset(),
}


def parse_status(value: Any) -> BookingStatus:
    try:
        return BookingStatus(getattr(value, "value", value))
    except ValueError:
        raise ValidationError(
            "Invalid status",
            details={"allowed": [s.value for s in BookingStatus]},
        ) from None


def can_transition(current: BookingStatus, new: BookingStatus) -> bool:
    return new in ALLOWED_TRANSITIONS[current]


def release_seat(db: Session, slot_id: Any) -> None:
    db.query(Slot).filter(Slot.id == slot_id, Slot.booked_count > 0).update(
        {Slot.booked_count: Slot.booked_count - 1},
        synchronize_session=False,
    )


def transition_booking_status(
    db: Session,
    booking_id: Any,
    new_status: Any,
    notifier: Optional[Notifier] = None,
) -> Booking:
    """Move a booking to ``new_status`` and notify the requester.

    Raises:
        ValidationError: ``new_status`` is not a booking status.
        NotFoundError: the booking does not exist.
        InvalidStatusTransitionError: the move is not allowed from the current status.
    """
    target = parse_status(new_status)

    booking = (
        db.query(Booking)
        .options(joinedload(Booking.slot))
        .filter(Booking.id == booking_id)
        .first()
    )
    if not booking:
        raise NotFoundError("Booking not found")

    current = BookingStatus(booking.status)
    if current == target:
        return booking
    if not can_transition(current, target):
        raise InvalidStatusTransitionError(current.value, target.value)

    booking.status = target.value
    if target == BookingStatus.CANCELLED:
        release_seat(db, booking.slot_id)

    label = STATUS_LABELS[target.value]
    add_in_app_notification(
        db,
        booking,
        title=f"Booking {label}",
        message=f"Your mock interview booking is now {label.lower()}.",
        type="booking_status",
    )
    db.commit()
    db.refresh(booking)
    logger.info("Booking %s moved %s -> %s", booking.id, current.value, target.value)

    if notifier is not None:
        notify_safely(notifier.booking_status_changed, booking)
    return booking
