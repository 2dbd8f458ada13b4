from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from academy.models.slot import Slot


def to_local_naive(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware datetime to naive local time; naive values pass through.

    Slot dates/times and sale windows are stored as timezone-naive local values.
    """
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def deactivate_past_slots(db: Session, now: Optional[datetime] = None) -> int:
    """
    Mark as inactive all slots dated before today.

    Today's slots stay active: a slot is bookable for its whole date.
    Returns the number of slots deactivated.
    """
    today = (now or datetime.now()).date()

    count = (
        db.query(Slot)
        .filter(
            Slot.is_active == True,  # noqa: E712
            Slot.slot_date < today,
        )
        .update({Slot.is_active: False}, synchronize_session=False)
    )
    db.commit()
    return count
