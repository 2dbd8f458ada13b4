"""
Time gate for meeting links.

A link opens ``lead_minutes`` before the scheduled start and closes at the
scheduled end. Evaluated on demand against ``now``; nothing is scheduled.
"""

import enum
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Optional

from academy.core.config import settings
from academy.models.booking import BookingStatus


class LinkState(str, enum.Enum):
    STARTING_SOON = "starting_soon"
    OPEN = "open"
    ENDED = "ended"


@dataclass(frozen=True)
class LinkAccess:
    state: LinkState
    can_access_link: bool
    opens_at: datetime
    closes_at: datetime
    seconds_until_open: int


def window_open(start: datetime, end: datetime, now: datetime, lead_minutes: Optional[int] = None) -> bool:
    lead = settings.LINK_LEAD_MINUTES if lead_minutes is None else lead_minutes
    return start - timedelta(minutes=lead) <= now <= end


def link_access(start: datetime, end: datetime, now: datetime, entitled: bool = True) -> LinkAccess:
    opens_at = start - timedelta(minutes=settings.LINK_LEAD_MINUTES)
    if now > end:
        state = LinkState.ENDED
    elif now >= opens_at:
        state = LinkState.OPEN
    else:
        state = LinkState.STARTING_SOON
    return LinkAccess(
        state=state,
        can_access_link=entitled and state == LinkState.OPEN,
        opens_at=opens_at,
        closes_at=end,
        seconds_until_open=max(0, int((opens_at - now).total_seconds())),
    )


def booking_link_access(booking: Any, now: datetime) -> LinkAccess:
    slot = booking.slot
    start = slot.scheduled_start()
    end = slot.scheduled_end(settings.DEFAULT_SESSION_MINUTES)
    return link_access(start, end, now, entitled=booking.status == BookingStatus.CONFIRMED.value)


def can_access_link(booking: Any, now: datetime) -> bool:
    """True only for confirmed bookings inside the link window."""
    return booking_link_access(booking, now).can_access_link
