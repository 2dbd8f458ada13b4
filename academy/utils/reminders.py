import asyncio
import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from academy.core.config import settings
from academy.db.session import SessionLocal
from academy.models.booking import Booking, BookingStatus
from academy.models.slot import Slot
from academy.services.link_gate import can_access_link
from academy.services.notifications import Notifier, add_in_app_notification, get_notifier, notify_safely
from academy.utils.timeslots import deactivate_past_slots

logger = logging.getLogger(__name__)


def send_link_reminders(db: Session, notifier: Notifier, now: Optional[datetime] = None) -> int:
    """
    Tell every confirmed booking whose link window has opened, exactly once.

    A booking is marked as notified even when the email fails, so a broken
    mail server does not cause a retry storm; the in-app notice still lands.
    Returns the number of bookings marked.
    """
    now = now or datetime.now()
    candidates = (
        db.query(Booking)
        .join(Slot, Booking.slot_id == Slot.id)
        .options(joinedload(Booking.slot))
        .filter(
            Booking.status == BookingStatus.CONFIRMED.value,
            Booking.link_notified_at == None,  # noqa: E711
            Slot.slot_date <= (now + timedelta(minutes=settings.LINK_LEAD_MINUTES)).date(),
        )
        .all()
    )

    due = [b for b in candidates if can_access_link(b, now)]
    for booking in due:
        booking.link_notified_at = now
        add_in_app_notification(
            db,
            booking,
            title="Meeting link available",
            message="Your mock interview is about to start. Open your booking to join.",
            type="link_available",
        )
    db.commit()

    for booking in due:
        notify_safely(notifier.link_available, booking)
    return len(due)


def run_reminders_once() -> None:
    """One pass: retire past slots, then send due link reminders."""
    db = SessionLocal()
    try:
        count = deactivate_past_slots(db)
        if count:
            logger.info("Deactivated %d past slot(s).", count)
        sent = send_link_reminders(db, get_notifier())
        if sent:
            logger.info("Sent %d meeting-link reminder(s).", sent)
    finally:
        db.close()


async def reminder_loop() -> None:
    """Background task. Passes run in a worker thread so SMTP sends never block the event loop."""
    while True:
        try:
            await asyncio.to_thread(run_reminders_once)
        except Exception:
            logger.exception("Error during reminder run.")
        await asyncio.sleep(settings.REMINDER_INTERVAL_SECONDS)
