"""
Outbound notifications for bookings.

Email goes out over SMTP after the database change has committed and is best
effort: failures are logged and never undo the change. In-app notifications
are plain rows written inside the caller's transaction.
"""

import logging
import smtplib
from abc import ABC, abstractmethod
from email.message import EmailMessage
from typing import Any, Callable, List, Optional

from sqlalchemy.orm import Session

from academy.core.config import settings
from academy.core.exceptions import ExternalServiceError
from academy.models.notification import Notification

logger = logging.getLogger(__name__)

STATUS_LABELS = {
    "PENDING": "Pending",
    "CONFIRMED": "Confirmed",
    "CANCELLED": "Cancelled",
    "COMPLETED": "Completed",
}


def send_email(to_email: str, subject: str, body: str) -> None:
    """Send a plain-text email. Raises ExternalServiceError on any failure."""
    host = settings.SMTP_HOST
    from_email = settings.SMTP_FROM_EMAIL or settings.SMTP_USERNAME
    if not host or not from_email:
        raise ExternalServiceError("Email not configured")

    msg = EmailMessage()
    msg["From"] = from_email
    msg["To"] = to_email
    msg["Subject"] = subject
    msg.set_content(body)

    try:
        with smtplib.SMTP(host, settings.SMTP_PORT, timeout=10) as server:
            if settings.SMTP_USE_TLS:
                server.starttls()
            if settings.SMTP_USERNAME and settings.SMTP_PASSWORD:
                server.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
            server.send_message(msg)
    except (smtplib.SMTPException, OSError) as exc:
        raise ExternalServiceError(f"Email delivery failed: {exc}") from exc


def _slot_line(booking: Any) -> str:
    slot = booking.slot
    if slot is None:
        return ""
    slot_date = slot.slot_date.strftime("%a, %d %b %Y")
    return f"Slot: {slot_date} at {slot.start_time.strftime('%I:%M %p')}\n"


class Notifier(ABC):
    """Collaborator told about booking events."""

    @abstractmethod
    def booking_status_changed(self, booking: Any) -> None:
        ...

    @abstractmethod
    def link_available(self, booking: Any) -> None:
        ...


class EmailNotifier(Notifier):
    def booking_status_changed(self, booking: Any) -> None:
        label = STATUS_LABELS.get(booking.status, booking.status)
        body = (
            f"Hi {booking.name},\n\n"
            "Your mock interview booking status has been updated.\n\n"
            f"Status: {label}\n"
            f"{_slot_line(booking)}\n"
            f"Thank you,\n{settings.ORG_NAME}\n"
        )
        send_email(booking.email, f"Mock Interview – {label}", body)

    def link_available(self, booking: Any) -> None:
        body = (
            f"Hi {booking.name},\n\n"
            f"Your mock interview starts in {settings.LINK_LEAD_MINUTES} minutes.\n"
            f"{_slot_line(booking)}"
            f"Join here: {booking.slot.meeting_link}\n\n"
            f"Thank you,\n{settings.ORG_NAME}\n"
        )
        send_email(booking.email, "Your mock interview is starting soon", body)


def get_notifier() -> Notifier:
    return EmailNotifier()


def notify_safely(send: Callable[[Any], None], booking: Any) -> bool:
    """Run a notifier call, logging and swallowing any failure."""
    try:
        send(booking)
        return True
    except Exception:
        logger.warning("Notification failed for booking %s", booking.id, exc_info=True)
        return False


def add_in_app_notification(db: Session, booking: Any, title: str, message: str, type: str) -> None:
    """Queue an in-app notification for registered users; guests have no inbox."""
    if booking.user_id is None:
        return
    db.add(Notification(
        user_id=booking.user_id,
        title=title,
        message=message,
        type=type,
        reference_id=booking.id,
    ))


# ---------------------------------------------------------------------------
# Inbox
# ---------------------------------------------------------------------------


def inbox_query(db: Session, user_id: Any, unread_only: bool = False, type: Optional[str] = None):
    query = db.query(Notification).filter(Notification.user_id == user_id)
    if unread_only:
        query = query.filter(Notification.is_read == False)  # noqa: E712
    if type:
        query = query.filter(Notification.type == type)
    return query


def unread_count(db: Session, user_id: Any) -> int:
    return inbox_query(db, user_id, unread_only=True).count()


def mark_read(db: Session, user_id: Any, ids: Optional[List[Any]] = None) -> int:
    """Mark the given notifications (all when ``ids`` is None) read. Others' rows are never touched."""
    query = inbox_query(db, user_id, unread_only=True)
    if ids is not None:
        if not ids:
            return 0
        query = query.filter(Notification.id.in_(ids))
    updated = query.update({Notification.is_read: True}, synchronize_session="fetch")
    db.commit()
    return updated
