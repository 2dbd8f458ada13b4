from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from academy.db.session import get_db
from academy.api.deps import get_current_user
from academy.core.exceptions import ValidationError
from academy.models.notification import Notification
from academy.models.user import User
from academy.schemas.common import PaginatedResponse, paginate
from academy.schemas.notification import InboxCounts, Notification as NotificationSchema, NotificationsRead
from academy.schemas.user import User as UserSchema, UserUpdate
from academy.services import notifications as inbox

router = APIRouter(prefix="/me", tags=["Me"])


@router.get("/", response_model=UserSchema)
def get_me(current_user: User = Depends(get_current_user)):
    return current_user


@router.patch("/", response_model=UserSchema)
def update_me(
    data: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    changes = data.model_dump(exclude_unset=True)
    if "full_name" in changes and not (changes["full_name"] or "").strip():
        raise ValidationError("Full name cannot be blank")
    for field, value in changes.items():
        setattr(current_user, field, value)
    db.commit()
    db.refresh(current_user)
    return current_user


@router.get("/notifications", response_model=PaginatedResponse[NotificationSchema])
def list_notifications(
    unread_only: bool = Query(False),
    type: Optional[str] = Query(None, description="booking_status | link_available"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Booking updates and meeting-link alerts, newest first."""
    query = inbox.inbox_query(db, current_user.id, unread_only, type)
    return paginate(query, page, limit, order_by=[Notification.created_at.desc()])


@router.get("/notifications/counts", response_model=InboxCounts)
def notification_counts(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return InboxCounts(unread=inbox.unread_count(db, current_user.id))


@router.patch("/notifications/read")
def mark_notifications_read(
    body: NotificationsRead,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return {"marked_read": inbox.mark_read(db, current_user.id, body.ids)}
