from typing import List, Optional
from pydantic import BaseModel, UUID4
from datetime import datetime


class Notification(BaseModel):
    id: UUID4
    user_id: UUID4
    title: str
    message: str
    type: str                      # booking_status | link_available
    reference_id: Optional[UUID4] = None
    is_read: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# PATCH /me/notifications/read: omit ids to mark everything read
class NotificationsRead(BaseModel):
    ids: Optional[List[UUID4]] = None


class InboxCounts(BaseModel):
    unread: int
