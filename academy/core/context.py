from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from academy.models.user import User


@dataclass(frozen=True)
class RequestContext:
    """Who is asking and when. Built per request and passed into services."""

    user: Optional[User] = None
    now: datetime = field(default_factory=datetime.now)

    @property
    def today(self) -> date:
        return self.now.date()

    @property
    def is_admin(self) -> bool:
        return self.user is not None and self.user.is_admin
