"""Remaining-capacity display and bookability for slots."""

import enum
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional


class Severity(str, enum.Enum):
    FULL = "full"
    LOW = "low"
    MEDIUM = "medium"
    HEALTHY = "healthy"


SEVERITY_COLORS = {
    Severity.FULL: "red",
    Severity.LOW: "red",
    Severity.MEDIUM: "orange",
    Severity.HEALTHY: "green",
}

LOW_RATIO = 0.2
MEDIUM_RATIO = 0.5


@dataclass(frozen=True)
class Availability:
    remaining: Optional[int]  # None = unlimited
    remaining_text: str
    severity: Severity
    bookable: bool

    @property
    def color(self) -> str:
        return SEVERITY_COLORS[self.severity]


def remaining_capacity(capacity: Optional[int], booked_count: int) -> Optional[int]:
    if capacity is None:
        return None
    return max(0, capacity - (booked_count or 0))


def capacity_display(capacity: Optional[int], booked_count: int) -> tuple[Optional[int], str, Severity]:
    remaining = remaining_capacity(capacity, booked_count)
    if remaining is None:
        return None, "Unlimited", Severity.HEALTHY
    if remaining == 0:
        return 0, "Slot full", Severity.FULL

    ratio = remaining / capacity
    if ratio <= LOW_RATIO:
        severity = Severity.LOW
    elif ratio <= MEDIUM_RATIO:
        severity = Severity.MEDIUM
    else:
        severity = Severity.HEALTHY
    return remaining, f"{remaining} remaining", severity


def availability(slot: Any, today: date) -> Availability:
    """Capacity display plus bookability for ``slot`` as of ``today``."""
    remaining, text, severity = capacity_display(slot.capacity, slot.booked_count)
    has_room = remaining is None or remaining > 0
    bookable = has_room and bool(slot.is_active) and slot.slot_date >= today
    return Availability(
        remaining=remaining,
        remaining_text=text,
        severity=severity,
        bookable=bookable,
    )
