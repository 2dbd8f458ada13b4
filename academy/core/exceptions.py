"""
Domain exceptions for the bookings and pricing core.

Services raise these; the API layer renders them through a single
exception handler registered in ``academy.main``.
"""

from typing import Any, Dict, Optional

from fastapi import status


class DomainError(Exception):
    """Base exception for all domain errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(DomainError):
    """Malformed or missing input. Not retried."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(DomainError):
    """A referenced slot, booking or item does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(DomainError):
    """The request conflicts with existing data."""

    status_code = status.HTTP_409_CONFLICT


class CapacityExceededError(ConflictError):
    """Booking attempted against a full slot. Re-fetch availability before retrying."""

    def __init__(self, slot_id: Any, capacity: Optional[int] = None) -> None:
        super().__init__(
            "This slot is full",
            details={"slot_id": str(slot_id), "capacity": capacity},
        )


class InvalidStatusTransitionError(ConflictError):
    """A booking cannot move from its current status to the requested one."""

    def __init__(self, current: str, requested: str) -> None:
        super().__init__(
            f"Cannot change booking status from {current} to {requested}",
            details={"current": current, "requested": requested},
        )


class ExternalServiceError(DomainError):
    """A collaborator (mail server, etc.) failed."""

    status_code = status.HTTP_502_BAD_GATEWAY
