from __future__ import annotations

from typing import Any, Optional


class BookingError(Exception):
    """Base class for errors reported back to the caller as JSON."""

    status_code: int = 400
    default_message: str = "Bad request"

    def __init__(self, message: Optional[str] = None, *, errors: Optional[list[Any]] = None) -> None:
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class ValidationError(BookingError):
    status_code = 400
    default_message = "Validation failed"


class UnknownServiceError(ValidationError):
    default_message = "Invalid service type"


class BusinessHoursViolation(BookingError):
    status_code = 400
    default_message = "Appointments must be between 09:00 and 19:00"


class SchedulingConflict(BookingError):
    status_code = 409
    default_message = "Time slot is already booked"


class NotFoundError(BookingError):
    status_code = 404
    default_message = "Appointment not found"


class StorageFailure(BookingError):
    status_code = 500
    default_message = "Internal server error"
