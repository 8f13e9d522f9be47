"""
Scheduling engine

Decides whether a proposed [start, end) interval can be booked and derives the
free/busy slot grid for a day:
- overlap predicate (half-open, abutting intervals never conflict)
- business-hours containment
- conflict check against the store
- check-then-insert booking, serialized by a process-wide lock
- daily slot enumeration for availability display
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime, time, timedelta
from typing import List, Optional

from core.timeutils import to_local_naive
from models.appointment import Appointment
from repositories.appointments import AppointmentStore
from schemas.appointments import AppointmentCreate, Slot
from services.catalog import resolve_service
from services.errors import BusinessHoursViolation, NotFoundError, SchedulingConflict, UnknownServiceError


logger = logging.getLogger(__name__)

DEFAULT_OPEN_HOUR = 9
DEFAULT_CLOSE_HOUR = 19
DEFAULT_SLOT_MINUTES = 30


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """True when interval b intersects interval a.

    Three cases: b starts inside a, b ends inside a, or b covers a. Together
    they equal ``a_start < b_end and b_start < a_end``.
    """
    return (
        (b_start >= a_start and b_start < a_end)
        or (b_end > a_start and b_end <= a_end)
        or (b_start <= a_start and b_end >= a_end)
    )


def is_within_business_hours(
    start: datetime,
    end: datetime,
    *,
    open_hour: int = DEFAULT_OPEN_HOUR,
    close_hour: int = DEFAULT_CLOSE_HOUR,
) -> bool:
    # Wall-clock hours/minutes only; a start at close_hour is rejected
    if start.hour < open_hour or start.hour >= close_hour:
        return False
    if end.hour > close_hour or (end.hour == close_hour and end.minute > 0):
        return False
    return True


class SchedulingEngine:
    def __init__(
        self,
        store: AppointmentStore,
        *,
        open_hour: int = DEFAULT_OPEN_HOUR,
        close_hour: int = DEFAULT_CLOSE_HOUR,
        slot_minutes: int = DEFAULT_SLOT_MINUTES,
        timezone_name: Optional[str] = None,
    ) -> None:
        self.store = store
        self.open_hour = open_hour
        self.close_hour = close_hour
        self.slot_minutes = slot_minutes
        self.timezone_name = timezone_name
        self._booking_lock = asyncio.Lock()

    @property
    def business_hours_label(self) -> str:
        return f"{self.open_hour:02d}:00 and {self.close_hour:02d}:00"

    def to_local(self, candidate: AppointmentCreate) -> AppointmentCreate:
        """Pin the candidate's timestamps to this engine's local wall clock."""
        return candidate.model_copy(
            update={
                "start_time": to_local_naive(candidate.start_time, self.timezone_name),
                "end_time": to_local_naive(candidate.end_time, self.timezone_name),
            }
        )

    async def is_available(self, start: datetime, end: datetime) -> bool:
        """True iff no stored appointment overlaps [start, end).

        Compares against the whole store: an appointment that started on an
        earlier day may still run into the candidate. Callers must ensure
        ``start < end``; ordering is not validated here.
        """
        for appt in await self.store.list_all():
            if overlaps(appt.start_time, appt.end_time, start, end):
                return False
        return True

    async def book(self, candidate: AppointmentCreate) -> Appointment:
        if resolve_service(candidate.service) is None:
            raise UnknownServiceError()

        candidate = self.to_local(candidate)

        if not is_within_business_hours(
            candidate.start_time,
            candidate.end_time,
            open_hour=self.open_hour,
            close_hour=self.close_hour,
        ):
            logger.info(
                "appointments.outside_business_hours",
                extra={"start": candidate.start_time.isoformat(), "end": candidate.end_time.isoformat()},
            )
            raise BusinessHoursViolation(f"Appointments must be between {self.business_hours_label}")

        async with self._booking_lock:
            if not await self.is_available(candidate.start_time, candidate.end_time):
                logger.info(
                    "appointments.conflict",
                    extra={"start": candidate.start_time.isoformat(), "end": candidate.end_time.isoformat()},
                )
                raise SchedulingConflict()
            appointment = await self.store.insert(candidate)

        logger.info(
            "appointments.created",
            extra={"appointment_id": appointment.id, "service": appointment.service.value},
        )
        return appointment

    async def cancel(self, appointment_id: int) -> None:
        if not await self.store.delete(appointment_id):
            raise NotFoundError()
        logger.info("appointments.cancelled", extra={"appointment_id": appointment_id})

    async def daily_slots(self, day: date) -> List[Slot]:
        # Same-day bookings plus any earlier booking still running at midnight
        day_start = datetime.combine(day, time.min)
        day_end = day_start + timedelta(days=1)
        existing = [
            appt
            for appt in await self.store.list_all()
            if overlaps(day_start, day_end, appt.start_time, appt.end_time)
        ]
        width = timedelta(minutes=self.slot_minutes)

        slots: List[Slot] = []
        for hour in range(self.open_hour, self.close_hour):
            for minute in range(0, 60, self.slot_minutes):
                slot_start = datetime.combine(day, time(hour, minute))
                slot_end = slot_start + width

                # Don't include slots that would end after closing
                if slot_end.hour > self.close_hour:
                    break

                is_booked = any(
                    overlaps(appt.start_time, appt.end_time, slot_start, slot_end)
                    for appt in existing
                )
                slots.append(Slot(time=slot_start.strftime("%H:%M"), available=not is_booked))

        return slots
