from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, status

from api.deps import get_engine, get_store
from core.timeutils import parse_day
from models.appointment import Appointment
from repositories.appointments import AppointmentStore
from schemas.appointments import AppointmentCreate, MessageResponse, Slot
from services.errors import NotFoundError, ValidationError
from services.scheduling import SchedulingEngine


logger = logging.getLogger(__name__)
router = APIRouter(prefix="/appointments", tags=["appointments"])


def _parse_date(value: str):
    try:
        return parse_day(value)
    except ValueError:
        raise ValidationError("Invalid date format")


def _parse_id(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ValidationError("Invalid appointment ID")


@router.get("", response_model=List[Appointment])
async def list_appointments(
    date: Optional[str] = None,
    store: AppointmentStore = Depends(get_store),
) -> List[Appointment]:
    if date:
        return await store.list_by_day(_parse_date(date))
    return await store.list_all()


@router.post("", response_model=Appointment, status_code=status.HTTP_201_CREATED)
async def create_appointment(
    payload: AppointmentCreate,
    engine: SchedulingEngine = Depends(get_engine),
) -> Appointment:
    return await engine.book(payload)


@router.get("/availability", response_model=List[Slot])
async def get_availability_without_date() -> List[Slot]:
    raise ValidationError("Date parameter is required")


@router.get("/availability/{date}", response_model=List[Slot])
async def get_availability(date: str, engine: SchedulingEngine = Depends(get_engine)) -> List[Slot]:
    return await engine.daily_slots(_parse_date(date))


@router.get("/{appointment_id}", response_model=Appointment)
async def get_appointment(appointment_id: str, store: AppointmentStore = Depends(get_store)) -> Appointment:
    appointment = await store.get(_parse_id(appointment_id))
    if appointment is None:
        raise NotFoundError()
    return appointment


@router.delete("/{appointment_id}", response_model=MessageResponse)
async def cancel_appointment(
    appointment_id: str,
    engine: SchedulingEngine = Depends(get_engine),
) -> MessageResponse:
    await engine.cancel(_parse_id(appointment_id))
    return MessageResponse(message="Appointment cancelled successfully")
