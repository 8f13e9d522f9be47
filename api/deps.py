from __future__ import annotations

from fastapi import Request

from repositories.appointments import AppointmentStore
from services.scheduling import SchedulingEngine


def get_store(request: Request) -> AppointmentStore:
    return request.app.state.store


def get_engine(request: Request) -> SchedulingEngine:
    return request.app.state.engine
