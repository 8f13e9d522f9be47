from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Protocol

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from core.timeutils import day_bounds, local_now, to_storage_precision
from models.appointment import Appointment
from schemas.appointments import AppointmentCreate
from services.errors import StorageFailure

from .base import BaseRepository


logger = logging.getLogger(__name__)


class AppointmentStore(Protocol):
    """Persistence contract shared by every appointment backend.

    Stores know nothing about scheduling rules: conflict prevention is the
    scheduling engine's job.
    """

    async def list_all(self) -> List[Appointment]: ...

    async def list_by_day(self, day: date) -> List[Appointment]: ...

    async def get(self, appointment_id: int) -> Optional[Appointment]: ...

    async def insert(self, candidate: AppointmentCreate) -> Appointment: ...

    async def delete(self, appointment_id: int) -> bool: ...


def _stored_fields(candidate: AppointmentCreate) -> Dict[str, Any]:
    # Every backend keeps timestamps at millisecond precision so reads match inserts
    fields = candidate.model_dump()
    fields["start_time"] = to_storage_precision(candidate.start_time)
    fields["end_time"] = to_storage_precision(candidate.end_time)
    fields["created_at"] = to_storage_precision(local_now())
    return fields


class InMemoryAppointmentStore:
    def __init__(self) -> None:
        self._appointments: Dict[int, Appointment] = {}
        self._current_id = 1

    async def list_all(self) -> List[Appointment]:
        return list(self._appointments.values())

    async def list_by_day(self, day: date) -> List[Appointment]:
        start_of_day, end_of_day = day_bounds(day)
        return [
            appt
            for appt in self._appointments.values()
            if start_of_day <= appt.start_time <= end_of_day
        ]

    async def get(self, appointment_id: int) -> Optional[Appointment]:
        return self._appointments.get(appointment_id)

    async def insert(self, candidate: AppointmentCreate) -> Appointment:
        appointment = Appointment(
            id=self._current_id,
            **_stored_fields(candidate),
        )
        self._appointments[appointment.id] = appointment
        self._current_id += 1
        return appointment

    async def delete(self, appointment_id: int) -> bool:
        return self._appointments.pop(appointment_id, None) is not None


class MongoAppointmentStore:
    """Appointments collection with integer ids drawn from a counters collection."""

    def __init__(self, db: AsyncIOMotorDatabase, collection: str = "appointments") -> None:
        self.repo = BaseRepository(db)
        self.collection = collection

    @staticmethod
    def _to_model(doc: Dict[str, Any]) -> Appointment:
        data = {k: v for k, v in doc.items() if k != "_id"}
        return Appointment(id=doc["_id"], **data)

    async def ensure_indexes(self) -> None:
        try:
            await self.repo.db[self.collection].create_index([("start_time", ASCENDING)])
        except PyMongoError as exc:
            logger.exception("storage.index_failed", extra={"collection": self.collection})
            raise StorageFailure() from exc

    async def list_all(self) -> List[Appointment]:
        try:
            docs = await self.repo.find_many(self.collection, {})
        except PyMongoError as exc:
            logger.exception("storage.error", extra={"op": "list_all"})
            raise StorageFailure() from exc
        return [self._to_model(doc) for doc in docs]

    async def list_by_day(self, day: date) -> List[Appointment]:
        start_of_day, end_of_day = day_bounds(day)
        day_filter = {"start_time": {"$gte": start_of_day, "$lte": end_of_day}}
        try:
            docs = await self.repo.find_many(self.collection, day_filter)
        except PyMongoError as exc:
            logger.exception("storage.error", extra={"op": "list_by_day", "day": day.isoformat()})
            raise StorageFailure() from exc
        return [self._to_model(doc) for doc in docs]

    async def get(self, appointment_id: int) -> Optional[Appointment]:
        try:
            doc = await self.repo.find_one(self.collection, {"_id": appointment_id})
        except PyMongoError as exc:
            logger.exception("storage.error", extra={"op": "get", "appointment_id": appointment_id})
            raise StorageFailure() from exc
        return self._to_model(doc) if doc else None

    async def insert(self, candidate: AppointmentCreate) -> Appointment:
        try:
            new_id = await self.repo.next_sequence(self.collection)
            doc = {"_id": new_id, **_stored_fields(candidate)}
            await self.repo.insert_one(self.collection, doc)
        except PyMongoError as exc:
            logger.exception("storage.error", extra={"op": "insert"})
            raise StorageFailure() from exc
        return self._to_model(doc)

    async def delete(self, appointment_id: int) -> bool:
        try:
            deleted = await self.repo.delete_one(self.collection, {"_id": appointment_id})
        except PyMongoError as exc:
            logger.exception("storage.error", extra={"op": "delete", "appointment_id": appointment_id})
            raise StorageFailure() from exc
        return deleted > 0
