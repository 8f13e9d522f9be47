from __future__ import annotations

from datetime import datetime
from enum import Enum

from typing import Optional

from .base import MongoModel


class ServiceKind(str, Enum):
    haircut = "haircut"
    shave = "shave"
    combo = "combo"


class Appointment(MongoModel):
    id: int
    service: ServiceKind
    start_time: datetime
    end_time: datetime
    customer_name: Optional[str] = None
    email: str
    phone: str
    created_at: datetime
