from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator
from pydantic.alias_generators import to_camel


class AppointmentCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    # Kept as a plain string; the service catalog decides which kinds are bookable
    service: str = Field(max_length=50)
    # Aware values are pinned to local wall-clock time by the scheduling engine
    start_time: datetime
    end_time: datetime
    customer_name: Optional[str] = Field(default=None, max_length=100)
    email: EmailStr = Field(max_length=255)
    phone: str = Field(min_length=10, max_length=20)

    @model_validator(mode="after")
    def _check_ordering(self) -> "AppointmentCreate":
        if (self.start_time.tzinfo is None) != (self.end_time.tzinfo is None):
            raise ValueError("startTime and endTime must both carry a UTC offset or neither")
        if self.start_time >= self.end_time:
            raise ValueError("endTime must be after startTime")
        return self


class Slot(BaseModel):
    time: str
    available: bool


class MessageResponse(BaseModel):
    message: str
