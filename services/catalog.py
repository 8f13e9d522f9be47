from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel

from models.appointment import ServiceKind


class ServiceInfo(BaseModel):
    name: str
    duration: int  # minutes; advisory default for the booking form only
    price: int
    description: str


SERVICES: Dict[ServiceKind, ServiceInfo] = {
    ServiceKind.haircut: ServiceInfo(
        name="Signature Cut",
        duration=30,
        price=45,
        description="Precision haircut tailored to your face shape",
    ),
    ServiceKind.shave: ServiceInfo(
        name="Classic Shave",
        duration=30,
        price=35,
        description="Traditional straight razor shave with hot towel",
    ),
    ServiceKind.combo: ServiceInfo(
        name="The Full Experience",
        duration=60,
        price=65,
        description="Complete grooming: cut, shave, styling",
    ),
}


def resolve_service(key: str) -> Optional[ServiceKind]:
    try:
        kind = ServiceKind(key)
    except ValueError:
        return None
    return kind if kind in SERVICES else None
