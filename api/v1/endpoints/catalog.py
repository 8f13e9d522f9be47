from __future__ import annotations

from typing import Dict

from fastapi import APIRouter

from services.catalog import SERVICES, ServiceInfo


router = APIRouter(tags=["services"])


@router.get("/services")
async def list_services() -> Dict[str, ServiceInfo]:
    return {kind.value: info for kind, info in SERVICES.items()}
