from __future__ import annotations

from fastapi import APIRouter

from api.v1.endpoints import appointments as appointments_endpoints
from api.v1.endpoints import catalog as catalog_endpoints


api_router = APIRouter()

api_router.include_router(appointments_endpoints.router)
api_router.include_router(catalog_endpoints.router)
