from __future__ import annotations

# Re-export the static catalog for convenient imports
from .catalog import SERVICES, ServiceInfo, resolve_service

__all__ = ["SERVICES", "ServiceInfo", "resolve_service"]
