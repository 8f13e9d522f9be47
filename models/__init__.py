from .appointment import Appointment, ServiceKind

__all__ = [
    "Appointment",
    "ServiceKind",
]
