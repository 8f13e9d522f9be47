from datetime import datetime

from schemas.appointments import AppointmentCreate


def make_candidate(start: str, end: str, **overrides) -> AppointmentCreate:
    data = {
        "service": "haircut",
        "startTime": datetime.fromisoformat(start),
        "endTime": datetime.fromisoformat(end),
        "customerName": "Sam Rivera",
        "email": "sam@example.com",
        "phone": "5551234567",
    }
    data.update(overrides)
    return AppointmentCreate(**data)
