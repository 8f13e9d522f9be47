"""Shared fixtures: every test runs against a fresh in-memory store."""

import pytest
from fastapi.testclient import TestClient

from main import create_app
from repositories.appointments import InMemoryAppointmentStore
from services.scheduling import SchedulingEngine


@pytest.fixture
def store():
    return InMemoryAppointmentStore()


@pytest.fixture
def engine(store):
    return SchedulingEngine(store)


@pytest.fixture
def client(store):
    app = create_app(store=store)
    with TestClient(app) as test_client:
        yield test_client
