"""Tests for services/scheduling.py: conflict check, booking and slot grid."""

import asyncio
from datetime import date, datetime

import pytest

from repositories.appointments import InMemoryAppointmentStore
from services.errors import BusinessHoursViolation, NotFoundError, SchedulingConflict, UnknownServiceError
from services.scheduling import SchedulingEngine

from tests.utils import make_candidate


DAY = date(2024, 1, 10)


class YieldingStore(InMemoryAppointmentStore):
    """Hands control back to the loop on every read, like a real database driver."""

    async def list_all(self):
        await asyncio.sleep(0)
        return await super().list_all()


async def test_is_available_on_empty_store(engine):
    candidate = make_candidate("2024-01-10T10:00", "2024-01-10T10:30")
    assert await engine.is_available(candidate.start_time, candidate.end_time)


@pytest.mark.parametrize(
    "start, end",
    [("10:15", "10:45"), ("09:45", "10:15"), ("09:30", "11:00"), ("10:00", "10:30")],
)
async def test_is_available_false_for_every_overlap_form(engine, store, start, end):
    await store.insert(make_candidate("2024-01-10T10:00", "2024-01-10T10:30"))
    candidate = make_candidate(f"2024-01-10T{start}", f"2024-01-10T{end}")
    assert not await engine.is_available(candidate.start_time, candidate.end_time)


async def test_is_available_ignores_other_days(engine, store):
    await store.insert(make_candidate("2024-01-11T10:00", "2024-01-11T10:30"))
    candidate = make_candidate("2024-01-10T10:00", "2024-01-10T10:30")
    assert await engine.is_available(candidate.start_time, candidate.end_time)


async def test_book_assigns_sequential_ids(engine):
    first = await engine.book(make_candidate("2024-01-10T10:00", "2024-01-10T10:30"))
    second = await engine.book(make_candidate("2024-01-10T10:30", "2024-01-10T11:00"))
    assert (first.id, second.id) == (1, 2)


async def test_book_rejects_conflict_without_inserting(engine, store):
    await engine.book(make_candidate("2024-01-10T10:00", "2024-01-10T10:30"))
    with pytest.raises(SchedulingConflict):
        await engine.book(make_candidate("2024-01-10T10:15", "2024-01-10T10:45"))
    assert len(await store.list_all()) == 1


async def test_book_rejects_outside_business_hours(engine, store):
    with pytest.raises(BusinessHoursViolation) as exc_info:
        await engine.book(make_candidate("2024-01-10T08:30", "2024-01-10T09:00"))
    assert exc_info.value.message == "Appointments must be between 09:00 and 19:00"

    with pytest.raises(BusinessHoursViolation):
        await engine.book(make_candidate("2024-01-10T18:45", "2024-01-10T19:15"))
    assert await store.list_all() == []


async def test_book_rejects_unknown_service(engine):
    with pytest.raises(UnknownServiceError):
        await engine.book(make_candidate("2024-01-10T10:00", "2024-01-10T10:30", service="beard-trim"))


async def test_concurrent_bookings_for_same_slot_yield_one_winner():
    store = YieldingStore()
    engine = SchedulingEngine(store)
    results = await asyncio.gather(
        engine.book(make_candidate("2024-01-10T10:00", "2024-01-10T10:30")),
        engine.book(make_candidate("2024-01-10T10:15", "2024-01-10T10:45")),
        return_exceptions=True,
    )
    conflicts = [r for r in results if isinstance(r, SchedulingConflict)]
    assert len(conflicts) == 1
    assert len(await store.list_all()) == 1


async def test_cancel(engine, store):
    booked = await engine.book(make_candidate("2024-01-10T10:00", "2024-01-10T10:30"))
    await engine.cancel(booked.id)
    assert await store.get(booked.id) is None
    with pytest.raises(NotFoundError):
        await engine.cancel(booked.id)


class TestDailySlots:
    async def test_empty_day_has_twenty_open_slots(self, engine):
        slots = await engine.daily_slots(DAY)
        times = [slot.time for slot in slots]

        assert len(slots) == 20
        assert times[0] == "09:00"
        assert times[-1] == "18:30"
        assert times == sorted(times)
        assert len(set(times)) == 20
        assert all(slot.available for slot in slots)

    async def test_booked_slot_is_unavailable(self, engine):
        await engine.book(make_candidate("2024-01-10T10:00", "2024-01-10T10:30"))
        slots = {slot.time: slot.available for slot in await engine.daily_slots(DAY)}

        assert slots["10:00"] is False
        assert slots["09:30"] is True
        assert slots["10:30"] is True
        assert sum(not available for available in slots.values()) == 1

    async def test_unaligned_booking_blocks_both_touched_slots(self, engine):
        await engine.book(make_candidate("2024-01-10T10:15", "2024-01-10T10:45"))
        slots = {slot.time: slot.available for slot in await engine.daily_slots(DAY)}

        assert slots["10:00"] is False
        assert slots["10:30"] is False
        assert slots["11:00"] is True

    async def test_long_booking_blocks_every_covered_slot(self, engine):
        await engine.book(make_candidate("2024-01-10T09:00", "2024-01-10T10:00", service="combo"))
        slots = {slot.time: slot.available for slot in await engine.daily_slots(DAY)}

        assert slots["09:00"] is False
        assert slots["09:30"] is False
        assert slots["10:00"] is True

    async def test_other_days_do_not_affect_grid(self, engine):
        await engine.book(make_candidate("2024-01-11T10:00", "2024-01-11T10:30"))
        assert all(slot.available for slot in await engine.daily_slots(DAY))

    async def test_custom_hours_change_the_grid(self, store):
        engine = SchedulingEngine(store, open_hour=10, close_hour=12)
        times = [slot.time for slot in await engine.daily_slots(DAY)]
        assert times == ["10:00", "10:30", "11:00", "11:30"]


class TestBookingsAcrossMidnight:
    async def test_multi_day_booking_conflicts_with_next_day_candidate(self, engine):
        await engine.book(make_candidate("2024-01-10T10:00", "2024-01-11T10:00", service="combo"))
        with pytest.raises(SchedulingConflict):
            await engine.book(make_candidate("2024-01-11T09:00", "2024-01-11T09:30"))

    async def test_overnight_booking_checked_from_the_next_day(self, engine, store):
        await store.insert(make_candidate("2024-01-10T23:00", "2024-01-11T09:30"))
        assert not await engine.is_available(
            datetime(2024, 1, 11, 9, 0), datetime(2024, 1, 11, 9, 30)
        )
        assert await engine.is_available(
            datetime(2024, 1, 11, 9, 30), datetime(2024, 1, 11, 10, 0)
        )

    async def test_overnight_booking_shows_on_the_next_day_grid(self, engine, store):
        await store.insert(make_candidate("2024-01-10T23:00", "2024-01-11T09:30"))
        slots = {slot.time: slot.available for slot in await engine.daily_slots(date(2024, 1, 11))}

        assert slots["09:00"] is False
        assert slots["09:30"] is True
        assert all(slot.available for slot in await engine.daily_slots(date(2024, 1, 10)))


async def test_book_converts_aware_times_with_engine_timezone(store):
    engine = SchedulingEngine(store, timezone_name="America/New_York")
    booked = await engine.book(
        make_candidate("2024-01-10T15:00:00+00:00", "2024-01-10T15:30:00+00:00")
    )
    assert booked.start_time == datetime(2024, 1, 10, 10, 0)
    assert booked.end_time == datetime(2024, 1, 10, 10, 30)
    assert booked.start_time.tzinfo is None
