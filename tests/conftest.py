"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from parkbook.core.enums import SlotStatus
from parkbook.db.base import Base
from parkbook.db.models import Booking, ParkingSlot
from parkbook.db.session import get_session_factory
from parkbook.main import app
from parkbook.services import ReservationEngine
from parkbook.stores import OperationMonitor

# Fixed window used by most tests
START = datetime(2030, 5, 1, 9, 0, tzinfo=timezone.utc)
END = START + timedelta(hours=1)


@pytest.fixture(scope="function")
async def session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker, None]:
    """Fresh SQLite file database per test, with all tables created."""
    # A file database so concurrent sessions get their own connections
    test_engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'parkbook_test.db'}",
        connect_args={"timeout": 30},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

    await test_engine.dispose()


@pytest.fixture(scope="function")
def monitor(session_factory: async_sessionmaker) -> OperationMonitor:
    return OperationMonitor(session_factory)


@pytest.fixture(scope="function")
def reservation_engine(
    session_factory: async_sessionmaker, monitor: OperationMonitor
) -> ReservationEngine:
    return ReservationEngine(session_factory, monitor=monitor)


@pytest.fixture(scope="function")
def make_slot(session_factory: async_sessionmaker):
    """Factory fixture inserting a parking slot and returning its id."""

    async def _make_slot(number: str = "A1", status: SlotStatus = SlotStatus.AVAILABLE) -> int:
        async with session_factory() as session:
            slot = ParkingSlot(number=number, status=status)
            session.add(slot)
            await session.commit()
            return slot.id

    return _make_slot


@pytest.fixture(scope="function")
def booking_request():
    """Factory fixture for the raw input of a valid create-booking call."""

    def _booking_request(slot_id, /, **overrides) -> dict:
        fields = {
            "slot_id": slot_id,
            "vehicle_number": "ABC123",
            "start_time": START,
            "end_time": END,
            "total_cost": "5.00",
        }
        fields.update(overrides)
        return fields

    return _booking_request


@pytest.fixture(scope="function")
def assert_consistent(session_factory: async_sessionmaker):
    """Assert that every slot is occupied iff exactly one booking holds it."""

    async def _assert_consistent() -> None:
        async with session_factory() as session:
            slots = (await session.execute(select(ParkingSlot))).scalars().all()
            bookings = (await session.execute(select(Booking))).scalars().all()

        for slot in slots:
            holding = [b for b in bookings if b.slot_id == slot.id and b.status.holds_slot]
            if slot.status is SlotStatus.OCCUPIED:
                assert len(holding) == 1, f"slot {slot.number} occupied by {len(holding)} bookings"
            else:
                assert holding == [], f"slot {slot.number} available but held by {holding}"

    return _assert_consistent


@pytest.fixture(scope="function")
async def async_client(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client bound to the test database."""

    app.dependency_overrides[get_session_factory] = lambda: session_factory

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
