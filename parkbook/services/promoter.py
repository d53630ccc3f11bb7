"""
Time-based booking promoter.

Advances bookings along upcoming -> active -> completed as their window
opens and closes. Completing a booking releases its slot in the same
transaction, so the slot/booking agreement holds across the transition.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker

from parkbook.core.enums import HOLDING_STATUSES, BookingStatus, SlotStatus
from parkbook.core.errors import ConflictError, ReservationError
from parkbook.db.models import Booking
from parkbook.services.transaction import transaction
from parkbook.stores import BookingLedger, OperationMonitor, SlotStore

logger = logging.getLogger(__name__)

PROMOTE_BOOKINGS = "promote_bookings"


async def _due_ids(session_factory: async_sessionmaker, *conditions) -> List[int]:
    async with transaction(session_factory, PROMOTE_BOOKINGS) as session:
        result = await session.execute(select(Booking.id).where(*conditions).order_by(Booking.id))
        return list(result.scalars().all())


async def _activate(session_factory: async_sessionmaker, booking_id: int) -> bool:
    async with transaction(session_factory, PROMOTE_BOOKINGS) as session:
        return await BookingLedger(session).update_status(booking_id, BookingStatus.ACTIVE)


async def _complete(session_factory: async_sessionmaker, booking_id: int) -> bool:
    async with transaction(session_factory, PROMOTE_BOOKINGS) as session:
        ledger = BookingLedger(session)
        booking = await ledger.get(booking_id)
        slot_id = booking.slot_id
        if not await ledger.update_status(booking_id, BookingStatus.COMPLETED):
            return False
        if not await SlotStore(session).compare_and_set_status(
            slot_id, SlotStatus.OCCUPIED, SlotStatus.AVAILABLE
        ):
            raise ConflictError(
                f"Slot {slot_id} is not occupied by booking {booking_id}",
                operation=PROMOTE_BOOKINGS,
                reason="slot_not_occupied",
            )
        return True


async def promote_bookings(
    session_factory: async_sessionmaker,
    now: Optional[datetime] = None,
    monitor: Optional[OperationMonitor] = None,
) -> Dict[str, int]:
    """
    Promote every booking whose window has opened or closed by ``now``.

    Each booking moves in its own transaction; a failure on one booking is
    logged and does not stop the others. Returns how many bookings were
    activated and completed.
    """
    now = now or datetime.now(timezone.utc)
    started = time.perf_counter()
    counts = {"activated": 0, "completed": 0}
    try:
        for booking_id in await _due_ids(
            session_factory,
            Booking.status.in_(list(HOLDING_STATUSES)),
            Booking.end_time <= now,
        ):
            try:
                if await _complete(session_factory, booking_id):
                    counts["completed"] += 1
            except ReservationError as exc:
                logger.warning("Could not complete booking %s: %s", booking_id, exc.message)

        for booking_id in await _due_ids(
            session_factory,
            Booking.status == BookingStatus.UPCOMING,
            Booking.start_time <= now,
        ):
            try:
                if await _activate(session_factory, booking_id):
                    counts["activated"] += 1
            except ReservationError as exc:
                logger.warning("Could not activate booking %s: %s", booking_id, exc.message)
    finally:
        if monitor is not None:
            try:
                await monitor.record(PROMOTE_BOOKINGS, time.perf_counter() - started)
            except Exception:
                logger.exception("Failed to record timing for %s", PROMOTE_BOOKINGS)

    if counts["activated"] or counts["completed"]:
        logger.info(
            "Promoted bookings: %d activated, %d completed",
            counts["activated"],
            counts["completed"],
        )
    return counts
