"""Booking ledger: insert, read and conditional status updates for bookings."""

from typing import List, Tuple

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from parkbook.core.enums import BookingStatus, allowed_predecessors
from parkbook.core.errors import NotFoundError
from parkbook.db.models import Booking, ParkingSlot


class BookingLedger:
    """Booking access bound to one session. Flushes, never commits."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def insert(self, booking: Booking) -> int:
        """Add ``booking`` and return its database-assigned id."""
        self.session.add(booking)
        await self.session.flush()
        return booking.id

    async def get(self, booking_id: int) -> Booking:
        result = await self.session.execute(select(Booking).where(Booking.id == booking_id))
        booking = result.scalar_one_or_none()
        if booking is None:
            raise NotFoundError("booking", booking_id)
        return booking

    async def update_status(self, booking_id: int, new_status: BookingStatus) -> bool:
        """
        Set the booking's status if its current status may legally move to
        ``new_status``.

        The legality check is part of the UPDATE's WHERE clause, so two racing
        writers cannot both apply a transition. Returns False if no row matched.
        """
        predecessors = allowed_predecessors(new_status)
        if not predecessors:
            return False
        result = await self.session.execute(
            update(Booking)
            .where(Booking.id == booking_id, Booking.status.in_(list(predecessors)))
            .values(status=new_status)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def list_all(self) -> List[Tuple[Booking, str]]:
        """Return every booking with its slot number, newest first."""
        result = await self.session.execute(
            select(Booking, ParkingSlot.number)
            .join(ParkingSlot, Booking.slot_id == ParkingSlot.id)
            .order_by(Booking.created_at.desc(), Booking.id.desc())
        )
        return [(booking, slot_number) for booking, slot_number in result.all()]
