"""Slot store: reads and conditional status writes for parking slots."""

import logging
from typing import List

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from parkbook.core.enums import SlotStatus
from parkbook.core.errors import NotFoundError
from parkbook.db.models import ParkingSlot

logger = logging.getLogger(__name__)


class SlotStore:
    """Slot access bound to one session; writes join whatever transaction it holds."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, slot_id: int) -> ParkingSlot:
        result = await self.session.execute(select(ParkingSlot).where(ParkingSlot.id == slot_id))
        slot = result.scalar_one_or_none()
        if slot is None:
            raise NotFoundError("slot", slot_id)
        return slot

    async def compare_and_set_status(
        self,
        slot_id: int,
        expected: SlotStatus,
        new: SlotStatus,
    ) -> bool:
        """
        Move a slot from ``expected`` to ``new`` in a single conditional UPDATE.

        Returns False when the slot was not in ``expected`` at write time. The
        row lock taken by the UPDATE is held until the surrounding transaction
        ends, so a concurrent writer either waits or sees the new status.
        """
        result = await self.session.execute(
            update(ParkingSlot)
            .where(ParkingSlot.id == slot_id, ParkingSlot.status == expected)
            .values(status=new)
            .execution_options(synchronize_session=False)
        )
        changed = result.rowcount == 1
        if not changed:
            logger.debug("Slot %s not %s; status left unchanged", slot_id, expected.value)
        return changed

    async def list(self) -> List[ParkingSlot]:
        result = await self.session.execute(select(ParkingSlot).order_by(ParkingSlot.id))
        return list(result.scalars().all())
