#!/usr/bin/env python
"""Create tables and provision parking slots when none exist."""
import asyncio
import logging
import sys
from typing import List

from sqlalchemy import func, select

from parkbook.db.base import Base
from parkbook.db.models import ParkingSlot
from parkbook.db.session import async_session_maker, engine

logger = logging.getLogger("seed")

DEFAULT_SLOTS = ["A1", "A2", "A3", "A4", "A5"]


async def seed(numbers: List[str]) -> int:
    """Create missing tables and insert ``numbers`` as available slots if the table is empty."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session_maker() as session:
        existing = await session.scalar(select(func.count()).select_from(ParkingSlot))
        if existing:
            logger.info("%d parking slots already provisioned; nothing to do", existing)
            return 0
        session.add_all([ParkingSlot(number=number) for number in numbers])
        await session.commit()

    logger.info("Provisioned parking slots: %s", ", ".join(numbers))
    return len(numbers)


async def main(numbers: List[str]) -> None:
    try:
        await seed(numbers)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    asyncio.run(main(sys.argv[1:] or DEFAULT_SLOTS))
