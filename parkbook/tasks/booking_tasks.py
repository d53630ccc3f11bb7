"""Scheduled booking maintenance tasks."""

import logging
from typing import Dict

from parkbook.config import settings
from parkbook.db.session import async_session_maker
from parkbook.services.promoter import promote_bookings
from parkbook.stores import OperationMonitor
from parkbook.tasks.broker import broker

logger = logging.getLogger(__name__)


@broker.task(schedule=[{"cron": settings.PROMOTER_CRON}])
async def promote_bookings_task() -> Dict[str, int]:
    """Advance bookings whose time window opened or closed since the last run."""
    counts = await promote_bookings(
        async_session_maker,
        monitor=OperationMonitor(async_session_maker),
    )
    logger.info("promote_bookings_task finished: %s", counts)
    return counts
