"""Transactional scope shared by every use case."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from parkbook.core.errors import ReservationError, TransactionError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def transaction(
    session_factory: async_sessionmaker,
    operation: str,
) -> AsyncIterator[AsyncSession]:
    """
    Open a session, begin a transaction and yield the session.

    The transaction commits when the block exits normally. Any exception
    rolls it back in full. Reservation errors raised by the block propagate
    unchanged; every other failure, including a failed commit, is re-raised
    as ``TransactionError`` naming ``operation``.
    """
    async with session_factory() as session:
        try:
            async with session.begin():
                yield session
        except ReservationError:
            raise
        except Exception as exc:
            logger.error("Transaction for %s rolled back: %s", operation, exc, exc_info=True)
            raise TransactionError(operation, exc) from exc
