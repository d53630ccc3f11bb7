"""FastAPI dependencies."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import async_sessionmaker

from parkbook.db.session import get_session_factory
from parkbook.services import ReservationEngine
from parkbook.stores import OperationMonitor


def get_reservation_engine(
    session_factory: async_sessionmaker = Depends(get_session_factory),
) -> ReservationEngine:
    """Build the reservation engine over the configured session factory."""
    return ReservationEngine(session_factory, monitor=OperationMonitor(session_factory))
