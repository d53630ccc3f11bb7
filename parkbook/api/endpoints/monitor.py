"""Operation monitor endpoints."""

from typing import List

from fastapi import APIRouter, Depends

from parkbook.api.deps import get_reservation_engine
from parkbook.schemas.monitor import OperationStatResponse
from parkbook.services import ReservationEngine

router = APIRouter()


@router.get("/requests", response_model=List[OperationStatResponse])
async def list_operation_stats(engine: ReservationEngine = Depends(get_reservation_engine)):
    """Per-operation latency statistics, largest total time first."""
    stats = await engine.list_operation_stats()
    return [OperationStatResponse.from_stat(stat) for stat in stats]
