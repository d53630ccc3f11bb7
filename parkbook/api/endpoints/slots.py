"""Parking slot endpoints."""

from typing import List

from fastapi import APIRouter, Depends

from parkbook.api.deps import get_reservation_engine
from parkbook.schemas.slot import SlotResponse
from parkbook.services import ReservationEngine

router = APIRouter()


@router.get("", response_model=List[SlotResponse])
async def list_slots(engine: ReservationEngine = Depends(get_reservation_engine)):
    """List all parking slots with their current status."""
    return await engine.list_slots()
