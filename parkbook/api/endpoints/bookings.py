"""Booking endpoints."""

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, status

from parkbook.api.deps import get_reservation_engine
from parkbook.schemas.booking import BookingCreated, BookingResponse, MessageResponse
from parkbook.services import ReservationEngine

router = APIRouter()

BOOKING_EXAMPLE = {
    "slotId": 1,
    "vehicleNumber": "ABC123",
    "startTime": "2030-05-01T09:00:00Z",
    "endTime": "2030-05-01T10:00:00Z",
    "totalCost": 5.0,
}


@router.get("", response_model=List[BookingResponse])
async def list_bookings(engine: ReservationEngine = Depends(get_reservation_engine)):
    """List all bookings with their slot number, newest first."""
    rows = await engine.list_bookings()
    return [
        BookingResponse(
            id=booking.id,
            slot_id=booking.slot_id,
            slot_number=slot_number,
            vehicle_number=booking.vehicle_number,
            start_time=booking.start_time,
            end_time=booking.end_time,
            total_cost=booking.total_cost,
            status=booking.status,
            created_at=booking.created_at,
        )
        for booking, slot_number in rows
    ]


@router.post("", response_model=BookingCreated, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: Dict[str, Any] = Body(..., examples=[BOOKING_EXAMPLE]),
    engine: ReservationEngine = Depends(get_reservation_engine),
):
    """
    Reserve a slot. Fails with 409 if the slot is already occupied.

    The body is validated as a ``BookingRequest`` by the engine, so each kind
    of bad input reports its own reason.
    """
    result = await engine.create_booking(booking_data)
    return BookingCreated(id=result.booking_id, message=result.message)


@router.put("/{booking_id}/cancel", response_model=MessageResponse)
async def cancel_booking(
    booking_id: int,
    engine: ReservationEngine = Depends(get_reservation_engine),
):
    """Cancel a booking and release its slot."""
    result = await engine.cancel_booking(booking_id)
    return MessageResponse(message=result.message)
