"""Use-case services."""

from parkbook.schemas.booking import BookingRequest
from parkbook.services.reservation_engine import (
    BookingResult,
    ReservationEngine,
    parse_booking_request,
)

__all__ = ["BookingRequest", "BookingResult", "ReservationEngine", "parse_booking_request"]
