"""Schemas package."""

from parkbook.schemas.booking import (
    BookingCreated,
    BookingRequest,
    BookingResponse,
    MessageResponse,
)
from parkbook.schemas.monitor import OperationStatResponse
from parkbook.schemas.slot import SlotResponse

__all__ = [
    "BookingCreated",
    "BookingRequest",
    "BookingResponse",
    "MessageResponse",
    "OperationStatResponse",
    "SlotResponse",
]
