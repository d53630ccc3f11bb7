"""Database models package."""

from parkbook.db.base import Base
from parkbook.db.models.booking import Booking
from parkbook.db.models.operation_stat import OperationStat
from parkbook.db.models.parking_slot import ParkingSlot

__all__ = [
    "Base",
    "Booking",
    "OperationStat",
    "ParkingSlot",
]
