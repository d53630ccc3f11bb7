"""Store adapters over an open AsyncSession. None of them commit."""

from parkbook.stores.bookings import BookingLedger
from parkbook.stores.monitor import OperationMonitor
from parkbook.stores.slots import SlotStore

__all__ = ["BookingLedger", "OperationMonitor", "SlotStore"]
