"""Closed status types for slots and bookings."""

from enum import Enum
from typing import Dict, FrozenSet


class SlotStatus(str, Enum):
    """Availability of a physical parking slot."""

    AVAILABLE = "available"
    OCCUPIED = "occupied"


class BookingStatus(str, Enum):
    """Lifecycle state of a booking."""

    UPCOMING = "upcoming"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def holds_slot(self) -> bool:
        """Whether a booking in this state keeps its slot occupied."""
        return self in HOLDING_STATUSES


HOLDING_STATUSES: FrozenSet[BookingStatus] = frozenset(
    {BookingStatus.UPCOMING, BookingStatus.ACTIVE}
)

# Legal predecessors for each target status. Nothing re-enters UPCOMING.
BOOKING_TRANSITIONS: Dict[BookingStatus, FrozenSet[BookingStatus]] = {
    BookingStatus.UPCOMING: frozenset(),
    BookingStatus.ACTIVE: frozenset({BookingStatus.UPCOMING}),
    BookingStatus.COMPLETED: frozenset({BookingStatus.UPCOMING, BookingStatus.ACTIVE}),
    BookingStatus.CANCELLED: frozenset({BookingStatus.UPCOMING, BookingStatus.ACTIVE}),
}


def allowed_predecessors(target: BookingStatus) -> FrozenSet[BookingStatus]:
    """Return the statuses a booking may move to ``target`` from."""
    return BOOKING_TRANSITIONS[target]
