"""
Reservation engine.

Creates and cancels bookings so that a slot's status and the booking that
claims it change together or not at all. Every use case is timed and the
elapsed time is folded into the operation monitor; a monitor failure is
logged and never changes the outcome of the use case.
"""

import logging
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type, Union

import pydantic
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from parkbook.core.enums import BookingStatus, SlotStatus
from parkbook.core.errors import (
    ConflictError,
    InvalidStateError,
    ReservationError,
    TransactionError,
    ValidationError,
)
from parkbook.db.models import Booking, OperationStat, ParkingSlot
from parkbook.schemas.booking import BookingRequest
from parkbook.services.transaction import transaction
from parkbook.stores import BookingLedger, OperationMonitor, SlotStore

logger = logging.getLogger(__name__)

CREATE_BOOKING = "create_booking"
CANCEL_BOOKING = "cancel_booking"
LIST_SLOTS = "list_slots"
LIST_BOOKINGS = "list_bookings"
LIST_OPERATION_STATS = "list_operation_stats"

# Error types raised by BookingRequest validators that carry their own reason
_REQUEST_REASONS = ("missing_fields", "invalid_window", "invalid_cost")


def _error_reason(error: Dict[str, Any]) -> str:
    if error["type"] in _REQUEST_REASONS:
        return error["type"]
    if error["type"] == "finite_number" and error["loc"][-1:] in (("total_cost",), ("totalCost",)):
        return "invalid_cost"
    return ValidationError.default_reason


def _describe(error: Dict[str, Any]) -> str:
    if not error["loc"]:
        return error["msg"]
    return f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"


def parse_booking_request(data: Union[BookingRequest, Mapping[str, Any]]) -> BookingRequest:
    """Validate raw create-booking input, raising ``ValidationError`` on failure."""
    if isinstance(data, BookingRequest):
        return data
    try:
        return BookingRequest.model_validate(dict(data))
    except pydantic.ValidationError as exc:
        errors = exc.errors()
        raise ValidationError(
            "; ".join(_describe(error) for error in errors),
            reason=_error_reason(errors[0]),
        ) from exc
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Booking request must be an object: {exc}") from exc


@dataclass(frozen=True)
class BookingResult:
    """Outcome of a successful create or cancel call."""

    booking_id: int
    message: str
    changed: bool = True


class ReservationEngine:
    """
    Orchestrates booking use cases across the slot store and booking ledger.

    ``session_factory`` must be built with ``expire_on_commit=False``: objects
    returned by the list operations are read after their session has closed.
    Store classes are injectable so tests can substitute failing adapters.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        monitor: Optional[OperationMonitor] = None,
        slot_store_cls: Type[SlotStore] = SlotStore,
        ledger_cls: Type[BookingLedger] = BookingLedger,
    ):
        self.session_factory = session_factory
        self.monitor = monitor
        self.slot_store_cls = slot_store_cls
        self.ledger_cls = ledger_cls

    async def create_booking(
        self, request: Union[BookingRequest, Mapping[str, Any]]
    ) -> BookingResult:
        """
        Reserve a slot for the requested window.

        ``request`` is a ``BookingRequest`` or the raw mapping it is built from;
        raw input is validated here so that the failure is timed like any other.
        """
        async with self._timed(CREATE_BOOKING):
            data = parse_booking_request(request)

            async with transaction(self.session_factory, CREATE_BOOKING) as session:
                slot = await self.slot_store_cls(session).get(data.slot_id)
                slot_status = slot.status
            if slot_status is not SlotStatus.AVAILABLE:
                raise _slot_occupied(data.slot_id)

            async with transaction(self.session_factory, CREATE_BOOKING) as session:
                ledger = self.ledger_cls(session)
                slots = self.slot_store_cls(session)
                booking_id = await ledger.insert(
                    Booking(
                        slot_id=data.slot_id,
                        vehicle_number=data.vehicle_number,
                        start_time=data.start_time,
                        end_time=data.end_time,
                        total_cost=data.total_cost,
                        status=BookingStatus.UPCOMING,
                    )
                )
                # Re-checks availability under the row lock of this transaction
                if not await slots.compare_and_set_status(
                    data.slot_id, SlotStatus.AVAILABLE, SlotStatus.OCCUPIED
                ):
                    raise _slot_occupied(data.slot_id)

            logger.info(
                "Booking %s created for slot %s (vehicle %s)",
                booking_id,
                data.slot_id,
                data.vehicle_number,
            )
            return BookingResult(booking_id=booking_id, message="Booking created successfully")

    async def cancel_booking(self, booking_id: int) -> BookingResult:
        """
        Cancel a booking and release its slot.

        Cancelling an already cancelled booking is a no-op that still succeeds.
        A completed booking cannot be cancelled.
        """
        async with self._timed(CANCEL_BOOKING):
            if booking_id is None or isinstance(booking_id, bool):
                raise ValidationError("booking_id is required", reason="missing_fields")

            async with transaction(self.session_factory, CANCEL_BOOKING) as session:
                booking = await self.ledger_cls(session).get(booking_id)
                status, slot_id = booking.status, booking.slot_id

            if status is BookingStatus.CANCELLED:
                logger.info("Booking %s already cancelled; nothing to do", booking_id)
                return BookingResult(
                    booking_id=booking_id,
                    message="Booking already cancelled",
                    changed=False,
                )
            if status is BookingStatus.COMPLETED:
                raise InvalidStateError(
                    f"Booking {booking_id} is completed and cannot be cancelled",
                    reason="booking_completed",
                )

            async with transaction(self.session_factory, CANCEL_BOOKING) as session:
                ledger = self.ledger_cls(session)
                slots = self.slot_store_cls(session)
                if not await ledger.update_status(booking_id, BookingStatus.CANCELLED):
                    # Lost a race: judge the booking by the state that won
                    current = (await ledger.get(booking_id)).status
                    if current is BookingStatus.CANCELLED:
                        logger.info("Booking %s cancelled concurrently; nothing to do", booking_id)
                        return BookingResult(
                            booking_id=booking_id,
                            message="Booking already cancelled",
                            changed=False,
                        )
                    if current is BookingStatus.COMPLETED:
                        raise InvalidStateError(
                            f"Booking {booking_id} completed while being cancelled",
                            reason="booking_completed",
                        )
                    raise ConflictError(
                        f"Booking {booking_id} changed state while being cancelled",
                        reason="booking_state_changed",
                    )
                if not await slots.compare_and_set_status(
                    slot_id, SlotStatus.OCCUPIED, SlotStatus.AVAILABLE
                ):
                    raise ConflictError(
                        f"Slot {slot_id} is not occupied by booking {booking_id}",
                        reason="slot_not_occupied",
                    )

            logger.info("Booking %s cancelled; slot %s released", booking_id, slot_id)
            return BookingResult(booking_id=booking_id, message="Booking cancelled successfully")

    async def list_slots(self) -> List[ParkingSlot]:
        async with self._timed(LIST_SLOTS):
            async with transaction(self.session_factory, LIST_SLOTS) as session:
                return await self.slot_store_cls(session).list()

    async def list_bookings(self) -> List[Tuple[Booking, str]]:
        async with self._timed(LIST_BOOKINGS):
            async with transaction(self.session_factory, LIST_BOOKINGS) as session:
                return await self.ledger_cls(session).list_all()

    async def list_operation_stats(self) -> List[OperationStat]:
        if self.monitor is None:
            return []
        try:
            return await self.monitor.list()
        except SQLAlchemyError as exc:
            logger.error("Failed to read operation stats: %s", exc, exc_info=True)
            raise TransactionError(LIST_OPERATION_STATS, exc) from exc

    @asynccontextmanager
    async def _timed(self, operation: str):
        started = time.perf_counter()
        try:
            yield
        except ConflictError as exc:
            logger.warning("%s rejected: %s", operation, exc.message)
            exc.operation = exc.operation or operation
            raise
        except ReservationError as exc:
            exc.operation = exc.operation or operation
            raise
        finally:
            await self._report(operation, time.perf_counter() - started)

    async def _report(self, operation: str, elapsed: float) -> None:
        if self.monitor is None:
            return
        try:
            await self.monitor.record(operation, elapsed)
        except Exception:
            logger.exception("Failed to record timing for %s", operation)


def _slot_occupied(slot_id: int) -> ConflictError:
    return ConflictError(f"Slot {slot_id} is already occupied", reason="slot_already_occupied")
