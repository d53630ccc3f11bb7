"""
Error taxonomy for the reservation engine.

Every error names the operation that raised it and a short machine-readable
reason, so the REST layer can tell bad input, missing rows, conflicts and
backend failures apart and map each one to its own status code.
"""
from __future__ import annotations

from typing import Optional

STATUS_BAD_REQUEST = 400
STATUS_NOT_FOUND = 404
STATUS_CONFLICT = 409
STATUS_INTERNAL_ERROR = 500


class ReservationError(Exception):
    """Base class for every error the reservation engine raises."""

    status_code: int = STATUS_INTERNAL_ERROR
    default_reason: str = "reservation_error"

    def __init__(
        self,
        message: str,
        *,
        operation: Optional[str] = None,
        reason: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.reason = reason or self.default_reason

    def to_dict(self) -> dict:
        return {"detail": self.message, "operation": self.operation, "reason": self.reason}


class ValidationError(ReservationError):
    """Malformed or missing input, reported before any store access."""

    status_code = STATUS_BAD_REQUEST
    default_reason = "invalid_input"


class NotFoundError(ReservationError):
    """A referenced slot or booking does not exist."""

    status_code = STATUS_NOT_FOUND
    default_reason = "not_found"

    def __init__(self, entity: str, entity_id: object, *, operation: Optional[str] = None):
        super().__init__(
            f"{entity.capitalize()} {entity_id} not found",
            operation=operation,
            reason=f"{entity}_not_found",
        )
        self.entity = entity
        self.entity_id = entity_id


class ConflictError(ReservationError):
    """A row was not in the expected state when the write was attempted."""

    status_code = STATUS_CONFLICT
    default_reason = "conflict"


class InvalidStateError(ReservationError):
    """The requested booking-status transition is not allowed."""

    status_code = STATUS_CONFLICT
    default_reason = "invalid_state"


class TransactionError(ReservationError):
    """The store failed and every write of the unit was rolled back."""

    status_code = STATUS_INTERNAL_ERROR
    default_reason = "transaction_failed"

    def __init__(self, operation: str, cause: BaseException):
        super().__init__(f"Failed to {operation.replace('_', ' ')}: {cause}", operation=operation)
        self.cause = cause
