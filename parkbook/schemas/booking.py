"""Booking schemas."""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from parkbook.core.enums import BookingStatus


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class BookingRequest(BaseModel):
    """
    Input of a create-booking call.

    Fields are read by name or by the camelCase alias used in HTTP bodies.
    Timestamps may be ISO 8601 strings or Unix epoch seconds; they are
    normalized to UTC, and naive values are taken as UTC.
    """

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, frozen=True)

    slot_id: int = Field(alias="slotId")
    vehicle_number: str = Field(alias="vehicleNumber")
    start_time: datetime = Field(alias="startTime")
    end_time: datetime = Field(alias="endTime")
    total_cost: Decimal = Field(alias="totalCost", allow_inf_nan=True)

    @model_validator(mode="before")
    @classmethod
    def require_fields(cls, data: Any) -> Any:
        # Reports every missing field at once instead of one error per field
        if isinstance(data, dict):
            missing = [
                name
                for name, field in cls.model_fields.items()
                if _is_blank(data.get(name, data.get(field.alias)))
            ]
            if missing:
                raise PydanticCustomError(
                    "missing_fields",
                    "Missing required fields: {fields}",
                    {"fields": ", ".join(missing)},
                )
        return data

    @field_validator("slot_id", mode="before")
    @classmethod
    def reject_bool_slot_id(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("slot_id must be an integer")
        return value

    @field_validator("start_time", "end_time")
    @classmethod
    def to_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @field_validator("total_cost")
    @classmethod
    def non_negative_cost(cls, value: Decimal) -> Decimal:
        if not value.is_finite() or value < 0:
            raise PydanticCustomError("invalid_cost", "total_cost must be a non-negative number")
        return value

    @model_validator(mode="after")
    def check_window(self) -> "BookingRequest":
        if self.end_time <= self.start_time:
            raise PydanticCustomError("invalid_window", "end_time must be after start_time")
        return self


class BookingCreated(BaseModel):
    """Schema for a successful create response."""

    id: int
    message: str


class BookingResponse(BaseModel):
    """Schema for booking response, joined with its slot number."""

    id: int
    slot_id: int
    slot_number: str
    vehicle_number: str
    start_time: datetime
    end_time: datetime
    total_cost: Decimal
    status: BookingStatus
    created_at: datetime

    model_config = {"from_attributes": True}


class MessageResponse(BaseModel):
    """Schema for a plain message response."""

    message: str
