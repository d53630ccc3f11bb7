"""Parking slot schemas."""

from pydantic import BaseModel

from parkbook.core.enums import SlotStatus


class SlotResponse(BaseModel):
    """Schema for parking slot response."""

    id: int
    number: str
    status: SlotStatus

    model_config = {"from_attributes": True}
