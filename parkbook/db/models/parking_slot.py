"""ParkingSlot model."""

from sqlalchemy import Column, DateTime, Enum, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from parkbook.core.enums import SlotStatus
from parkbook.db.base import Base


class ParkingSlot(Base):
    """A single physical parking space."""

    __tablename__ = "parking_slots"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Human-readable label, e.g. "A1"
    number = Column(String(32), nullable=False, unique=True)
    status = Column(
        Enum(
            SlotStatus,
            name="slot_status",
            native_enum=False,
            create_constraint=True,
            validate_strings=True,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
        default=SlotStatus.AVAILABLE,
    )
    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    bookings = relationship("Booking", back_populates="slot")

    def __repr__(self):
        return f"<ParkingSlot(id={self.id}, number={self.number}, status={self.status})>"
