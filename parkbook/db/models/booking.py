"""Booking model."""

from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, Enum, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from parkbook.core.enums import BookingStatus
from parkbook.db.base import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Booking(Base):
    """Time-bounded reservation of one slot by one vehicle."""

    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    slot_id = Column(
        Integer,
        ForeignKey("parking_slots.id"),
        nullable=False,
        index=True,
    )
    vehicle_number = Column(String(32), nullable=False)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)
    total_cost = Column(Numeric(10, 2), nullable=False)
    status = Column(
        Enum(
            BookingStatus,
            name="booking_status",
            native_enum=False,
            create_constraint=True,
            validate_strings=True,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
        default=BookingStatus.UPCOMING,
    )
    # Set client-side so rows created within the same second keep their order
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    __table_args__ = (
        CheckConstraint("end_time > start_time", name="check_booking_window"),
        CheckConstraint("total_cost >= 0", name="check_booking_cost"),
    )

    slot = relationship("ParkingSlot", back_populates="bookings")

    def __repr__(self):
        return f"<Booking(id={self.id}, slot_id={self.slot_id}, status={self.status})>"
