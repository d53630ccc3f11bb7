"""OperationStat model."""

from sqlalchemy import Column, DateTime, Float, Integer, String

from parkbook.db.base import Base


class OperationStat(Base):
    """Aggregated latency statistics for one operation label. Times are in seconds."""

    __tablename__ = "operation_stats"

    operation_label = Column(String(64), primary_key=True)
    count = Column(Integer, nullable=False, default=0)
    total_time = Column(Float, nullable=False, default=0.0)
    avg_time = Column(Float, nullable=False, default=0.0)
    max_time = Column(Float, nullable=False, default=0.0)
    last_executed = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<OperationStat(operation_label={self.operation_label}, count={self.count})>"
