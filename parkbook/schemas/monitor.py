"""Operation monitor schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


def format_ms(seconds: float) -> str:
    """Render a duration in seconds as milliseconds, e.g. ``"12.35 ms"``."""
    return f"{seconds * 1000:.2f} ms"


class OperationStatResponse(BaseModel):
    """Schema for one operation monitor record. Latencies are preformatted."""

    operation_label: str
    # Name the monitoring dashboard reads
    query_type: str
    count: int
    total_time: str
    avg_time: str
    max_time: str
    last_executed: Optional[datetime]

    @classmethod
    def from_stat(cls, stat) -> "OperationStatResponse":
        return cls(
            operation_label=stat.operation_label,
            query_type=stat.operation_label,
            count=stat.count,
            total_time=format_ms(stat.total_time),
            avg_time=format_ms(stat.avg_time),
            max_time=format_ms(stat.max_time),
            last_executed=stat.last_executed,
        )
