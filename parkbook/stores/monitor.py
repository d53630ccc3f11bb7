"""
Operation monitor: per-label latency aggregates.

Each observation is folded into its row by one atomic upsert statement
(ON CONFLICT DO UPDATE, or ON DUPLICATE KEY UPDATE on MySQL). The new
aggregates are computed by the database from the row's current values, so
concurrent observations for the same label never overwrite each other's
increments.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List

from sqlalchemy import case, select
from sqlalchemy.dialects.mysql import insert as mysql_insert
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from parkbook.db.models import OperationStat

logger = logging.getLogger(__name__)


def _greater(new, current):
    return case((new > current, new), else_=current)


def _on_conflict_upsert(insert_builder: Callable) -> Callable:
    def build(values: Dict[str, Any]):
        table = OperationStat.__table__
        stmt = insert_builder(OperationStat).values(**values)
        return stmt.on_conflict_do_update(
            index_elements=[table.c.operation_label],
            set_={
                "count": table.c.count + 1,
                "total_time": table.c.total_time + stmt.excluded.total_time,
                "avg_time": (table.c.total_time + stmt.excluded.total_time) / (table.c.count + 1),
                "max_time": _greater(stmt.excluded.max_time, table.c.max_time),
                "last_executed": stmt.excluded.last_executed,
            },
        )

    return build


def _mysql_upsert(values: Dict[str, Any]):
    table = OperationStat.__table__
    stmt = mysql_insert(OperationStat).values(**values)
    new = stmt.inserted
    # MySQL applies assignments left to right, each one seeing the values set
    # before it: avg_time must read count and total_time before they change.
    return stmt.on_duplicate_key_update(
        [
            ("avg_time", (table.c.total_time + new.total_time) / (table.c.count + 1)),
            ("max_time", _greater(new.max_time, table.c.max_time)),
            ("last_executed", new.last_executed),
            ("total_time", table.c.total_time + new.total_time),
            ("count", table.c.count + 1),
        ]
    )


_UPSERT_BUILDERS: Dict[str, Callable] = {
    "postgresql": _on_conflict_upsert(pg_insert),
    "sqlite": _on_conflict_upsert(sqlite_insert),
    "mysql": _mysql_upsert,
}


def build_record_statement(dialect_name: str, label: str, elapsed: float, executed_at: datetime):
    """Build the atomic upsert that folds one observation into ``label``'s row."""
    try:
        build = _UPSERT_BUILDERS[dialect_name]
    except KeyError:
        raise NotImplementedError(f"Operation monitor does not support dialect {dialect_name!r}")

    return build(
        {
            "operation_label": label,
            "count": 1,
            "total_time": elapsed,
            "avg_time": elapsed,
            "max_time": elapsed,
            "last_executed": executed_at,
        }
    )


class OperationMonitor:
    """Latency aggregates shared by every engine invocation."""

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    async def record(self, label: str, elapsed: float) -> None:
        """Fold one observation of ``elapsed`` seconds into ``label``'s record."""
        if elapsed < 0:
            raise ValueError(f"Elapsed time must be non-negative, got {elapsed}")
        async with self.session_factory() as session:
            stmt = build_record_statement(
                _dialect_name(session),
                label,
                elapsed,
                datetime.now(timezone.utc),
            )
            await session.execute(stmt)
            await session.commit()

    async def list(self) -> List[OperationStat]:
        """Return every record, largest total time first."""
        async with self.session_factory() as session:
            result = await session.execute(
                select(OperationStat).order_by(
                    OperationStat.total_time.desc(), OperationStat.operation_label
                )
            )
            return list(result.scalars().all())

    async def get(self, label: str):
        async with self.session_factory() as session:
            return await session.get(OperationStat, label)


def _dialect_name(session: AsyncSession) -> str:
    return session.get_bind().dialect.name
