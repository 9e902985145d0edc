"""Migration Tracking ORM — bookkeeping tables of the SQL migration runner.

Invariants:
    - name is unique in _migrations: at most one record per migration file
    - status is 'executed' or 'failed'; failed records are retried and replaced on success
    - A rollback deletes the _migrations row and appends a _migration_rollbacks row

Design Decisions:
    - Own DeclarativeBase (TrackingBase): the runner creates these tables itself and Alembic
      never sees them in Base.metadata (alembic/env.py also filters them by name)
"""

from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

MIGRATIONS_TABLE = "_migrations"
ROLLBACKS_TABLE = "_migration_rollbacks"
TRACKING_TABLES = frozenset({MIGRATIONS_TABLE, ROLLBACKS_TABLE})


class TrackingBase(DeclarativeBase):
    pass


def _now() -> datetime:
    return datetime.now(timezone.utc)


class MigrationRecord(TrackingBase):
    __tablename__ = MIGRATIONS_TABLE

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    executed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_now,
    )
    checksum: Mapped[str] = mapped_column(String(64), nullable=False)
    execution_time_ms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rollback_sql: Mapped[str | None] = mapped_column(Text, nullable=True)
    batch_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="executed")
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)


class MigrationRollback(TrackingBase):
    __tablename__ = ROLLBACKS_TABLE

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    migration_name: Mapped[str] = mapped_column(String(255), nullable=False)
    rolled_back_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_now,
    )
    rollback_sql: Mapped[str | None] = mapped_column(Text, nullable=True)
    execution_time_ms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    batch_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
