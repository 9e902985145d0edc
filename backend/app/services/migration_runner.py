"""Migration Runner — applies and rolls back raw SQL migration files with tracking.

Invariants:
    - Each migration runs in its own transaction together with its tracking row
    - A batch stops at the first failure; the failure is recorded as status='failed'
    - Dry runs never create or modify anything (tracking tables included)
    - Rollbacks replay the rollback SQL stored at execution time, newest first

Design Decisions:
    - Pure decisions (ordering, selection, checksums, rollback SQL) live in core.migration_plan;
      this class only reads files and talks to the database
    - Shares the application's AsyncEngine instead of opening a second pool
    - Clock and batch suffix injectable for deterministic tests
"""

import logging
import secrets
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from sqlalchemy import delete, inspect, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from app.config import Settings
from app.core.domain_types import MigrationState
from app.core.errors import MigrationDirectoryError, RollbackUnavailableError
from app.db.session import create_engine_from_settings
from app.core.migration_plan import (
    MigrationEntry, MigrationFile, MigrationStatus,
    build_migration_file, build_statuses, generate_batch_id,
    generate_rollback_sql, select_pending, select_rollbacks, split_sql_statements,
)
from app.models.migration_record import (
    MIGRATIONS_TABLE, ROLLBACKS_TABLE, MigrationRecord, MigrationRollback, TrackingBase,
)

logger = logging.getLogger(__name__)

BATCH_SUFFIX_SPACE = 36 ** 9


@dataclass
class MigrationResult:
    success: bool
    batch_id: str
    executed: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    total_time_ms: int = 0
    error: str | None = None


@dataclass
class RollbackResult:
    success: bool
    rolled_back: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    total_time_ms: int = 0
    error: str | None = None


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def _error_text(exc: Exception) -> str:
    """Driver message without SQLAlchemy's statement dump."""
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


class MigrationRunner:
    """Runs *.sql files from migrations_dir against engine."""

    def __init__(
        self,
        engine: AsyncEngine,
        migrations_dir: Path | str,
        clock: Callable[[], float] = time.time,
        batch_suffix: Callable[[], int] = lambda: secrets.randbelow(BATCH_SUFFIX_SPACE),
    ):
        self.engine = engine
        self.migrations_dir = Path(migrations_dir)
        self._clock = clock
        self._batch_suffix = batch_suffix

    @property
    def _cascade(self) -> bool:
        return self.engine.dialect.name == "postgresql"

    def new_batch_id(self) -> str:
        return generate_batch_id(int(self._clock() * 1000), self._batch_suffix())

    # --- Tracking tables ---------------------------------------------------

    async def initialize(self):
        """Create the tracking tables if they do not exist yet."""
        async with self.engine.begin() as conn:
            await conn.run_sync(TrackingBase.metadata.create_all)

    async def _has_table(self, conn: AsyncConnection, name: str) -> bool:
        return await conn.run_sync(lambda sync_conn: inspect(sync_conn).has_table(name))

    async def _load_records(self) -> list[MigrationEntry]:
        async with self.engine.connect() as conn:
            if not await self._has_table(conn, MIGRATIONS_TABLE):
                return []
            rows = (await conn.execute(
                select(MigrationRecord.__table__).order_by(MigrationRecord.name)
            )).mappings().all()
        return [
            MigrationEntry(
                name=row["name"],
                checksum=row["checksum"],
                status=MigrationState(row["status"]),
                executed_at=row["executed_at"],
                execution_time_ms=row["execution_time_ms"],
                rollback_sql=row["rollback_sql"],
                batch_id=row["batch_id"],
                error_message=row["error_message"],
            )
            for row in rows
        ]

    async def _rolled_back_names(self) -> set[str]:
        async with self.engine.connect() as conn:
            if not await self._has_table(conn, ROLLBACKS_TABLE):
                return set()
            result = await conn.execute(select(MigrationRollback.migration_name).distinct())
            return set(result.scalars().all())

    # --- Files and status --------------------------------------------------

    def get_migration_files(self) -> list[MigrationFile]:
        """All *.sql files in the migrations directory, sorted by name."""
        if not self.migrations_dir.is_dir():
            raise MigrationDirectoryError(str(self.migrations_dir))
        return [
            build_migration_file(path.name, str(path), path.read_text(encoding="utf-8"))
            for path in sorted(self.migrations_dir.glob("*.sql"), key=lambda p: p.name)
            if path.is_file()
        ]

    async def get_migration_status(self) -> list[MigrationStatus]:
        files = self.get_migration_files()
        records = await self._load_records()
        return build_statuses(files, records, await self._rolled_back_names())

    # --- Run ---------------------------------------------------------------

    async def run_migrations(
        self, dry_run: bool = False, target: str | None = None,
    ) -> MigrationResult:
        start = time.perf_counter()
        result = MigrationResult(success=True, batch_id=self.new_batch_id())

        files = self.get_migration_files()
        records = await self._load_records()
        pending = select_pending(files, records, target)

        if dry_run:
            result.skipped = [f.name for f in pending]
            result.total_time_ms = _elapsed_ms(start)
            logger.info(
                f"Dry run: {len(pending)} migration(s) pending",
                extra={"batch_id": result.batch_id},
            )
            return result

        await self.initialize()
        for migration in pending:
            try:
                await self._execute(migration, result.batch_id)
            except SQLAlchemyError as e:
                message = _error_text(e)
                await self._record_failure(migration, result.batch_id, message)
                result.success = False
                result.failed.append(migration.name)
                result.error = message
                logger.error(
                    f"Migration failed: {message}",
                    extra={
                        "migration": migration.name, "batch_id": result.batch_id,
                        "error_code": "MIGRATION_EXECUTION_FAILED",
                    },
                )
                break
            result.executed.append(migration.name)

        result.total_time_ms = _elapsed_ms(start)
        return result

    async def _execute(self, migration: MigrationFile, batch_id: str):
        start = time.perf_counter()
        rollback_sql = generate_rollback_sql(migration.content, cascade=self._cascade)

        async with self.engine.begin() as conn:
            for statement in split_sql_statements(migration.content):
                await conn.exec_driver_sql(statement)
            duration = _elapsed_ms(start)
            await conn.execute(
                delete(MigrationRecord).where(MigrationRecord.name == migration.name)
            )
            await conn.execute(insert(MigrationRecord).values(
                name=migration.name,
                checksum=migration.checksum,
                execution_time_ms=duration,
                rollback_sql=rollback_sql,
                batch_id=batch_id,
                status=MigrationState.EXECUTED.value,
            ))

        logger.info(
            "Migration executed",
            extra={"migration": migration.name, "batch_id": batch_id, "duration_ms": duration},
        )

    async def _record_failure(self, migration: MigrationFile, batch_id: str, message: str):
        async with self.engine.begin() as conn:
            await conn.execute(
                delete(MigrationRecord).where(MigrationRecord.name == migration.name)
            )
            await conn.execute(insert(MigrationRecord).values(
                name=migration.name,
                checksum=migration.checksum,
                execution_time_ms=0,
                batch_id=batch_id,
                status=MigrationState.FAILED.value,
                error_message=message,
            ))

    # --- Rollback ----------------------------------------------------------

    async def rollback_migrations(
        self, target: str | None = None, count: int | None = None,
    ) -> RollbackResult:
        start = time.perf_counter()
        await self.initialize()
        to_undo = select_rollbacks(await self._load_records(), target, count)

        result = RollbackResult(success=True)
        for record in to_undo:
            try:
                await self._rollback(record)
            except (SQLAlchemyError, RollbackUnavailableError) as e:
                message = e.message if isinstance(e, RollbackUnavailableError) else _error_text(e)
                result.success = False
                result.failed.append(record.name)
                result.error = message
                logger.error(
                    f"Rollback failed: {message}",
                    extra={"migration": record.name, "batch_id": record.batch_id},
                )
                break
            result.rolled_back.append(record.name)

        result.total_time_ms = _elapsed_ms(start)
        return result

    async def _rollback(self, record: MigrationEntry):
        if not record.rollback_sql:
            raise RollbackUnavailableError(record.name)

        start = time.perf_counter()
        async with self.engine.begin() as conn:
            for statement in split_sql_statements(record.rollback_sql):
                await conn.exec_driver_sql(statement)
            duration = _elapsed_ms(start)
            await conn.execute(insert(MigrationRollback).values(
                migration_name=record.name,
                rollback_sql=record.rollback_sql,
                execution_time_ms=duration,
                batch_id=record.batch_id,
            ))
            await conn.execute(
                delete(MigrationRecord).where(MigrationRecord.name == record.name)
            )

        logger.info(
            "Migration rolled back",
            extra={"migration": record.name, "batch_id": record.batch_id, "duration_ms": duration},
        )


def create_migration_runner(
    settings: Settings, engine: AsyncEngine | None = None,
) -> MigrationRunner:
    """Runner over settings.migrations_dir. Without an engine, one is built from settings."""
    if engine is None:
        engine = create_engine_from_settings(settings)
    return MigrationRunner(engine, settings.migrations_dir)
