"""Migration Runner — executing, tracking and rolling back SQL files on SQLite.

Invariants:
    - Executed migrations are recorded with checksum, batch id and rollback SQL
    - A failing file stops the batch and is recorded as failed, then retried on the next run
    - Dry runs leave the database untouched
    - Rollbacks run newest first and leave a _migration_rollbacks row behind
"""

import pytest
from sqlalchemy import inspect, select

from app.core.domain_types import MigrationState
from app.core.errors import (
    MigrationDirectoryError, MigrationTargetNotFoundError, RollbackRequestError,
)
from app.models.migration_record import MigrationRecord, MigrationRollback
from app.services.migration_runner import MigrationRunner

from tests.services.sample_migrations import (
    FIXED_BATCH_ID, NAMES, SAMPLE_MIGRATIONS, write_migrations,
)


async def _tables(engine) -> set[str]:
    async with engine.connect() as conn:
        return set(await conn.run_sync(lambda c: inspect(c).get_table_names()))


async def _records(engine):
    async with engine.connect() as conn:
        result = await conn.execute(
            select(MigrationRecord.__table__).order_by(MigrationRecord.name),
        )
        return result.mappings().all()


# --- Files and status ---------------------------------------------------------


def test_files_sorted_with_checksums(runner):
    files = runner.get_migration_files()
    assert [f.name for f in files] == NAMES
    assert files[0].timestamp == "20260101000001"
    assert len(files[0].checksum) == 64


def test_non_sql_files_ignored(runner, migrations_dir):
    (migrations_dir / "README.md").write_text("notes")
    assert len(runner.get_migration_files()) == 3


def test_missing_directory_raises(runner_engine, tmp_path):
    runner = MigrationRunner(runner_engine, tmp_path / "nowhere")
    with pytest.raises(MigrationDirectoryError):
        runner.get_migration_files()


async def test_status_before_anything_ran(runner):
    statuses = await runner.get_migration_status()
    assert [s.status for s in statuses] == [MigrationState.PENDING] * 3


# --- Run ----------------------------------------------------------------------


async def test_run_executes_all_pending_in_order(runner, runner_engine):
    result = await runner.run_migrations()

    assert result.success
    assert result.batch_id == FIXED_BATCH_ID
    assert result.executed == NAMES
    assert {"products", "orders", "_migrations"} <= await _tables(runner_engine)

    records = await _records(runner_engine)
    assert [r["name"] for r in records] == NAMES
    assert all(r["status"] == "executed" for r in records)
    assert all(r["batch_id"] == FIXED_BATCH_ID for r in records)
    assert records[0]["rollback_sql"] == (
        "DROP INDEX IF EXISTS ix_products_name;\nDROP TABLE IF EXISTS products;"
    )


async def test_semicolon_inside_string_literal_survives(runner, runner_engine):
    await runner.run_migrations()
    async with runner_engine.connect() as conn:
        note = (await conn.exec_driver_sql("SELECT note FROM orders")).scalar_one()
    assert note == "first; order"


async def test_second_run_is_a_no_op(runner):
    await runner.run_migrations()
    result = await runner.run_migrations()
    assert result.success
    assert result.executed == []


async def test_target_stops_after_named_file(runner):
    result = await runner.run_migrations(target=NAMES[1])
    assert result.executed == NAMES[:2]
    statuses = await runner.get_migration_status()
    assert statuses[2].status is MigrationState.PENDING


async def test_unknown_target_raises(runner):
    with pytest.raises(MigrationTargetNotFoundError):
        await runner.run_migrations(target="20990101000000_nope.sql")


async def test_dry_run_changes_nothing(runner, runner_engine):
    result = await runner.run_migrations(dry_run=True)
    assert result.success
    assert result.skipped == NAMES
    assert result.executed == []
    assert await _tables(runner_engine) == set()


async def test_failure_stops_batch_and_is_retried(runner, migrations_dir):
    broken = "20260101000002_create_orders.sql"
    (migrations_dir / broken).write_text("CREATE TABLE orders (;")

    result = await runner.run_migrations()
    assert not result.success
    assert result.executed == [NAMES[0]]
    assert result.failed == [broken]
    assert result.error

    statuses = await runner.get_migration_status()
    assert [s.status for s in statuses] == [
        MigrationState.EXECUTED, MigrationState.FAILED, MigrationState.PENDING,
    ]
    assert statuses[1].error_message

    write_migrations(migrations_dir, {broken: SAMPLE_MIGRATIONS[broken]})
    retry = await runner.run_migrations()
    assert retry.success
    assert retry.executed == NAMES[1:]


async def test_edited_file_reports_checksum_mismatch(runner, migrations_dir):
    await runner.run_migrations()
    (migrations_dir / NAMES[2]).write_text("CREATE VIEW product_names AS SELECT id FROM products;")

    statuses = await runner.get_migration_status()
    assert statuses[2].status is MigrationState.FAILED
    assert statuses[2].error_message == "Checksum mismatch - file has been modified"


# --- Rollback -----------------------------------------------------------------


async def test_rollback_by_count_newest_first(runner, runner_engine):
    await runner.run_migrations()
    result = await runner.rollback_migrations(count=2)

    assert result.success
    assert result.rolled_back == [NAMES[2], NAMES[1]]
    tables = await _tables(runner_engine)
    assert "orders" not in tables
    assert "products" in tables

    statuses = await runner.get_migration_status()
    assert [s.status for s in statuses] == [
        MigrationState.EXECUTED, MigrationState.ROLLED_BACK, MigrationState.ROLLED_BACK,
    ]


async def test_rollback_writes_history(runner, runner_engine):
    await runner.run_migrations()
    await runner.rollback_migrations(count=1)
    async with runner_engine.connect() as conn:
        rows = (await conn.execute(select(MigrationRollback.__table__))).mappings().all()
    assert [r["migration_name"] for r in rows] == [NAMES[2]]
    assert rows[0]["batch_id"] == FIXED_BATCH_ID


async def test_rollback_to_target_keeps_target(runner):
    await runner.run_migrations()
    result = await runner.rollback_migrations(target=NAMES[0])
    assert result.rolled_back == [NAMES[2], NAMES[1]]


async def test_rolled_back_migration_can_run_again(runner):
    await runner.run_migrations()
    await runner.rollback_migrations(count=1)
    result = await runner.run_migrations()
    assert result.executed == [NAMES[2]]


async def test_rollback_without_generated_sql_fails(runner, migrations_dir):
    write_migrations(migrations_dir, {
        "20260101000004_seed_products.sql": "INSERT INTO products (name) VALUES ('mug');",
    })
    await runner.run_migrations()

    result = await runner.rollback_migrations(count=2)
    assert not result.success
    assert result.rolled_back == []
    assert result.failed == ["20260101000004_seed_products.sql"]
    assert "No rollback SQL available" in result.error


async def test_rollback_requires_count_or_target(runner):
    await runner.run_migrations()
    with pytest.raises(RollbackRequestError):
        await runner.rollback_migrations()


def test_batch_ids_use_injected_clock(runner):
    assert runner.new_batch_id() == FIXED_BATCH_ID
