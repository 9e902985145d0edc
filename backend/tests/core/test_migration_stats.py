"""Tests for migration_stats — counts, filters, sorting and batch helpers."""

from datetime import datetime

from app.core.domain_types import MigrationState
from app.core.migration_plan import MigrationStatus
from app.core.migration_stats import (
    by_batch, calculate_stats, filter_by_status, has_failed, has_pending,
    last_batch_id, sort_by_execution_date, sort_by_name, total_execution_time,
    unique_batch_ids, validate_statistics_sum,
)

STATUSES = [
    MigrationStatus(
        "001.sql", MigrationState.EXECUTED, datetime(2026, 1, 1, 9), 20, batch_id="batch_a",
    ),
    MigrationStatus(
        "002.sql", MigrationState.EXECUTED, datetime(2026, 1, 2, 9), 30, batch_id="batch_b",
    ),
    MigrationStatus("003.sql", MigrationState.FAILED, error_message="boom", batch_id="batch_b"),
    MigrationStatus("004.sql", MigrationState.PENDING),
    MigrationStatus("005.sql", MigrationState.ROLLED_BACK),
]


def test_calculate_stats_counts_each_state():
    stats = calculate_stats(STATUSES)
    assert stats == {"total": 5, "executed": 2, "pending": 1, "failed": 1, "rolled_back": 1}
    assert validate_statistics_sum(stats)


def test_stats_for_empty_list():
    stats = calculate_stats([])
    assert stats["total"] == 0
    assert validate_statistics_sum(stats)


def test_validate_statistics_sum_detects_drift():
    assert not validate_statistics_sum(
        {"total": 3, "executed": 1, "pending": 1, "failed": 0, "rolled_back": 0},
    )


def test_filter_and_flags():
    assert [s.name for s in filter_by_status(STATUSES, MigrationState.EXECUTED)] == [
        "001.sql", "002.sql",
    ]
    assert has_pending(STATUSES)
    assert has_failed(STATUSES)
    assert not has_failed(STATUSES[:2])


def test_last_batch_id_uses_most_recent_execution():
    assert last_batch_id(STATUSES) == "batch_b"
    assert last_batch_id(STATUSES[3:]) is None


def test_sort_by_execution_date_puts_undated_last():
    ordered = sort_by_execution_date(STATUSES)
    assert [s.name for s in ordered[:2]] == ["002.sql", "001.sql"]
    ascending = sort_by_execution_date(STATUSES, descending=False)
    assert ascending[0].name == "001.sql"
    assert ascending[-1].executed_at is None


def test_sort_by_name():
    assert sort_by_name(STATUSES, descending=True)[0].name == "005.sql"


def test_batch_helpers():
    assert total_execution_time(STATUSES) == 50
    assert [s.name for s in by_batch(STATUSES, "batch_b")] == ["002.sql", "003.sql"]
    assert unique_batch_ids(STATUSES) == ["batch_a", "batch_b"]
