"""Migration Stats — counts and summaries over per-file migration statuses.

Invariants:
    - executed + pending + failed + rolled_back == total for any output of calculate_stats
    - Never raises: missing times count as 0, missing batch ids are skipped
"""

from app.core.domain_types import MigrationState
from app.core.migration_plan import MigrationStatus


def calculate_stats(statuses: list[MigrationStatus]) -> dict:
    counts = {state: 0 for state in MigrationState}
    for s in statuses:
        counts[s.status] += 1
    return {
        "total": len(statuses),
        "executed": counts[MigrationState.EXECUTED],
        "pending": counts[MigrationState.PENDING],
        "failed": counts[MigrationState.FAILED],
        "rolled_back": counts[MigrationState.ROLLED_BACK],
    }


def validate_statistics_sum(stats: dict) -> bool:
    parts = stats["executed"] + stats["pending"] + stats["failed"] + stats["rolled_back"]
    return parts == stats["total"]


def filter_by_status(
    statuses: list[MigrationStatus], state: MigrationState,
) -> list[MigrationStatus]:
    return [s for s in statuses if s.status == state]


def last_batch_id(statuses: list[MigrationStatus]) -> str | None:
    """Batch of the most recently executed migration."""
    executed = [
        s for s in statuses
        if s.status == MigrationState.EXECUTED and s.executed_at and s.batch_id
    ]
    if not executed:
        return None
    return sort_by_execution_date(executed)[0].batch_id


def sort_by_execution_date(
    statuses: list[MigrationStatus], descending: bool = True,
) -> list[MigrationStatus]:
    """Unexecuted entries sort last either way."""
    dated = [s for s in statuses if s.executed_at]
    undated = [s for s in statuses if not s.executed_at]
    dated.sort(key=lambda s: s.executed_at.timestamp(), reverse=descending)
    return dated + undated


def sort_by_name(
    statuses: list[MigrationStatus], descending: bool = False,
) -> list[MigrationStatus]:
    return sorted(statuses, key=lambda s: s.name, reverse=descending)


def total_execution_time(statuses: list[MigrationStatus]) -> int:
    return sum(s.execution_time_ms or 0 for s in statuses)


def by_batch(statuses: list[MigrationStatus], batch_id: str) -> list[MigrationStatus]:
    return [s for s in statuses if s.batch_id == batch_id]


def unique_batch_ids(statuses: list[MigrationStatus]) -> list[str]:
    """Distinct batch ids in first-seen order."""
    return list(dict.fromkeys(s.batch_id for s in statuses if s.batch_id))


def has_pending(statuses: list[MigrationStatus]) -> bool:
    return any(s.status == MigrationState.PENDING for s in statuses)


def has_failed(statuses: list[MigrationStatus]) -> bool:
    return any(s.status == MigrationState.FAILED for s in statuses)
