"""Migration Report — health, performance and cross-environment comparison.

Invariants:
    - Health is error if anything failed (checksum mismatches included), warning when
      more than PENDING_WARNING_THRESHOLD migrations wait, healthy otherwise
    - Performance only considers executed migrations with a recorded time
    - compare_environments uses the first environment as the baseline

Design Decisions:
    - Checksum mismatches detected case-insensitively on the status message, since
      the runner reports them as failed rather than as a separate state
"""

from app.core.domain_types import HealthStatus, MigrationState
from app.core.migration_plan import MigrationStatus

PENDING_WARNING_THRESHOLD = 5


def _is_checksum_mismatch(status: MigrationStatus) -> bool:
    return (
        status.status == MigrationState.FAILED
        and "checksum" in (status.error_message or "").lower()
    )


def analyze_health(statuses: list[MigrationStatus]) -> dict:
    failed = [s for s in statuses if s.status == MigrationState.FAILED]
    pending = [s for s in statuses if s.status == MigrationState.PENDING]
    mismatched = [s for s in statuses if _is_checksum_mismatch(s)]

    issues: list[str] = []
    recommendations: list[str] = []

    if failed:
        issues.append(f"{len(failed)} migration(s) have failed")
        recommendations.append("Review failed migrations and fix any issues before proceeding")
    if mismatched:
        issues.append(f"{len(mismatched)} migration(s) have checksum mismatches")
        recommendations.append("Migration files may have been modified after execution")
    if len(pending) > PENDING_WARNING_THRESHOLD:
        issues.append(f"{len(pending)} migrations are pending execution")
        recommendations.append("Consider running migrations to keep database up to date")

    if failed or mismatched:
        status = HealthStatus.ERROR
    elif len(pending) > PENDING_WARNING_THRESHOLD:
        status = HealthStatus.WARNING
    else:
        status = HealthStatus.HEALTHY

    return {"status": status.value, "issues": issues, "recommendations": recommendations}


def analyze_performance(statuses: list[MigrationStatus]) -> dict:
    timed = [
        s for s in statuses
        if s.status == MigrationState.EXECUTED and s.execution_time_ms
    ]
    if not timed:
        return {"average_execution_time": 0, "total_migration_time": 0, "slowest_migration": None}

    total = sum(s.execution_time_ms for s in timed)
    slowest = max(timed, key=lambda s: s.execution_time_ms)
    return {
        "average_execution_time": total / len(timed),
        "total_migration_time": total,
        "slowest_migration": {"name": slowest.name, "execution_time": slowest.execution_time_ms},
    }


def compare_environments(named_statuses: list[tuple[str, list[MigrationStatus]]]) -> dict:
    """Diff each environment against the first one."""
    if not named_statuses:
        return {"environments": [], "differences": [], "recommendations": []}

    _, baseline = named_statuses[0]
    baseline_names = [s.name for s in baseline]
    baseline_checksums = {s.name: s.checksum for s in baseline if s.checksum}

    differences = []
    for env_name, statuses in named_statuses[1:]:
        names = {s.name for s in statuses}
        checksums = {s.name: s.checksum for s in statuses if s.checksum}
        differences.append({
            "environment": env_name,
            "missing_migrations": [n for n in baseline_names if n not in names],
            "extra_migrations": [s.name for s in statuses if s.name not in set(baseline_names)],
            "checksum_mismatches": [
                {"name": name, "expected_checksum": expected, "actual_checksum": checksums[name]}
                for name, expected in baseline_checksums.items()
                if checksums.get(name) and checksums[name] != expected
            ],
        })

    recommendations = []
    if any(d["missing_migrations"] for d in differences):
        recommendations.append("Some environments are missing migrations - run migrations to sync")
    if any(d["extra_migrations"] for d in differences):
        recommendations.append("Some environments have extra migrations - check for inconsistencies")
    if any(d["checksum_mismatches"] for d in differences):
        recommendations.append("Checksum mismatches detected - migration files may have been modified")

    return {
        "environments": [name for name, _ in named_statuses],
        "differences": differences,
        "recommendations": recommendations,
    }
