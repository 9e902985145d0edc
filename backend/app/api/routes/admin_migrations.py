"""Admin Migrations — inspect, run and roll back SQL migrations; tool usage counts.

Invariants:
    - Every route requires the admin key (require_admin_key) when one is configured
    - GET never changes the database (dry runs and reports included)
    - A failed batch is reported in result (success=false) with HTTP 200; only bad
      requests (unknown target, missing count/target) become error responses

Design Decisions:
    - Runner injected via get_migration_runner so tests swap in a temp migrations dir
    - Response envelope {success, data | result} mirrors the dashboard's expectations
"""

import logging
from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_migration_runner, require_admin_key
from app.config import Settings, get_settings
from app.core.migration_plan import MigrationStatus
from app.core.migration_stats import (
    calculate_stats, last_batch_id, total_execution_time, unique_batch_ids,
)
from app.infrastructure.database import get_db
from app.models.tool_usage import ToolUsage
from app.schemas.migration import (
    MigrationActionRequest, MigrationEnvelope, ToolUsageCount, ToolUsageReport,
)
from app.services.migration_reporter import MigrationReporter
from app.services.migration_runner import MigrationRunner

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api/v1/admin", tags=["admin"], dependencies=[Depends(require_admin_key)],
)


def _overview(statuses: list[MigrationStatus]) -> dict:
    return {
        "stats": calculate_stats(statuses),
        "migrations": [s.to_dict() for s in statuses],
        "last_batch_id": last_batch_id(statuses),
    }


def _run_message(dry_run: bool, result) -> str:
    if dry_run:
        return f"Dry run completed. {len(result.skipped)} migration(s) would be executed."
    if result.success:
        return f"Successfully executed {len(result.executed)} migration(s)."
    return f"Migration failed. {len(result.executed)} executed, {len(result.failed)} failed."


def _rollback_message(result) -> str:
    if result.success:
        return f"Successfully rolled back {len(result.rolled_back)} migration(s)."
    return (
        f"Rollback failed. {len(result.rolled_back)} rolled back, "
        f"{len(result.failed)} failed."
    )


@router.get("/migrations", response_model=MigrationEnvelope)
async def get_migrations(
    action: Literal["status", "files", "stats", "report"] = Query("status"),
    runner: MigrationRunner = Depends(get_migration_runner),
    settings: Settings = Depends(get_settings),
):
    if action == "files":
        files = runner.get_migration_files()
        return MigrationEnvelope(success=True, data={
            "files": [
                {"name": f.name, "timestamp": f.timestamp, "checksum": f.checksum}
                for f in files
            ],
        })

    if action == "report":
        report = await MigrationReporter(runner, settings.environment).generate_report()
        return MigrationEnvelope(success=True, data=report)

    statuses = await runner.get_migration_status()
    if action == "stats":
        return MigrationEnvelope(success=True, data={
            "stats": calculate_stats(statuses),
            "total_execution_time_ms": total_execution_time(statuses),
            "batch_ids": unique_batch_ids(statuses),
        })
    return MigrationEnvelope(success=True, data=_overview(statuses))


@router.post("/migrations", response_model=MigrationEnvelope)
async def post_migrations(
    body: MigrationActionRequest,
    runner: MigrationRunner = Depends(get_migration_runner),
):
    options = body.options
    logger.info(f"Admin migration action: {body.action}", extra={"migration": options.target})

    if body.action == "migrate":
        result = await runner.run_migrations(dry_run=options.dry_run, target=options.target)
        return MigrationEnvelope(success=True, result={
            "success": result.success,
            "executed": result.executed,
            "failed": result.failed,
            "skipped": result.skipped,
            "total_time_ms": result.total_time_ms,
            "batch_id": result.batch_id,
            "error": result.error,
            "message": _run_message(options.dry_run, result),
        })

    if body.action == "rollback":
        result = await runner.rollback_migrations(target=options.target, count=options.count)
        return MigrationEnvelope(success=True, result={
            "success": result.success,
            "rolled_back": result.rolled_back,
            "failed": result.failed,
            "total_time_ms": result.total_time_ms,
            "error": result.error,
            "message": _rollback_message(result),
        })

    statuses = await runner.get_migration_status()
    return MigrationEnvelope(
        success=True,
        data=_overview(statuses),
        result={"success": True, "message": "Migration status refreshed successfully."},
    )


@router.get("/tool-usage", response_model=ToolUsageReport)
async def get_tool_usage(db: AsyncSession = Depends(get_db)):
    """Usage counts grouped by tool and user type."""
    result = await db.execute(
        select(ToolUsage.tool_slug, ToolUsage.user_type, func.count())
        .group_by(ToolUsage.tool_slug, ToolUsage.user_type)
        .order_by(ToolUsage.tool_slug, ToolUsage.user_type),
    )
    rows = [
        ToolUsageCount(tool_slug=slug, user_type=user_type, count=count)
        for slug, user_type, count in result.all()
    ]
    by_tool: dict[str, int] = {}
    for row in rows:
        by_tool[row.tool_slug] = by_tool.get(row.tool_slug, 0) + row.count
    return ToolUsageReport(total=sum(by_tool.values()), by_tool=by_tool, rows=rows)
