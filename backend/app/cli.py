"""Merchant Tools CLI — run, inspect and roll back SQL migrations from the shell.

Invariants:
    - Exit code 0 on success, 1 when a migration/rollback fails or a ToolkitError is raised
    - Each command builds its own engine and disposes it before exiting
    - --json and report --format json|html print machine-readable output only (no tables, no colors)

Design Decisions:
    - Typer over argparse: same declarative style as the FastAPI routes
    - Commands are sync wrappers around the async runner (asyncio.run per command)
"""

import asyncio
import json
from dataclasses import asdict
from enum import Enum
from pathlib import Path
from typing import Any, Awaitable, Callable, Coroutine

import typer
from rich.console import Console
from rich.table import Table

from app.config import Settings
from app.core.errors import ToolkitError
from app.core.migration_stats import calculate_stats, last_batch_id
from app.db.session import create_engine_from_settings
from app.infrastructure.observability import setup_logging
from app.services.migration_reporter import MigrationReporter
from app.services.migration_runner import MigrationRunner

app = typer.Typer(
    name="merchant-tools",
    help="Merchant Tools — SQL migration management.",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)

_STATUS_STYLES = {
    "executed": "green",
    "pending": "yellow",
    "failed": "bold red",
    "rolled_back": "cyan",
}


@app.callback()
def main(
    ctx: typer.Context,
    database_url: str | None = typer.Option(
        None, "--database-url", envvar="DATABASE_URL", help="Database URL.",
    ),
    migrations_dir: Path | None = typer.Option(
        None, "--migrations-dir", help="Directory with *.sql migration files.",
    ),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level."),
) -> None:
    """Manage SQL migrations for the Merchant Tools database."""
    overrides: dict[str, Any] = {}
    if database_url:
        overrides["database_url"] = database_url
    if migrations_dir:
        overrides["migrations_dir"] = migrations_dir
    settings = Settings(**overrides)
    setup_logging(log_level, "text")
    ctx.obj = settings


def _with_runner(ctx: typer.Context, action: Callable[[MigrationRunner], Awaitable[Any]]) -> Any:
    settings: Settings = ctx.obj

    async def _run_with_engine():
        engine = create_engine_from_settings(settings)
        try:
            return await action(MigrationRunner(engine, settings.migrations_dir))
        finally:
            await engine.dispose()

    return _run(_run_with_engine())


def _run(coro: Coroutine[Any, Any, Any]) -> Any:
    try:
        return asyncio.run(coro)
    except ToolkitError as e:
        err_console.print(f"[bold red]Error[/bold red] ({e.code}): {e.message}")
        raise typer.Exit(code=1)


def _print_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, default=str, ensure_ascii=False))


@app.command()
def status(
    ctx: typer.Context,
    json_out: bool = typer.Option(False, "--json", help="JSON output."),
) -> None:
    """Show the status of every migration file."""
    statuses = _with_runner(ctx, lambda runner: runner.get_migration_status())
    stats = calculate_stats(statuses)

    if json_out:
        _print_json({
            "stats": stats,
            "migrations": [s.to_dict() for s in statuses],
            "last_batch_id": last_batch_id(statuses),
        })
        return

    table = Table(title="Migrations")
    table.add_column("Name")
    table.add_column("Status")
    table.add_column("Executed at")
    table.add_column("Time (ms)", justify="right")
    table.add_column("Batch")
    for s in statuses:
        style = _STATUS_STYLES.get(s.status.value, "")
        table.add_row(
            s.name,
            f"[{style}]{s.status.value}[/{style}]" if style else s.status.value,
            s.executed_at.isoformat() if s.executed_at else "-",
            str(s.execution_time_ms) if s.execution_time_ms is not None else "-",
            s.batch_id or "-",
        )
    console.print(table)
    console.print(
        f"total={stats['total']} executed={stats['executed']} pending={stats['pending']} "
        f"failed={stats['failed']} rolled_back={stats['rolled_back']}"
    )


@app.command()
def migrate(
    ctx: typer.Context,
    dry_run: bool = typer.Option(False, "--dry-run", help="List pending migrations only."),
    target: str | None = typer.Option(None, "--target", help="Stop after this migration."),
    json_out: bool = typer.Option(False, "--json", help="JSON output."),
) -> None:
    """Run pending migrations."""
    result = _with_runner(
        ctx, lambda runner: runner.run_migrations(dry_run=dry_run, target=target),
    )

    if json_out:
        _print_json(asdict(result))
    elif dry_run:
        console.print(f"Dry run ({result.batch_id}): {len(result.skipped)} migration(s) would be executed")
        for name in result.skipped:
            console.print(f"  {name}")
    else:
        for name in result.executed:
            console.print(f"[green]executed[/green] {name}")
        for name in result.failed:
            console.print(f"[bold red]failed[/bold red]   {name}: {result.error}")
        console.print(f"Batch {result.batch_id} finished in {result.total_time_ms} ms")

    if not result.success:
        raise typer.Exit(code=1)


@app.command()
def rollback(
    ctx: typer.Context,
    count: int | None = typer.Option(None, "--count", "-n", min=1, help="Roll back the newest N."),
    target: str | None = typer.Option(
        None, "--target", "--to", help="Roll back everything after this migration.",
    ),
    json_out: bool = typer.Option(False, "--json", help="JSON output."),
) -> None:
    """Roll back executed migrations, newest first."""
    result = _with_runner(
        ctx, lambda runner: runner.rollback_migrations(target=target, count=count),
    )

    if json_out:
        _print_json(asdict(result))
    else:
        for name in result.rolled_back:
            console.print(f"[cyan]rolled back[/cyan] {name}")
        for name in result.failed:
            console.print(f"[bold red]failed[/bold red]      {name}: {result.error}")

    if not result.success:
        raise typer.Exit(code=1)


# --- Reports ------------------------------------------------------------------


class ReportFormat(str, Enum):
    CONSOLE = "console"
    JSON = "json"
    HTML = "html"


def _print_report_summary(report: dict) -> None:
    summary, health, perf = report["summary"], report["health"], report["performance"]
    console.print(f"[bold]Migration Report - {report['environment']}[/bold]")
    console.print(f"Generated: {report['timestamp']}\n")

    table = Table(title="Summary", show_header=False)
    for key in ("total", "executed", "pending", "failed", "rolled_back"):
        table.add_row(key.replace("_", " ").capitalize(), str(summary[key]))
    console.print(table)

    style = {"healthy": "green", "warning": "yellow"}.get(health["status"], "bold red")
    console.print(f"Health: [{style}]{health['status'].upper()}[/{style}]")
    for issue in health["issues"]:
        console.print(f"  issue: {issue}")
    for rec in health["recommendations"]:
        console.print(f"  recommendation: {rec}")

    console.print(
        f"Average execution time: {perf['average_execution_time']:.0f}ms, "
        f"total: {perf['total_migration_time'] / 1000:.1f}s"
    )
    if perf["slowest_migration"]:
        slowest = perf["slowest_migration"]
        console.print(f"Slowest migration: {slowest['name']} ({slowest['execution_time']}ms)")


@app.command()
def report(
    ctx: typer.Context,
    environment: str | None = typer.Option(None, "--environment", "-e", help="Environment label."),
    fmt: ReportFormat = typer.Option(ReportFormat.CONSOLE, "--format", "-f", help="Output format."),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Write the json/html report to this file.",
    ),
) -> None:
    """Health and performance report as console summary, JSON or HTML."""
    if output is not None and fmt is ReportFormat.CONSOLE:
        raise typer.BadParameter("--output needs --format json or html", param_hint="--output")

    settings: Settings = ctx.obj
    label = environment or settings.environment

    async def _build(runner: MigrationRunner):
        reporter = MigrationReporter(runner, label)
        if fmt is ReportFormat.JSON:
            return await reporter.generate_json_report()
        if fmt is ReportFormat.HTML:
            return await reporter.generate_html_report()
        return await reporter.generate_report()

    content = _with_runner(ctx, _build)

    if fmt is ReportFormat.CONSOLE:
        _print_report_summary(content)
    elif output is not None:
        output.write_text(content, encoding="utf-8")
        err_console.print(f"Report saved to {output.resolve()}")
    else:
        typer.echo(content)


def _parse_environment(value: str) -> tuple[str, str]:
    name, sep, url = value.partition("=")
    if not sep or not name or not url:
        raise typer.BadParameter(f"expected NAME=DATABASE_URL, got {value!r}", param_hint="--env")
    return name, url


@app.command()
def compare(
    ctx: typer.Context,
    environments: list[str] = typer.Option(
        ..., "--env", help="NAME=DATABASE_URL; repeat for each environment, first is the baseline.",
    ),
) -> None:
    """Compare migration state across databases against the same migrations directory."""
    settings: Settings = ctx.obj
    parsed = [_parse_environment(value) for value in environments]
    if len(parsed) < 2:
        raise typer.BadParameter("at least two environments are required", param_hint="--env")

    async def _compare():
        engines = [
            create_engine_from_settings(Settings(**{**settings.model_dump(), "database_url": url}))
            for _, url in parsed
        ]
        try:
            runners = [
                (name, MigrationRunner(engine, settings.migrations_dir))
                for (name, _), engine in zip(parsed, engines)
            ]
            return await MigrationReporter.compare_environments(runners)
        finally:
            for engine in engines:
                await engine.dispose()

    _print_json(_run(_compare()))
