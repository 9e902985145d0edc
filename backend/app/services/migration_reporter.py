"""Migration Reporter — summary, health and performance report for one environment.

Invariants:
    - Reads only; never runs or rolls back migrations
    - summary counts always add up to summary.total
    - HTML output escapes every value taken from files or the database

Design Decisions:
    - Analysis is pure (core.migration_report); this class gathers statuses from runners
    - HTML is a Jinja2 template (templates/migration_report.html) with inline CSS
"""

import json
from datetime import datetime, timezone
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.core.migration_report import analyze_health, analyze_performance, compare_environments
from app.core.migration_stats import calculate_stats
from app.services.migration_runner import MigrationRunner

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"

_templates = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


def render_html_report(report: dict) -> str:
    return _templates.get_template("migration_report.html").render(report=report)


class MigrationReporter:
    def __init__(self, runner: MigrationRunner, environment: str = "development"):
        self.runner = runner
        self.environment = environment

    async def generate_report(self) -> dict:
        statuses = await self.runner.get_migration_status()
        return {
            "environment": self.environment,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "summary": calculate_stats(statuses),
            "migrations": [s.to_dict() for s in statuses],
            "health": analyze_health(statuses),
            "performance": analyze_performance(statuses),
        }

    async def generate_json_report(self) -> str:
        return json.dumps(await self.generate_report(), indent=2, default=str, ensure_ascii=False)

    async def generate_html_report(self) -> str:
        return render_html_report(await self.generate_report())

    @staticmethod
    async def compare_environments(environments: list[tuple[str, MigrationRunner]]) -> dict:
        """Diff migration state across runners; the first one is the baseline."""
        named = [(name, await runner.get_migration_status()) for name, runner in environments]
        return compare_environments(named)
