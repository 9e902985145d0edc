"""Migration Admin Schemas — request/response models for /api/v1/admin migrations and usage.

Invariants:
    - POST action is one of migrate | rollback | refresh
    - Responses share one envelope: success plus either data (state) or result (action outcome)
"""

from typing import Literal

from pydantic import BaseModel, Field


class MigrationOptions(BaseModel):
    dry_run: bool = False
    target: str | None = Field(None, max_length=255)
    count: int | None = Field(None, ge=1)


class MigrationActionRequest(BaseModel):
    action: Literal["migrate", "rollback", "refresh"]
    options: MigrationOptions = Field(default_factory=MigrationOptions)


class MigrationEnvelope(BaseModel):
    success: bool
    data: dict | None = None
    result: dict | None = None


class ToolUsageCount(BaseModel):
    tool_slug: str
    user_type: str
    count: int


class ToolUsageReport(BaseModel):
    total: int
    by_tool: dict[str, int]
    rows: list[ToolUsageCount]
