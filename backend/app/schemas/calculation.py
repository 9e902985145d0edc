"""Calculation Schemas — saved calculation history API models.

Invariants:
    - inputs/outputs are JSON objects (dicts), never arrays or scalars
    - tool_slug must be a known ToolSlug
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from app.core.domain_types import ToolSlug


class CalculationCreate(BaseModel):
    tool_slug: ToolSlug
    inputs: dict
    outputs: dict


class CalculationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    tool_slug: str
    inputs: dict
    outputs: dict
    created_at: datetime


class CalculationPage(BaseModel):
    items: list[CalculationResponse]
    total: int
    limit: int
    offset: int
