"""Calculation History — save, list, fetch and delete a user's calculator results.

Invariants:
    - Every query is filtered by the caller's X-User-Id; another user's id yields 404, not 403
    - List is newest first with limit/offset pagination and an optional tool_slug filter

Design Decisions:
    - get_calculation_or_404 shared by GET and DELETE (DRY over duplication)
    - 404 over 403 for foreign ids: existence of other users' rows is not disclosed
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_user_id
from app.core.domain_types import ToolSlug
from app.core.errors import ResourceNotFoundError
from app.infrastructure.database import get_db
from app.models.calculation import Calculation
from app.schemas.calculation import CalculationCreate, CalculationPage, CalculationResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/calculations", tags=["calculations"])


async def get_calculation_or_404(
    calculation_id: UUID, user_id: str, db: AsyncSession,
) -> Calculation:
    result = await db.execute(
        select(Calculation).where(
            Calculation.id == calculation_id, Calculation.user_id == user_id,
        ),
    )
    calculation = result.scalar_one_or_none()
    if not calculation:
        raise ResourceNotFoundError("Calculation", str(calculation_id))
    return calculation


@router.post("", response_model=CalculationResponse, status_code=status.HTTP_201_CREATED)
async def save_calculation(
    body: CalculationCreate,
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
):
    calculation = Calculation(
        user_id=user_id,
        tool_slug=body.tool_slug.value,
        inputs=body.inputs,
        outputs=body.outputs,
    )
    db.add(calculation)
    await db.commit()
    await db.refresh(calculation)
    logger.info(
        "Calculation saved",
        extra={"calculation_id": str(calculation.id), "tool_slug": calculation.tool_slug},
    )
    return calculation


@router.get("", response_model=CalculationPage)
async def list_calculations(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    tool_slug: ToolSlug | None = Query(None),
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Newest first, scoped to the caller."""
    conditions = [Calculation.user_id == user_id]
    if tool_slug is not None:
        conditions.append(Calculation.tool_slug == tool_slug.value)

    total = (await db.execute(
        select(func.count()).select_from(Calculation).where(*conditions),
    )).scalar_one()
    result = await db.execute(
        select(Calculation)
        .where(*conditions)
        .order_by(Calculation.created_at.desc())
        .limit(limit)
        .offset(offset),
    )
    return CalculationPage(
        items=[CalculationResponse.model_validate(c) for c in result.scalars().all()],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/{calculation_id}", response_model=CalculationResponse)
async def get_calculation(
    calculation_id: UUID,
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await get_calculation_or_404(calculation_id, user_id, db)


@router.delete("/{calculation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_calculation(
    calculation_id: UUID,
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
):
    calculation = await get_calculation_or_404(calculation_id, user_id, db)
    await db.delete(calculation)
    await db.commit()
    logger.info("Calculation deleted", extra={"calculation_id": str(calculation_id)})
