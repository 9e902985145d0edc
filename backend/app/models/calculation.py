"""Calculation ORM — a saved calculator run (inputs and outputs) owned by one user.

Invariants:
    - user_id is the caller identity from X-User-Id (trusted from upstream)
    - inputs and outputs are JSON objects, stored as submitted/returned
    - Rows are only ever read or deleted through the owner's user_id

Design Decisions:
    - JSON columns for inputs/outputs: every tool has a different shape (ADR: one table, many tools)
    - Composite index (user_id, created_at) backs the paginated history list
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base


class Calculation(Base):
    """Saved calculation — one row per user-saved tool result."""
    __tablename__ = "calculations"
    __table_args__ = (
        Index("ix_calculations_user_created", "user_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    tool_slug: Mapped[str] = mapped_column(String(100), nullable=False)
    inputs: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    outputs: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
