"""ToolUsage ORM — one row per successful tool call, for usage analytics.

Invariants:
    - user_type is 'guest' or 'registered' (UserType)
    - Inserted after the calculation succeeded; invalid input is not counted

Design Decisions:
    - Logging table, not enforcement: no business logic reads it except the admin counts
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base


class ToolUsage(Base):
    __tablename__ = "tool_usage"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    tool_slug: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    user_type: Mapped[str] = mapped_column(String(50), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
