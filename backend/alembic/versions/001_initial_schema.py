"""Initial schema — calculations and tool_usage.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "calculations",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("tool_slug", sa.String(100), nullable=False),
        sa.Column("inputs", sa.JSON, nullable=False),
        sa.Column("outputs", sa.JSON, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(
        "ix_calculations_user_created", "calculations", ["user_id", "created_at"],
    )

    op.create_table(
        "tool_usage",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("tool_slug", sa.String(100), nullable=False),
        sa.Column("user_type", sa.String(50), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_tool_usage_tool_slug", "tool_usage", ["tool_slug"])


def downgrade() -> None:
    op.drop_index("ix_tool_usage_tool_slug", table_name="tool_usage")
    op.drop_table("tool_usage")
    op.drop_index("ix_calculations_user_created", table_name="calculations")
    op.drop_table("calculations")
