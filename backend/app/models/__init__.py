"""ORM Models — SQLAlchemy declarative models for saved calculations, usage and migrations.

Invariants:
    - Application models inherit from Base (db/base.py); tracking models from TrackingBase
    - Calculations are scoped by user_id

Design Decisions:
    - One file per entity for locality
    - All models imported here so metadata is complete before create_all or Alembic runs
"""

from app.models.calculation import Calculation  # noqa: F401
from app.models.tool_usage import ToolUsage  # noqa: F401
from app.models.migration_record import MigrationRecord, MigrationRollback  # noqa: F401
