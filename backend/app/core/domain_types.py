"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - CalculationId wraps UUID, BatchId wraps str — never bare primitives in domain logic
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

CalculationId = NewType("CalculationId", UUID)
BatchId = NewType("BatchId", str)


# ─── Enums ───────────────────────────────────────────────────────

class Locale(str, Enum):
    """Supported response locales."""
    AR = "ar"
    EN = "en"


class ToolSlug(str, Enum):
    """Calculator tools exposed by the API — also the calculations.tool_slug column."""
    PROFIT_MARGIN = "profit-margin"
    AD_BREAKEVEN = "ad-breakeven"
    DISCOUNT_IMPACT = "discount-impact"
    SIZE_CONVERTER = "size-converter"
    COLOR_CONVERTER = "color-converter"
    DUPLICATE_REMOVER = "duplicate-remover"


class MigrationState(str, Enum):
    """Per-file migration state reported by the runner."""
    PENDING = "pending"
    EXECUTED = "executed"
    FAILED = "failed"
    ROLLED_BACK = "rolled_back"


class SizeCategory(str, Enum):
    MEN_CLOTHING = "men-clothing"
    WOMEN_CLOTHING = "women-clothing"
    KIDS_CLOTHING = "kids-clothing"
    SHOES = "shoes"


class SizeSystem(str, Enum):
    CN = "CN"
    US = "US"
    EU = "EU"
    UK = "UK"


class FitConfidence(str, Enum):
    """How well a measurement matched the recommended size."""
    EXACT = "exact"
    APPROXIMATE = "approximate"


class HealthStatus(str, Enum):
    """Overall migration health in reports."""
    HEALTHY = "healthy"
    WARNING = "warning"
    ERROR = "error"


class UserType(str, Enum):
    """Who used a tool — maps to tool_usage.user_type."""
    GUEST = "guest"
    REGISTERED = "registered"
