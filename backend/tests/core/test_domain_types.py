"""Domain Types — verifies identity wrappers and enum values.

Tests:
    - NewType wrappers are transparent at runtime
    - Enum values match the wire/database strings
"""

from uuid import uuid4

from app.core.domain_types import (
    BatchId, CalculationId, HealthStatus, Locale, MigrationState,
    SizeCategory, SizeSystem, ToolSlug, UserType,
)


def test_identity_types_wrap_primitives():
    uid = uuid4()
    assert CalculationId(uid) == uid
    assert BatchId("batch_1_abc") == "batch_1_abc"


def test_tool_slugs_match_url_segments():
    assert {t.value for t in ToolSlug} == {
        "profit-margin", "ad-breakeven", "discount-impact",
        "size-converter", "color-converter", "duplicate-remover",
    }


def test_migration_state_has_four_states():
    assert [s.value for s in MigrationState] == [
        "pending", "executed", "failed", "rolled_back",
    ]


def test_str_enums_compare_equal_to_values():
    assert Locale.AR == "ar"
    assert SizeSystem("EU") is SizeSystem.EU
    assert SizeCategory("kids-clothing") is SizeCategory.KIDS_CLOTHING
    assert HealthStatus.WARNING.value == "warning"
    assert UserType.GUEST.value == "guest"
