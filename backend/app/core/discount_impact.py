"""Discount Impact — what a percentage discount does to margin and required volume.

Invariants:
    - discounted_margin is -inf when the discount wipes out the price
    - break_even_units and sales_increase_needed are inf when no volume recovers the profit
    - Comparison volumes are unique and ascending; current sales is always the first level
    - viable iff discounted margin > 0

Design Decisions:
    - Validation returns its own field-specific messages (cost may be zero, sales may be zero)
      instead of the generic positive-number rule used by the other calculators
"""

import math
from dataclasses import dataclass, field

from app.core.input_validation import ValidationResult

LOSS_WARNING = (
    "Warning: This discount exceeds your profit margin. Each sale will result in a loss."
)
CAUTION_WARNING = (
    "Caution: This discount significantly reduces your profit margin. "
    "Ensure increased sales volume justifies the discount."
)
VOLUME_MULTIPLIERS = (1.1, 1.25, 1.5, 2)
BREAK_EVEN_ROW_LIMIT = 10


@dataclass(frozen=True)
class ProfitComparison:
    sales_volume: float
    original_profit: float
    discounted_profit: float
    difference: float


@dataclass(frozen=True)
class DiscountImpactResult:
    original_margin: float
    discounted_price: float
    discounted_margin: float
    margin_reduction: float
    break_even_units: float
    sales_increase_needed: float
    is_viable: bool
    warning: str | None = None
    profit_comparison: list[ProfitComparison] = field(default_factory=list)


def _is_number(value) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _fail(field_name: str, message: str, key: str) -> ValidationResult:
    return ValidationResult(is_valid=False, error=message, error_key=key, field=field_name)


def validate_inputs(
    original_price, product_cost, discount_percentage, current_monthly_sales,
) -> ValidationResult:
    if not _is_number(original_price):
        return _fail("original_price", "Original price is required", "validation.required")
    if original_price <= 0:
        return _fail(
            "original_price", "Original price must be greater than 0",
            "validation.mustBePositive",
        )
    if not _is_number(product_cost):
        return _fail("product_cost", "Product cost is required", "validation.required")
    if product_cost < 0:
        return _fail(
            "product_cost", "Product cost cannot be negative", "validation.cannotBeNegative",
        )
    if not _is_number(discount_percentage):
        return _fail(
            "discount_percentage", "Discount percentage is required", "validation.required",
        )
    if discount_percentage < 0:
        return _fail(
            "discount_percentage", "Discount percentage cannot be negative",
            "validation.cannotBeNegative",
        )
    if discount_percentage > 100:
        return _fail(
            "discount_percentage", "Discount percentage cannot exceed 100%",
            "validation.percentageOutOfRange",
        )
    if not _is_number(current_monthly_sales):
        return _fail(
            "current_monthly_sales", "Current monthly sales is required", "validation.required",
        )
    if current_monthly_sales < 0:
        return _fail(
            "current_monthly_sales", "Current monthly sales cannot be negative",
            "validation.cannotBeNegative",
        )
    return ValidationResult(is_valid=True)


# --- Formulas -----------------------------------------------------------------


def calculate_original_margin(original_price: float, product_cost: float) -> float:
    if original_price <= 0:
        return 0.0
    return (original_price - product_cost) / original_price * 100


def calculate_discounted_price(original_price: float, discount_percentage: float) -> float:
    return original_price * (1 - discount_percentage / 100)


def calculate_discounted_margin(discounted_price: float, product_cost: float) -> float:
    if discounted_price <= 0:
        return -math.inf
    return (discounted_price - product_cost) / discounted_price * 100


def calculate_break_even_units(
    current_monthly_sales: float, original_margin: float, discounted_margin: float,
) -> float:
    """Units needed at the discounted margin to match today's total profit."""
    if discounted_margin <= 0:
        return math.inf
    return current_monthly_sales * (original_margin / discounted_margin)


def calculate_sales_increase_needed(
    break_even_units: float, current_monthly_sales: float,
) -> float:
    if current_monthly_sales <= 0 or math.isinf(break_even_units):
        return math.inf
    return (break_even_units / current_monthly_sales - 1) * 100


def calculate_profit_at_volume(
    sales_volume: float,
    original_price: float,
    discounted_price: float,
    original_margin: float,
    discounted_margin: float,
) -> ProfitComparison:
    original_per_unit = original_price * (original_margin / 100)
    if discounted_margin > 0:
        discounted_per_unit = discounted_price * (discounted_margin / 100)
    else:
        # cost recovered from the original margin
        discounted_per_unit = discounted_price - original_price * (1 - original_margin / 100)

    original_profit = sales_volume * original_per_unit
    discounted_profit = sales_volume * discounted_per_unit
    return ProfitComparison(
        sales_volume=sales_volume,
        original_profit=original_profit,
        discounted_profit=discounted_profit,
        difference=discounted_profit - original_profit,
    )


def comparison_volumes(current_monthly_sales: float, break_even_units: float) -> list[float]:
    levels = [current_monthly_sales]
    levels += [math.ceil(current_monthly_sales * m) for m in VOLUME_MULTIPLIERS]
    if (
        math.isfinite(break_even_units)
        and 0 < break_even_units < current_monthly_sales * BREAK_EVEN_ROW_LIMIT
    ):
        levels.append(math.ceil(break_even_units))
    return sorted(set(levels))


def generate_profit_comparison_table(
    current_monthly_sales: float,
    original_price: float,
    discounted_price: float,
    original_margin: float,
    discounted_margin: float,
    break_even_units: float,
) -> list[ProfitComparison]:
    return [
        calculate_profit_at_volume(
            volume, original_price, discounted_price, original_margin, discounted_margin,
        )
        for volume in comparison_volumes(current_monthly_sales, break_even_units)
    ]


def check_discount_viability(
    original_margin: float, discounted_margin: float,
) -> tuple[bool, str | None]:
    if discounted_margin <= 0:
        return False, LOSS_WARNING
    if discounted_margin < original_margin * 0.5:
        return True, CAUTION_WARNING
    return True, None


def simulate(
    original_price, product_cost, discount_percentage, current_monthly_sales,
) -> DiscountImpactResult | None:
    """Full simulation. None when the inputs do not validate."""
    if not validate_inputs(
        original_price, product_cost, discount_percentage, current_monthly_sales,
    ).is_valid:
        return None

    original_margin = calculate_original_margin(original_price, product_cost)
    discounted_price = calculate_discounted_price(original_price, discount_percentage)
    discounted_margin = calculate_discounted_margin(discounted_price, product_cost)
    break_even = calculate_break_even_units(
        current_monthly_sales, original_margin, discounted_margin,
    )
    is_viable, warning = check_discount_viability(original_margin, discounted_margin)

    return DiscountImpactResult(
        original_margin=original_margin,
        discounted_price=discounted_price,
        discounted_margin=discounted_margin,
        margin_reduction=original_margin - discounted_margin,
        break_even_units=break_even,
        sales_increase_needed=calculate_sales_increase_needed(break_even, current_monthly_sales),
        is_viable=is_viable,
        warning=warning,
        profit_comparison=generate_profit_comparison_table(
            current_monthly_sales, original_price, discounted_price,
            original_margin, discounted_margin, break_even,
        ),
    )
