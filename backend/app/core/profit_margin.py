"""Profit Margin — profit, margin and markup from a cost/selling price pair.

Invariants:
    - Both prices must be positive finite numbers, otherwise calculate returns None
    - margin is relative to selling price, markup is relative to cost price
    - is_loss iff selling < cost (break-even is not a loss)
"""

from dataclasses import dataclass

from app.core.input_validation import ValidationResult, validate_positive_number


@dataclass(frozen=True)
class ProfitMarginResult:
    profit: float
    margin_percentage: float
    markup_percentage: float
    is_loss: bool


def validate_inputs(cost_price, selling_price) -> ValidationResult:
    """First failing field wins: cost, then selling."""
    cost = validate_positive_number(cost_price, "Cost price")
    if not cost.is_valid:
        return ValidationResult(
            is_valid=False, error=cost.error, error_key=cost.error_key, field="cost_price",
        )
    selling = validate_positive_number(selling_price, "Selling price")
    if not selling.is_valid:
        return ValidationResult(
            is_valid=False, error=selling.error, error_key=selling.error_key,
            field="selling_price",
        )
    return selling


def calculate(cost_price, selling_price) -> ProfitMarginResult | None:
    if not validate_inputs(cost_price, selling_price).is_valid:
        return None

    profit = selling_price - cost_price
    return ProfitMarginResult(
        profit=profit,
        margin_percentage=profit / selling_price * 100,
        markup_percentage=profit / cost_price * 100,
        is_loss=selling_price < cost_price,
    )
