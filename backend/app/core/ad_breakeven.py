"""Ad Break-Even — how many sales (and visits) an ad budget needs to pay for itself.

Invariants:
    - viable iff selling price > product cost
    - Unbounded quantities are math.inf, never an exception
    - max_cpc is 0 when each sale loses money
"""

import math
from dataclasses import dataclass

from app.core.input_validation import ValidationResult, validate_positive_number


@dataclass(frozen=True)
class AdBreakevenResult:
    profit_per_sale: float
    break_even_sales: float
    required_traffic: float
    max_cpc: float
    is_viable: bool


def _field_error(result: ValidationResult, field: str) -> ValidationResult:
    return ValidationResult(
        is_valid=False, error=result.error, error_key=result.error_key, field=field,
    )


def validate_inputs(selling_price, product_cost, ad_spend, conversion_rate) -> ValidationResult:
    for value, field, label in (
        (selling_price, "selling_price", "Selling price"),
        (product_cost, "product_cost", "Product cost"),
        (ad_spend, "ad_spend", "Ad spend"),
        (conversion_rate, "conversion_rate", "Conversion rate"),
    ):
        result = validate_positive_number(value, label)
        if not result.is_valid:
            return _field_error(result, field)

    if conversion_rate > 100:
        return ValidationResult(
            is_valid=False,
            error="Conversion rate must be between 0 and 100",
            error_key="validation.percentageOutOfRange",
            field="conversion_rate",
        )
    return ValidationResult(is_valid=True)


def calculate_profit_per_sale(selling_price: float, product_cost: float) -> float:
    return selling_price - product_cost


def calculate_break_even_sales(ad_spend: float, profit_per_sale: float) -> float:
    if profit_per_sale <= 0:
        return math.inf
    return ad_spend / profit_per_sale


def calculate_required_traffic(break_even_sales: float, conversion_rate: float) -> float:
    if conversion_rate <= 0:
        return math.inf
    return break_even_sales / (conversion_rate / 100)


def calculate_max_cpc(profit_per_sale: float, conversion_rate: float) -> float:
    if profit_per_sale <= 0:
        return 0.0
    return profit_per_sale * conversion_rate / 100


def calculate(selling_price, product_cost, ad_spend, conversion_rate) -> AdBreakevenResult | None:
    if not validate_inputs(selling_price, product_cost, ad_spend, conversion_rate).is_valid:
        return None

    profit_per_sale = calculate_profit_per_sale(selling_price, product_cost)
    break_even = calculate_break_even_sales(ad_spend, profit_per_sale)
    return AdBreakevenResult(
        profit_per_sale=profit_per_sale,
        break_even_sales=break_even,
        required_traffic=calculate_required_traffic(break_even, conversion_rate),
        max_cpc=calculate_max_cpc(profit_per_sale, conversion_rate),
        is_viable=selling_price > product_cost,
    )
