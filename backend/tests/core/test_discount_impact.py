"""Tests for discount_impact — margins, break-even volume, comparison table, warnings."""

import math

import pytest

from app.core.discount_impact import (
    CAUTION_WARNING, LOSS_WARNING,
    calculate_discounted_margin, calculate_original_margin,
    calculate_sales_increase_needed, comparison_volumes, simulate, validate_inputs,
)


def test_modest_discount_stays_viable():
    result = simulate(100, 50, 10, 100)
    assert result.original_margin == pytest.approx(50)
    assert result.discounted_price == pytest.approx(90)
    assert result.discounted_margin == pytest.approx(44.444, rel=1e-3)
    assert result.margin_reduction == pytest.approx(5.556, rel=1e-3)
    assert result.break_even_units == pytest.approx(112.5)
    assert result.sales_increase_needed == pytest.approx(12.5)
    assert result.is_viable is True
    assert result.warning is None


def test_discount_wiping_margin_is_not_viable():
    result = simulate(100, 80, 25, 50)
    assert result.discounted_margin < 0
    assert result.is_viable is False
    assert result.warning == LOSS_WARNING
    assert math.isinf(result.break_even_units)
    assert math.isinf(result.sales_increase_needed)


def test_large_margin_cut_warns_with_caution():
    result = simulate(100, 40, 30, 100)
    assert result.warning is None
    result = simulate(100, 40, 45, 100)
    assert result.is_viable is True
    assert result.warning == CAUTION_WARNING


def test_full_discount_gives_negative_infinite_margin():
    assert calculate_discounted_margin(0, 10) == -math.inf
    result = simulate(100, 10, 100, 10)
    assert result.discounted_margin == -math.inf
    assert result.is_viable is False


def test_original_margin_zero_for_non_positive_price():
    assert calculate_original_margin(0, 10) == 0


def test_sales_increase_infinite_without_current_sales():
    assert math.isinf(calculate_sales_increase_needed(10, 0))


def test_comparison_volumes_sorted_unique_with_break_even():
    volumes = comparison_volumes(100, 112.5)
    assert volumes == sorted(set(volumes))
    assert volumes[0] == 100
    assert {113, 125, 150, 200} <= set(volumes)
    assert len(volumes) == 6


def test_comparison_volumes_skip_far_break_even():
    assert 5000 not in comparison_volumes(100, 5000)
    assert comparison_volumes(0, math.inf) == [0]


def test_current_sales_row_keeps_fractional_volume():
    result = simulate(100, 50, 10, 10.5)
    volumes = [row.sales_volume for row in result.profit_comparison]
    assert volumes == [10.5, 12, 14, 16, 21]
    assert result.profit_comparison[0].original_profit == pytest.approx(10.5 * 50)


def test_comparison_rows_match_per_unit_profit():
    result = simulate(100, 50, 10, 100)
    first = result.profit_comparison[0]
    assert first.sales_volume == 100
    assert first.original_profit == pytest.approx(5000)
    assert first.discounted_profit == pytest.approx(4000)
    assert first.difference == pytest.approx(-1000)


def test_loss_rows_use_cost_directly():
    result = simulate(100, 80, 25, 10)
    row = result.profit_comparison[0]
    assert row.discounted_profit == pytest.approx(10 * (75 - 80))


@pytest.mark.parametrize("args,field,message", [
    ((None, 10, 10, 10), "original_price", "Original price is required"),
    ((0, 10, 10, 10), "original_price", "Original price must be greater than 0"),
    ((100, -1, 10, 10), "product_cost", "Product cost cannot be negative"),
    ((100, 10, -5, 10), "discount_percentage", "Discount percentage cannot be negative"),
    ((100, 10, 101, 10), "discount_percentage", "Discount percentage cannot exceed 100%"),
    ((100, 10, 10, -1), "current_monthly_sales", "Current monthly sales cannot be negative"),
])
def test_validation_messages(args, field, message):
    result = validate_inputs(*args)
    assert not result.is_valid
    assert result.field == field
    assert result.error == message
    assert simulate(*args) is None


def test_zero_cost_and_zero_sales_are_valid():
    assert validate_inputs(100, 0, 0, 0).is_valid
