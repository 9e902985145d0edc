"""Tests for profit_margin — margin vs markup, loss detection, validation order."""

import pytest

from app.core.profit_margin import calculate, validate_inputs


def test_margin_and_markup_for_typical_product():
    result = calculate(60, 100)
    assert result.profit == 40
    assert result.margin_percentage == pytest.approx(40.0)
    assert result.markup_percentage == pytest.approx(66.6667, rel=1e-4)
    assert result.is_loss is False


def test_selling_below_cost_is_a_loss():
    result = calculate(120, 100)
    assert result.profit == -20
    assert result.margin_percentage == pytest.approx(-20.0)
    assert result.is_loss is True


def test_break_even_is_not_a_loss():
    result = calculate(50, 50)
    assert result.profit == 0
    assert result.is_loss is False


def test_markup_is_never_below_margin_when_profitable():
    for cost, price in [(1, 2), (30, 45), (99, 100)]:
        result = calculate(cost, price)
        assert result.markup_percentage >= result.margin_percentage


def test_invalid_cost_reported_before_selling():
    result = validate_inputs(0, -1)
    assert result.field == "cost_price"
    assert result.error_key == "validation.mustBePositive"


def test_invalid_selling_price_returns_none():
    assert validate_inputs(10, None).field == "selling_price"
    assert calculate(10, None) is None
