"""Size Conversion — chart lookups, recommendation and validation.

Invariants:
    - Chart rows line up by index across every system
    - Recommendations are expressed in the CN system
"""

import pytest

from app.core.domain_types import FitConfidence, SizeCategory, SizeSystem
from app.core.size_conversion import (
    SIZE_CHARTS, available_sizes, convert_size, format_measurement_range,
    is_valid_size, recommend_size, size_comparison_table, validate_conversion,
)


def test_every_chart_is_aligned_across_systems():
    for chart in SIZE_CHARTS.values():
        lengths = {len(labels) for labels in chart.sizes.values()}
        assert lengths == {len(chart)}
        for measurements in (chart.chest, chart.waist, chart.hip, chart.foot_length):
            assert len(measurements) in (0, len(chart))


def test_convert_men_cn_to_all_systems():
    result = convert_size("men-clothing", "CN", "M")
    assert result.sizes == {
        SizeSystem.CN: "M", SizeSystem.US: "S", SizeSystem.EU: "46", SizeSystem.UK: "36",
    }
    assert result.chest == (91, 96)
    assert result.hip is None


def test_same_label_in_different_systems_maps_to_different_rows():
    from_us = convert_size("women-clothing", "US", "10-12")
    from_uk = convert_size("women-clothing", "UK", "10-12")
    assert from_us.sizes[SizeSystem.CN] == "L"
    assert from_uk.sizes[SizeSystem.CN] == "M"
    assert from_uk.sizes[SizeSystem.US] == "6-8"


def test_shoe_conversion_carries_foot_length():
    result = convert_size(SizeCategory.SHOES, SizeSystem.US, "4.5")
    assert result.sizes[SizeSystem.EU] == "36"
    assert result.foot_length == 23


@pytest.mark.parametrize("args,key", [
    (("hats", "CN", "M"), "validation.invalidCategory"),
    (("shoes", "JP", "40"), "validation.invalidSizeSystem"),
    (("shoes", "EU", "  "), "validation.required"),
    (("shoes", "EU", "99"), "validation.sizeNotFound"),
])
def test_validate_conversion_reports_first_problem(args, key):
    assert validate_conversion(*args) == key
    assert convert_size(*args) is None


def test_is_valid_size_is_exact_match():
    assert is_valid_size(SizeCategory.SHOES, SizeSystem.UK, "2.5")
    assert not is_valid_size(SizeCategory.SHOES, SizeSystem.UK, "2.50")


def test_recommend_by_chest_inside_range():
    result = recommend_size("men-clothing", chest=93)
    assert result.recommended_size == "M"
    assert result.system is SizeSystem.CN
    assert result.confidence is FitConfidence.EXACT


def test_recommend_range_boundary_keeps_earlier_row():
    assert recommend_size("men-clothing", chest=91).recommended_size == "S"


def test_recommend_outside_chart_is_approximate():
    result = recommend_size("men-clothing", chest=130)
    assert result.recommended_size == "XXXL"
    assert result.confidence is FitConfidence.APPROXIMATE


def test_recommend_falls_through_to_hip():
    assert recommend_size("women-clothing", hip=95).recommended_size == "L"


def test_recommend_ignores_uncharted_measurement():
    assert recommend_size("kids-clothing", hip=60) is None


def test_recommend_shoes_by_foot_length():
    close = recommend_size("shoes", foot_length=24.2)
    assert close.recommended_size == "38"
    assert close.confidence is FitConfidence.EXACT

    far = recommend_size("shoes", foot_length=31)
    assert far.recommended_size == "45"
    assert far.confidence is FitConfidence.APPROXIMATE


def test_recommend_requires_positive_measurement():
    assert recommend_size("shoes", chest=100) is None
    assert recommend_size("men-clothing", chest=0) is None
    assert recommend_size("aprons", chest=90) is None


def test_comparison_table_lists_every_row():
    table = size_comparison_table(SizeCategory.KIDS_CLOTHING)
    assert table["headers"] == ["CN", "US", "EU", "UK"]
    assert table["rows"][0] == ["100", "3T", "98", "3-4"]
    assert len(table["rows"]) == 7


def test_available_sizes_and_range_format():
    assert available_sizes(SizeCategory.WOMEN_CLOTHING, SizeSystem.CN) == [
        "S", "M", "L", "XL", "XXL",
    ]
    assert format_measurement_range((86, 91)) == "86-91 cm"
