"""Tests for color_converter — format detection and HEX/RGB/HSL conversion."""

import pytest

from app.core.color_converter import (
    HSL, RGB, format_hsl, format_rgb, hex_to_rgb, hsl_to_rgb,
    is_valid_hex, normalize_hex, parse_color, rgb_to_hex, rgb_to_hsl,
)


def test_hex_input_produces_all_formats():
    result = parse_color("#ff0000")
    assert result.is_valid
    assert result.hex == "#FF0000"
    assert result.rgb == RGB(255, 0, 0)
    assert result.hsl == HSL(0, 100, 50)


def test_short_hex_is_expanded():
    assert normalize_hex("#abc") == "AABBCC"
    assert parse_color("fff").hsl == HSL(0, 0, 100)


def test_rgb_function_syntax():
    result = parse_color("rgb(0, 128, 255)")
    assert result.hex == "#0080FF"


def test_bare_triple_reads_as_rgb():
    assert parse_color("10, 20, 30").rgb == RGB(10, 20, 30)


def test_hsl_input_converted_to_rgb():
    result = parse_color("hsl(120, 100%, 50%)")
    assert result.rgb == RGB(0, 255, 0)
    assert result.hex == "#00FF00"
    assert result.hsl == HSL(120, 100, 50)


@pytest.mark.parametrize("text", ["rgb(300, 0, 0)", "hsl(400, 50%, 50%)", "#12345", "blue"])
def test_invalid_colors(text):
    result = parse_color(text)
    assert not result.is_valid
    assert result.error_key == "validation.invalidColor"


def test_empty_color():
    result = parse_color("   ")
    assert result.error_key == "validation.emptyColor"
    assert result.error == "Please enter a color value"


def test_grey_has_zero_saturation():
    assert rgb_to_hsl(RGB(128, 128, 128)) == HSL(0, 0, 50)
    assert hsl_to_rgb(HSL(0, 0, 50)) == RGB(128, 128, 128)


def test_hex_helpers():
    assert is_valid_hex("#A1b2C3")
    assert not is_valid_hex("#GGGGGG")
    assert hex_to_rgb("nope") is None
    assert rgb_to_hex(RGB(0, 0, 0)) == "#000000"


def test_display_formats():
    assert format_rgb(RGB(1, 2, 3)) == "rgb(1, 2, 3)"
    assert format_hsl(HSL(10, 20, 30)) == "hsl(10, 20%, 30%)"


@pytest.mark.parametrize("hex_value", ["#000000", "#FFFFFF", "#3366CC", "#7F7F80", "#0A1B2C"])
def test_hex_rgb_hex_is_identity(hex_value):
    assert rgb_to_hex(hex_to_rgb(hex_value)) == hex_value


@pytest.mark.parametrize("rgb", [RGB(255, 0, 0), RGB(12, 200, 99), RGB(240, 240, 10), RGB(1, 2, 3)])
def test_rgb_hsl_rgb_within_rounding(rgb):
    back = hsl_to_rgb(rgb_to_hsl(rgb))
    assert abs(back.r - rgb.r) <= 3
    assert abs(back.g - rgb.g) <= 3
    assert abs(back.b - rgb.b) <= 3


def test_short_hex_equals_expanded_form():
    assert parse_color("#1af") == parse_color("#11AAFF")
