"""Color Converter — HEX, RGB and HSL conversions for product listings.

Invariants:
    - Hex strings are normalized to six upper-case digits without '#'
    - Channel values are integers: r/g/b in [0, 255], h in [0, 360], s/l in [0, 100]
    - parse_color tries HEX, then RGB, then HSL; bare "a, b, c" triples read as RGB

Design Decisions:
    - Half-up rounding everywhere (round() would bank 0.5 to even and shift channels)
"""

import math
import re
from dataclasses import dataclass

EMPTY_COLOR_ERROR = "Please enter a color value"
INVALID_COLOR_ERROR = (
    "Invalid color format. Use HEX (#FF0000), RGB (255, 0, 0), or HSL (0, 100, 50)"
)

_HEX_PATTERN = re.compile(r"^#?[0-9A-Fa-f]{3}$|^#?[0-9A-Fa-f]{6}$")
_RGB_PATTERN = re.compile(
    r"^(?:rgb\s*\(\s*)?(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*\)?$", re.IGNORECASE,
)
_HSL_PATTERN = re.compile(
    r"^(?:hsl\s*\(\s*)?(\d{1,3})\s*,\s*(\d{1,3})%?\s*,\s*(\d{1,3})%?\s*\)?$", re.IGNORECASE,
)


@dataclass(frozen=True)
class RGB:
    r: int
    g: int
    b: int


@dataclass(frozen=True)
class HSL:
    h: int
    s: int
    l: int  # noqa: E741


@dataclass(frozen=True)
class ColorResult:
    is_valid: bool
    hex: str = ""
    rgb: RGB = RGB(0, 0, 0)
    hsl: HSL = HSL(0, 0, 0)
    error: str | None = None
    error_key: str | None = None


def _round(value: float) -> int:
    return math.floor(value + 0.5)


def normalize_hex(value: str) -> str:
    digits = value.strip().lstrip("#")
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    return digits.upper()


def is_valid_hex(value: str) -> bool:
    return bool(_HEX_PATTERN.match(value.strip()))


def hex_to_rgb(value: str) -> RGB | None:
    if not is_valid_hex(value):
        return None
    digits = normalize_hex(value)
    return RGB(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def rgb_to_hex(rgb: RGB) -> str:
    def channel(v: float) -> str:
        return f"{max(0, min(255, _round(v))):02X}"
    return "#" + channel(rgb.r) + channel(rgb.g) + channel(rgb.b)


def rgb_to_hsl(rgb: RGB) -> HSL:
    r, g, b = rgb.r / 255, rgb.g / 255, rgb.b / 255
    high, low = max(r, g, b), min(r, g, b)
    lightness = (high + low) / 2
    hue = saturation = 0.0

    if high != low:
        d = high - low
        saturation = d / (2 - high - low) if lightness > 0.5 else d / (high + low)
        if high == r:
            hue = ((g - b) / d + (6 if g < b else 0)) / 6
        elif high == g:
            hue = ((b - r) / d + 2) / 6
        else:
            hue = ((r - g) / d + 4) / 6

    return HSL(_round(hue * 360), _round(saturation * 100), _round(lightness * 100))


def _hue_to_channel(p: float, q: float, t: float) -> float:
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1 / 6:
        return p + (q - p) * 6 * t
    if t < 1 / 2:
        return q
    if t < 2 / 3:
        return p + (q - p) * (2 / 3 - t) * 6
    return p


def hsl_to_rgb(hsl: HSL) -> RGB:
    h, s, lightness = hsl.h / 360, hsl.s / 100, hsl.l / 100
    if s == 0:
        r = g = b = lightness
    else:
        q = lightness * (1 + s) if lightness < 0.5 else lightness + s - lightness * s
        p = 2 * lightness - q
        r = _hue_to_channel(p, q, h + 1 / 3)
        g = _hue_to_channel(p, q, h)
        b = _hue_to_channel(p, q, h - 1 / 3)
    return RGB(_round(r * 255), _round(g * 255), _round(b * 255))


def parse_rgb_string(text: str) -> RGB | None:
    match = _RGB_PATTERN.match(text.strip())
    if not match:
        return None
    r, g, b = (int(v) for v in match.groups())
    if max(r, g, b) > 255:
        return None
    return RGB(r, g, b)


def parse_hsl_string(text: str) -> HSL | None:
    match = _HSL_PATTERN.match(text.strip())
    if not match:
        return None
    h, s, lightness = (int(v) for v in match.groups())
    if h > 360 or s > 100 or lightness > 100:
        return None
    return HSL(h, s, lightness)


def parse_color(text: str) -> ColorResult:
    """Detect the input format and return the color in all three."""
    trimmed = (text or "").strip()
    if not trimmed:
        return ColorResult(
            is_valid=False, error=EMPTY_COLOR_ERROR, error_key="validation.emptyColor",
        )

    if _HEX_PATTERN.match(trimmed):
        rgb = hex_to_rgb(trimmed)
        return ColorResult(
            is_valid=True, hex="#" + normalize_hex(trimmed), rgb=rgb, hsl=rgb_to_hsl(rgb),
        )

    rgb = parse_rgb_string(trimmed)
    if rgb is not None:
        return ColorResult(is_valid=True, hex=rgb_to_hex(rgb), rgb=rgb, hsl=rgb_to_hsl(rgb))

    hsl = parse_hsl_string(trimmed)
    if hsl is not None:
        rgb = hsl_to_rgb(hsl)
        return ColorResult(is_valid=True, hex=rgb_to_hex(rgb), rgb=rgb, hsl=hsl)

    return ColorResult(
        is_valid=False, error=INVALID_COLOR_ERROR, error_key="validation.invalidColor",
    )


def format_rgb(rgb: RGB) -> str:
    return f"rgb({rgb.r}, {rgb.g}, {rgb.b})"


def format_hsl(hsl: HSL) -> str:
    return f"hsl({hsl.h}, {hsl.s}%, {hsl.l}%)"
