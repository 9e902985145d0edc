"""Size Conversion — Chinese sizes to and from US/EU/UK, plus measurement-based recommendation.

Invariants:
    - Every chart row is aligned by index across CN/US/EU/UK and the measurement lists
    - Lookups are exact string matches on the size label ("10-12", "4.5")
    - Recommendations are always expressed in the CN system
    - Invalid input returns None, never raises

Design Decisions:
    - Charts are module-level constants, not database rows: they are reference data
      that changes with a release, not at runtime
"""

from dataclasses import dataclass

from app.core.domain_types import FitConfidence, SizeCategory, SizeSystem

SHOE_EXACT_TOLERANCE_CM = 0.5

Range = tuple[float, float]


@dataclass(frozen=True)
class SizeChart:
    sizes: dict[SizeSystem, tuple[str, ...]]
    chest: tuple[Range, ...] = ()
    waist: tuple[Range, ...] = ()
    hip: tuple[Range, ...] = ()
    foot_length: tuple[float, ...] = ()

    def __len__(self) -> int:
        return len(self.sizes[SizeSystem.CN])


SIZE_CHARTS: dict[SizeCategory, SizeChart] = {
    SizeCategory.MEN_CLOTHING: SizeChart(
        sizes={
            SizeSystem.CN: ("S", "M", "L", "XL", "XXL", "XXXL"),
            SizeSystem.US: ("XS", "S", "M", "L", "XL", "XXL"),
            SizeSystem.EU: ("44", "46", "48", "50", "52", "54"),
            SizeSystem.UK: ("34", "36", "38", "40", "42", "44"),
        },
        chest=((86, 91), (91, 96), (96, 101), (101, 106), (106, 111), (111, 116)),
        waist=((71, 76), (76, 81), (81, 86), (86, 91), (91, 96), (96, 101)),
    ),
    SizeCategory.WOMEN_CLOTHING: SizeChart(
        sizes={
            SizeSystem.CN: ("S", "M", "L", "XL", "XXL"),
            SizeSystem.US: ("2-4", "6-8", "10-12", "14-16", "18-20"),
            SizeSystem.EU: ("34-36", "38-40", "42-44", "46-48", "50-52"),
            SizeSystem.UK: ("6-8", "10-12", "14-16", "18-20", "22-24"),
        },
        chest=((80, 84), (84, 88), (88, 92), (92, 96), (96, 100)),
        waist=((60, 64), (64, 68), (68, 72), (72, 76), (76, 80)),
        hip=((86, 90), (90, 94), (94, 98), (98, 102), (102, 106)),
    ),
    SizeCategory.KIDS_CLOTHING: SizeChart(
        sizes={
            SizeSystem.CN: ("100", "110", "120", "130", "140", "150", "160"),
            SizeSystem.US: ("3T", "4T", "5-6", "7-8", "10-12", "14", "16"),
            SizeSystem.EU: ("98", "104", "116", "128", "140", "152", "164"),
            SizeSystem.UK: ("3-4", "4-5", "5-6", "7-8", "9-10", "11-12", "13-14"),
        },
        chest=((52, 54), (54, 56), (56, 60), (60, 64), (64, 68), (68, 72), (72, 76)),
        waist=((48, 50), (50, 52), (52, 54), (54, 56), (56, 58), (58, 60), (60, 62)),
    ),
    SizeCategory.SHOES: SizeChart(
        sizes={
            SizeSystem.CN: ("35", "36", "37", "38", "39", "40", "41", "42", "43", "44", "45"),
            SizeSystem.US: ("4", "4.5", "5", "5.5", "6", "7", "8", "9", "10", "11", "12"),
            SizeSystem.EU: ("35", "36", "37", "38", "39", "40", "41", "42", "43", "44", "45"),
            SizeSystem.UK: ("2.5", "3", "3.5", "4", "5", "6", "7", "8", "9", "10", "11"),
        },
        foot_length=(22.5, 23, 23.5, 24, 24.5, 25.5, 26, 27, 27.5, 28.5, 29.5),
    ),
}


@dataclass(frozen=True)
class SizeConversion:
    sizes: dict[SizeSystem, str]
    chest: Range | None = None
    waist: Range | None = None
    hip: Range | None = None
    foot_length: float | None = None


@dataclass(frozen=True)
class SizeRecommendation:
    recommended_size: str
    system: SizeSystem
    confidence: FitConfidence


def _as_category(value) -> SizeCategory | None:
    try:
        return SizeCategory(value)
    except ValueError:
        return None


def _as_system(value) -> SizeSystem | None:
    try:
        return SizeSystem(value)
    except ValueError:
        return None


def is_valid_size(category: SizeCategory, system: SizeSystem, size: str) -> bool:
    return size in SIZE_CHARTS[category].sizes[system]


def validate_conversion(category, source_system, size) -> str | None:
    """Return the error key for the first invalid argument, or None."""
    category = _as_category(category)
    if category is None:
        return "validation.invalidCategory"
    system = _as_system(source_system)
    if system is None:
        return "validation.invalidSizeSystem"
    if not isinstance(size, str) or not size.strip():
        return "validation.required"
    if not is_valid_size(category, system, size):
        return "validation.sizeNotFound"
    return None


def convert_size(category, source_system, size: str) -> SizeConversion | None:
    """Every system's label for one size, plus its measurement range."""
    if validate_conversion(category, source_system, size) is not None:
        return None

    chart = SIZE_CHARTS[SizeCategory(category)]
    index = chart.sizes[SizeSystem(source_system)].index(size)

    def at(values):
        return values[index] if index < len(values) else None

    return SizeConversion(
        sizes={system: labels[index] for system, labels in chart.sizes.items()},
        chest=at(chart.chest),
        waist=at(chart.waist),
        hip=at(chart.hip),
        foot_length=at(chart.foot_length),
    )


def _closest_index(values, target: float) -> tuple[int, float]:
    """Index of the closest value; ties keep the earlier row."""
    best, best_diff = 0, abs(values[0] - target)
    for i, value in enumerate(values[1:], start=1):
        diff = abs(value - target)
        if diff < best_diff:
            best, best_diff = i, diff
    return best, best_diff


def _provided(value) -> bool:
    return value is not None and value > 0


def recommend_size(
    category,
    chest: float | None = None,
    waist: float | None = None,
    hip: float | None = None,
    foot_length: float | None = None,
) -> SizeRecommendation | None:
    category = _as_category(category)
    if category is None:
        return None
    chart = SIZE_CHARTS[category]
    cn = chart.sizes[SizeSystem.CN]

    if category is SizeCategory.SHOES:
        if not _provided(foot_length):
            return None
        index, diff = _closest_index(chart.foot_length, foot_length)
        confidence = (
            FitConfidence.EXACT if diff <= SHOE_EXACT_TOLERANCE_CM else FitConfidence.APPROXIMATE
        )
        return SizeRecommendation(cn[index], SizeSystem.CN, confidence)

    # chest, then waist, then hip; first one provided and charted
    for measurement, ranges in ((chest, chart.chest), (waist, chart.waist), (hip, chart.hip)):
        if _provided(measurement) and ranges:
            break
    else:
        return None

    for i, (low, high) in enumerate(ranges):
        if low <= measurement <= high:
            return SizeRecommendation(cn[i], SizeSystem.CN, FitConfidence.EXACT)

    midpoints = [(low + high) / 2 for low, high in ranges]
    index, _ = _closest_index(midpoints, measurement)
    return SizeRecommendation(cn[index], SizeSystem.CN, FitConfidence.APPROXIMATE)


def size_comparison_table(category: SizeCategory) -> dict:
    chart = SIZE_CHARTS[category]
    headers = list(SizeSystem)
    rows = [[chart.sizes[system][i] for system in headers] for i in range(len(chart))]
    return {"headers": [h.value for h in headers], "rows": rows}


def available_sizes(category: SizeCategory, system: SizeSystem) -> list[str]:
    return list(SIZE_CHARTS[category].sizes[system])


def format_measurement_range(value: Range, unit: str = "cm") -> str:
    return f"{value[0]:g}-{value[1]:g} {unit}"
