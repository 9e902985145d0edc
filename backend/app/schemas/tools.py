"""Tool Schemas — request/response models for the calculator endpoints.

Invariants:
    - Numeric request fields are optional at the schema level: presence, sign and range
      are checked by core validators so the error message can be localized
    - Unbounded results (infinity) are serialized as null plus a "∞" display string

Design Decisions:
    - Pydantic handles types only; domain rules stay in core (ADR: one source of truth per rule)
"""

import math
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, Field

from app.core.domain_types import FitConfidence, SizeCategory, SizeSystem
from app.core.input_validation import parse_numeric_input


def _parse_form_number(value: Any) -> Any:
    """Strings go through parse_numeric_input (Arabic-Indic digits); blank means missing."""
    if not isinstance(value, str):
        return value
    if not value.strip():
        return None
    number = parse_numeric_input(value)
    if math.isnan(number):
        raise ValueError(f"not a number: {value!r}")
    return number


FormNumber = Annotated[float | None, BeforeValidator(_parse_form_number)]


# --- Catalog ------------------------------------------------------------------

class ToolInfo(BaseModel):
    slug: str
    name: str
    path: str


class ToolCatalog(BaseModel):
    locale: str
    tools: list[ToolInfo]


# --- Profit margin ------------------------------------------------------------

class ProfitMarginRequest(BaseModel):
    cost_price: FormNumber = None
    selling_price: FormNumber = None


class ProfitMarginResponse(BaseModel):
    profit: float
    margin_percentage: float
    markup_percentage: float
    is_loss: bool
    formatted: dict[str, str]


# --- Ad break-even ------------------------------------------------------------

class AdBreakevenRequest(BaseModel):
    selling_price: FormNumber = None
    product_cost: FormNumber = None
    ad_spend: FormNumber = None
    conversion_rate: FormNumber = None


class AdBreakevenResponse(BaseModel):
    profit_per_sale: float
    break_even_sales: float | None
    required_traffic: float | None
    max_cpc: float
    is_viable: bool
    formatted: dict[str, str]


# --- Discount impact ----------------------------------------------------------

class DiscountImpactRequest(BaseModel):
    original_price: FormNumber = None
    product_cost: FormNumber = None
    discount_percentage: FormNumber = None
    current_monthly_sales: FormNumber = None


class ProfitComparisonRow(BaseModel):
    sales_volume: float
    original_profit: float
    discounted_profit: float
    difference: float


class DiscountImpactResponse(BaseModel):
    original_margin: float
    discounted_price: float
    discounted_margin: float | None
    margin_reduction: float | None
    break_even_units: float | None
    sales_increase_needed: float | None
    is_viable: bool
    warning: str | None = None
    profit_comparison: list[ProfitComparisonRow]
    formatted: dict[str, str]


# --- Color converter ----------------------------------------------------------

class ColorRequest(BaseModel):
    color: str = Field("", max_length=100)


class RGBModel(BaseModel):
    r: int
    g: int
    b: int


class HSLModel(BaseModel):
    h: int
    s: int
    l: int  # noqa: E741


class ColorResponse(BaseModel):
    hex: str
    rgb: RGBModel
    hsl: HSLModel
    formatted: dict[str, str]


# --- Duplicate remover --------------------------------------------------------

class DuplicateRemoverRequest(BaseModel):
    text: str = Field("", max_length=1_000_000)
    case_sensitive: bool = True
    trim_whitespace: bool = False


class DuplicateRemoverResponse(BaseModel):
    result: str
    original_count: int
    unique_count: int
    removed_count: int


# --- Size converter -----------------------------------------------------------

class SizeConvertRequest(BaseModel):
    category: str
    source_system: str
    size: str = ""


class MeasurementRange(BaseModel):
    chest: tuple[float, float] | None = None
    waist: tuple[float, float] | None = None
    hip: tuple[float, float] | None = None
    foot_length: float | None = None


class SizeConvertResponse(BaseModel):
    category: SizeCategory
    sizes: dict[SizeSystem, str]
    measurement_range: MeasurementRange


class SizeRecommendRequest(BaseModel):
    category: str
    chest: FormNumber = None
    waist: FormNumber = None
    hip: FormNumber = None
    foot_length: FormNumber = None


class SizeRecommendResponse(BaseModel):
    recommended_size: str
    system: SizeSystem
    confidence: FitConfidence
    sizes: dict[SizeSystem, str]


class SizeSystemInfo(BaseModel):
    system: SizeSystem
    name: str
    sizes: list[str]


class SizeChartResponse(BaseModel):
    category: SizeCategory
    name: str
    systems: list[SizeSystemInfo]
    headers: list[str]
    rows: list[list[str]]
