"""Tool Routes — stateless calculator endpoints plus the tool catalog.

Invariants:
    - Invalid input → CalculationInputError (400) with a message in the request locale
    - Every successful call appends one tool_usage row (guest or registered)
    - Non-finite results are returned as null with "∞" in the formatted block

Design Decisions:
    - Routes are thin: core does the math, routes translate results to response models
    - Usage tracking failures are logged and never fail the calculation
"""

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_locale, get_user_type
from app.config import Settings, get_settings
from app.core import (
    ad_breakeven, color_converter, discount_impact, duplicate_remover,
    profit_margin, size_conversion,
)
from app.core.domain_types import Locale, SizeCategory, SizeSystem, ToolSlug, UserType
from app.core.errors import (
    CalculationInputError, ErrorContext, ResourceNotFoundError, UnknownSizeError,
)
from app.core.input_validation import ValidationResult
from app.core.language_strings import (
    format_validation_message, get_category_name, get_system_name, get_tool_name,
)
from app.core.number_format import (
    finite_or_none, format_currency, format_percentage, format_units,
)
from app.infrastructure.database import get_db
from app.models.tool_usage import ToolUsage
from app.schemas.tools import (
    AdBreakevenRequest, AdBreakevenResponse,
    ColorRequest, ColorResponse, HSLModel, RGBModel,
    DiscountImpactRequest, DiscountImpactResponse, ProfitComparisonRow,
    DuplicateRemoverRequest, DuplicateRemoverResponse,
    MeasurementRange, ProfitMarginRequest, ProfitMarginResponse,
    SizeChartResponse, SizeConvertRequest, SizeConvertResponse,
    SizeRecommendRequest, SizeRecommendResponse, SizeSystemInfo,
    ToolCatalog, ToolInfo,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/tools", tags=["tools"])


# --- Helpers ------------------------------------------------------------------


def _invalid_input(
    slug: ToolSlug, locale: Locale, error: str | None, error_key: str | None,
    field: str | None,
) -> CalculationInputError:
    return CalculationInputError(
        error or "Invalid input",
        field,
        error_key,
        ErrorContext(
            tool_slug=slug.value,
            user_message=format_validation_message(error_key, locale, field) if error_key else None,
        ),
    )


def _raise_if_invalid(result: ValidationResult, slug: ToolSlug, locale: Locale):
    if not result.is_valid:
        raise _invalid_input(slug, locale, result.error, result.error_key, result.field)


async def record_usage(db: AsyncSession, slug: ToolSlug, user_type: UserType):
    try:
        db.add(ToolUsage(tool_slug=slug.value, user_type=user_type.value))
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.warning(
            f"Tool usage not recorded: {e}",
            extra={"tool_slug": slug.value, "error_code": "DATABASE_ERROR"},
        )


# --- Catalog ------------------------------------------------------------------


@router.get("", response_model=ToolCatalog)
async def list_tools(locale: Locale = Depends(get_locale)):
    return ToolCatalog(
        locale=locale.value,
        tools=[
            ToolInfo(slug=slug.value, name=get_tool_name(slug, locale), path=f"/api/v1/tools/{slug.value}")
            for slug in ToolSlug
        ],
    )


# --- Financial calculators ----------------------------------------------------


@router.post("/profit-margin", response_model=ProfitMarginResponse)
async def calculate_profit_margin(
    body: ProfitMarginRequest,
    locale: Locale = Depends(get_locale),
    user_type: UserType = Depends(get_user_type),
    settings: Settings = Depends(get_settings),
    db: AsyncSession = Depends(get_db),
):
    slug = ToolSlug.PROFIT_MARGIN
    _raise_if_invalid(
        profit_margin.validate_inputs(body.cost_price, body.selling_price), slug, locale,
    )
    result = profit_margin.calculate(body.cost_price, body.selling_price)
    await record_usage(db, slug, user_type)

    return ProfitMarginResponse(
        profit=result.profit,
        margin_percentage=result.margin_percentage,
        markup_percentage=result.markup_percentage,
        is_loss=result.is_loss,
        formatted={
            "profit": format_currency(result.profit, settings.default_currency),
            "margin_percentage": format_percentage(result.margin_percentage),
            "markup_percentage": format_percentage(result.markup_percentage),
        },
    )


@router.post("/ad-breakeven", response_model=AdBreakevenResponse)
async def calculate_ad_breakeven(
    body: AdBreakevenRequest,
    locale: Locale = Depends(get_locale),
    user_type: UserType = Depends(get_user_type),
    settings: Settings = Depends(get_settings),
    db: AsyncSession = Depends(get_db),
):
    slug = ToolSlug.AD_BREAKEVEN
    args = (body.selling_price, body.product_cost, body.ad_spend, body.conversion_rate)
    _raise_if_invalid(ad_breakeven.validate_inputs(*args), slug, locale)
    result = ad_breakeven.calculate(*args)
    await record_usage(db, slug, user_type)

    return AdBreakevenResponse(
        profit_per_sale=result.profit_per_sale,
        break_even_sales=finite_or_none(result.break_even_sales),
        required_traffic=finite_or_none(result.required_traffic),
        max_cpc=result.max_cpc,
        is_viable=result.is_viable,
        formatted={
            "profit_per_sale": format_currency(result.profit_per_sale, settings.default_currency),
            "break_even_sales": format_units(result.break_even_sales),
            "required_traffic": format_units(result.required_traffic),
            "max_cpc": format_currency(result.max_cpc, settings.default_currency),
        },
    )


@router.post("/discount-impact", response_model=DiscountImpactResponse)
async def simulate_discount_impact(
    body: DiscountImpactRequest,
    locale: Locale = Depends(get_locale),
    user_type: UserType = Depends(get_user_type),
    settings: Settings = Depends(get_settings),
    db: AsyncSession = Depends(get_db),
):
    slug = ToolSlug.DISCOUNT_IMPACT
    args = (
        body.original_price, body.product_cost,
        body.discount_percentage, body.current_monthly_sales,
    )
    _raise_if_invalid(discount_impact.validate_inputs(*args), slug, locale)
    result = discount_impact.simulate(*args)
    await record_usage(db, slug, user_type)

    return DiscountImpactResponse(
        original_margin=result.original_margin,
        discounted_price=result.discounted_price,
        discounted_margin=finite_or_none(result.discounted_margin),
        margin_reduction=finite_or_none(result.margin_reduction),
        break_even_units=finite_or_none(result.break_even_units),
        sales_increase_needed=finite_or_none(result.sales_increase_needed),
        is_viable=result.is_viable,
        warning=result.warning,
        profit_comparison=[
            ProfitComparisonRow(**asdict(row)) for row in result.profit_comparison
        ],
        formatted={
            "original_margin": format_percentage(result.original_margin),
            "discounted_price": format_currency(result.discounted_price, settings.default_currency),
            "discounted_margin": format_percentage(result.discounted_margin),
            "break_even_units": format_units(result.break_even_units),
            "sales_increase_needed": format_percentage(result.sales_increase_needed, 1),
        },
    )


# --- Text and color utilities -------------------------------------------------


@router.post("/color-converter", response_model=ColorResponse)
async def convert_color(
    body: ColorRequest,
    locale: Locale = Depends(get_locale),
    user_type: UserType = Depends(get_user_type),
    db: AsyncSession = Depends(get_db),
):
    slug = ToolSlug.COLOR_CONVERTER
    result = color_converter.parse_color(body.color)
    if not result.is_valid:
        raise _invalid_input(slug, locale, result.error, result.error_key, "color")
    await record_usage(db, slug, user_type)

    return ColorResponse(
        hex=result.hex,
        rgb=RGBModel(r=result.rgb.r, g=result.rgb.g, b=result.rgb.b),
        hsl=HSLModel(h=result.hsl.h, s=result.hsl.s, l=result.hsl.l),
        formatted={
            "hex": result.hex,
            "rgb": color_converter.format_rgb(result.rgb),
            "hsl": color_converter.format_hsl(result.hsl),
        },
    )


@router.post("/duplicate-remover", response_model=DuplicateRemoverResponse)
async def remove_duplicate_lines(
    body: DuplicateRemoverRequest,
    user_type: UserType = Depends(get_user_type),
    db: AsyncSession = Depends(get_db),
):
    result = duplicate_remover.remove_duplicates(
        body.text, body.case_sensitive, body.trim_whitespace,
    )
    await record_usage(db, ToolSlug.DUPLICATE_REMOVER, user_type)
    return DuplicateRemoverResponse(**asdict(result))


# --- Size converter -----------------------------------------------------------


_SIZE_FIELDS = {
    "validation.invalidCategory": "category",
    "validation.invalidSizeSystem": "source_system",
    "validation.required": "size",
}


@router.post("/size-converter/convert", response_model=SizeConvertResponse)
async def convert_size(
    body: SizeConvertRequest,
    locale: Locale = Depends(get_locale),
    user_type: UserType = Depends(get_user_type),
    db: AsyncSession = Depends(get_db),
):
    slug = ToolSlug.SIZE_CONVERTER
    error_key = size_conversion.validate_conversion(body.category, body.source_system, body.size)
    if error_key == "validation.sizeNotFound":
        raise UnknownSizeError(
            body.category, body.source_system, body.size,
            ErrorContext(
                tool_slug=slug.value,
                user_message=format_validation_message(error_key, locale),
            ),
        )
    if error_key:
        field = _SIZE_FIELDS[error_key]
        raise _invalid_input(slug, locale, f"Invalid {field}", error_key, field)

    result = size_conversion.convert_size(body.category, body.source_system, body.size)
    await record_usage(db, slug, user_type)

    return SizeConvertResponse(
        category=SizeCategory(body.category),
        sizes=result.sizes,
        measurement_range=MeasurementRange(
            chest=result.chest, waist=result.waist, hip=result.hip,
            foot_length=result.foot_length,
        ),
    )


@router.post("/size-converter/recommend", response_model=SizeRecommendResponse)
async def recommend_size(
    body: SizeRecommendRequest,
    locale: Locale = Depends(get_locale),
    user_type: UserType = Depends(get_user_type),
    db: AsyncSession = Depends(get_db),
):
    slug = ToolSlug.SIZE_CONVERTER
    if body.category not in {c.value for c in SizeCategory}:
        raise _invalid_input(
            slug, locale, "Invalid category", "validation.invalidCategory", "category",
        )

    result = size_conversion.recommend_size(
        body.category, body.chest, body.waist, body.hip, body.foot_length,
    )
    if result is None:
        raise _invalid_input(
            slug, locale, "At least one positive measurement is required",
            "validation.measurementRequired", "measurements",
        )
    await record_usage(db, slug, user_type)

    conversion = size_conversion.convert_size(body.category, result.system, result.recommended_size)
    return SizeRecommendResponse(
        recommended_size=result.recommended_size,
        system=result.system,
        confidence=result.confidence,
        sizes=conversion.sizes,
    )


@router.get("/size-converter/{category}", response_model=SizeChartResponse)
async def get_size_chart(category: str, locale: Locale = Depends(get_locale)):
    try:
        chart_category = SizeCategory(category)
    except ValueError:
        raise ResourceNotFoundError("Size chart", category)

    table = size_conversion.size_comparison_table(chart_category)
    return SizeChartResponse(
        category=chart_category,
        name=get_category_name(chart_category, locale),
        systems=[
            SizeSystemInfo(
                system=system,
                name=get_system_name(system, locale),
                sizes=size_conversion.available_sizes(chart_category, system),
            )
            for system in SizeSystem
        ],
        headers=table["headers"],
        rows=table["rows"],
    )
