"""Language Strings — centralized Arabic/English text for tool names and validation errors.

Invariants:
    - All strings are pure data (no IO, no computation beyond formatting)
    - Every dict covers both locales in the Locale enum
    - Lookups never raise: unknown locale falls back to English, unknown key to the key itself

Design Decisions:
    - Keyed by i18n error_key (validation.required, ...) so core validators stay
      locale-agnostic and only the route layer picks the language
"""

from app.core.domain_types import Locale, SizeCategory, SizeSystem, ToolSlug


# --- Validation messages ------------------------------------------------------

_VALIDATION_MESSAGES: dict[str, dict[Locale, str]] = {
    "validation.required": {
        Locale.EN: "{field} is required",
        Locale.AR: "حقل {field} مطلوب",
    },
    "validation.mustBeNumber": {
        Locale.EN: "{field} must be a number",
        Locale.AR: "يجب أن يكون {field} رقماً",
    },
    "validation.invalidNumber": {
        Locale.EN: "{field} is not a valid number",
        Locale.AR: "قيمة {field} ليست رقماً صالحاً",
    },
    "validation.mustBeFinite": {
        Locale.EN: "{field} must be a finite number",
        Locale.AR: "يجب أن يكون {field} رقماً محدوداً",
    },
    "validation.cannotBeNegative": {
        Locale.EN: "{field} cannot be negative",
        Locale.AR: "لا يمكن أن يكون {field} سالباً",
    },
    "validation.mustBePositive": {
        Locale.EN: "{field} must be greater than zero",
        Locale.AR: "يجب أن يكون {field} أكبر من صفر",
    },
    "validation.percentageOutOfRange": {
        Locale.EN: "{field} must be between 0 and 100",
        Locale.AR: "يجب أن تكون {field} بين 0 و 100",
    },
    "validation.percentageExceeds100": {
        Locale.EN: "{field} exceeds 100%. This may indicate an error.",
        Locale.AR: "{field} تتجاوز 100%. قد يشير ذلك إلى خطأ.",
    },
    "validation.invalidCategory": {
        Locale.EN: "Invalid category",
        Locale.AR: "فئة غير صالحة",
    },
    "validation.invalidSizeSystem": {
        Locale.EN: "Invalid size system",
        Locale.AR: "نظام مقاسات غير صالح",
    },
    "validation.sizeNotFound": {
        Locale.EN: "Size not found in the selected system",
        Locale.AR: "المقاس غير موجود في النظام المحدد",
    },
    "validation.measurementRequired": {
        Locale.EN: "At least one positive measurement is required",
        Locale.AR: "مطلوب قياس واحد موجب على الأقل",
    },
    "validation.invalidColor": {
        Locale.EN: "Invalid color format. Use HEX (#FF0000), RGB (255, 0, 0), or HSL (0, 100, 50)",
        Locale.AR: "صيغة لون غير صالحة. استخدم HEX (#FF0000) أو RGB (255, 0, 0) أو HSL (0, 100, 50)",
    },
    "validation.emptyColor": {
        Locale.EN: "Please enter a color value",
        Locale.AR: "يرجى إدخال قيمة اللون",
    },
}


# --- Field display names ------------------------------------------------------

_FIELD_NAMES: dict[str, dict[Locale, str]] = {
    "cost_price": {Locale.EN: "Cost price", Locale.AR: "سعر التكلفة"},
    "selling_price": {Locale.EN: "Selling price", Locale.AR: "سعر البيع"},
    "product_cost": {Locale.EN: "Product cost", Locale.AR: "تكلفة المنتج"},
    "ad_spend": {Locale.EN: "Ad spend", Locale.AR: "ميزانية الإعلان"},
    "conversion_rate": {Locale.EN: "Conversion rate", Locale.AR: "نسبة التحويل"},
    "original_price": {Locale.EN: "Original price", Locale.AR: "السعر الأصلي"},
    "discount_percentage": {Locale.EN: "Discount percentage", Locale.AR: "نسبة الخصم"},
    "current_monthly_sales": {
        Locale.EN: "Current monthly sales", Locale.AR: "المبيعات الشهرية الحالية",
    },
}


# --- Tool and size-chart names ------------------------------------------------

_TOOL_NAMES: dict[ToolSlug, dict[Locale, str]] = {
    ToolSlug.PROFIT_MARGIN: {Locale.EN: "Profit Margin Calculator", Locale.AR: "حاسبة هامش الربح"},
    ToolSlug.AD_BREAKEVEN: {Locale.EN: "Ad Break-Even Calculator", Locale.AR: "حاسبة نقطة التعادل للإعلانات"},
    ToolSlug.DISCOUNT_IMPACT: {Locale.EN: "Discount Impact Simulator", Locale.AR: "محاكي تأثير الخصم"},
    ToolSlug.SIZE_CONVERTER: {Locale.EN: "Size Converter", Locale.AR: "محول المقاسات"},
    ToolSlug.COLOR_CONVERTER: {Locale.EN: "Color Code Converter", Locale.AR: "محول أكواد الألوان"},
    ToolSlug.DUPLICATE_REMOVER: {Locale.EN: "Duplicate Line Remover", Locale.AR: "مزيل الأسطر المكررة"},
}

_CATEGORY_NAMES: dict[SizeCategory, dict[Locale, str]] = {
    SizeCategory.MEN_CLOTHING: {Locale.EN: "Men's Clothing", Locale.AR: "ملابس رجالية"},
    SizeCategory.WOMEN_CLOTHING: {Locale.EN: "Women's Clothing", Locale.AR: "ملابس نسائية"},
    SizeCategory.KIDS_CLOTHING: {Locale.EN: "Kids' Clothing", Locale.AR: "ملابس أطفال"},
    SizeCategory.SHOES: {Locale.EN: "Shoes", Locale.AR: "أحذية"},
}

_SYSTEM_NAMES: dict[SizeSystem, dict[Locale, str]] = {
    SizeSystem.CN: {Locale.EN: "Chinese", Locale.AR: "صيني"},
    SizeSystem.US: {Locale.EN: "US", Locale.AR: "أمريكي"},
    SizeSystem.EU: {Locale.EN: "EU", Locale.AR: "أوروبي"},
    SizeSystem.UK: {Locale.EN: "UK", Locale.AR: "بريطاني"},
}


# --- Public API ---------------------------------------------------------------


def _pick(entry: dict[Locale, str], locale: Locale) -> str:
    return entry.get(locale) or entry[Locale.EN]


def get_field_name(field: str, locale: Locale) -> str:
    """Localized display name for a calculator field (falls back to the raw field)."""
    entry = _FIELD_NAMES.get(field)
    return _pick(entry, locale) if entry else field


def format_validation_message(
    error_key: str, locale: Locale, field: str | None = None,
) -> str:
    """Render a validation message for error_key in the target locale.

    The field is translated first so Arabic messages never embed English field names.
    """
    entry = _VALIDATION_MESSAGES.get(error_key)
    if entry is None:
        return error_key
    field_name = get_field_name(field, locale) if field else ""
    return _pick(entry, locale).format(field=field_name)


def get_tool_name(slug: ToolSlug, locale: Locale) -> str:
    return _pick(_TOOL_NAMES[slug], locale)


def get_category_name(category: SizeCategory, locale: Locale) -> str:
    return _pick(_CATEGORY_NAMES[category], locale)


def get_system_name(system: SizeSystem, locale: Locale) -> str:
    return _pick(_SYSTEM_NAMES[system], locale)
