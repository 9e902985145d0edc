"""Input Validation — shared numeric checks used by every calculator.

Invariants:
    - Validators never raise: they return a ValidationResult describing the first problem
    - bool is rejected as a number (True is not a price)
    - Percentages above 100 are valid but carry a warning; negatives are errors

Design Decisions:
    - error_key alongside the English message: the route layer localizes via
      language_strings, core stays locale-agnostic
    - Pure dataclasses over exceptions: calculators can collect several results
      and the shell decides whether to raise CalculationInputError
"""

import math
from dataclasses import dataclass, field
from typing import Any, Literal

NumberKind = Literal["positive", "non_negative", "percentage"]

_ARABIC_INDIC_DIGITS = str.maketrans(
    "٠١٢٣٤٥٦٧٨٩۰۱۲۳۴۵۶۷۸۹٫", "01234567890123456789.", "٬",
)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a single-field check."""
    is_valid: bool
    error: str | None = None
    error_key: str | None = None
    field: str | None = None
    warning: str | None = None
    warning_key: str | None = None

    @property
    def has_warning(self) -> bool:
        return self.warning is not None


VALID = ValidationResult(is_valid=True)


@dataclass(frozen=True)
class FieldSpec:
    """Declarative rule for validate_calculator_inputs."""
    name: str
    kind: NumberKind
    required: bool = True
    display_name: str | None = None


@dataclass
class MultiFieldValidation:
    is_valid: bool
    errors: list[ValidationResult] = field(default_factory=list)
    warnings: list[ValidationResult] = field(default_factory=list)

    @property
    def first_error(self) -> ValidationResult | None:
        return self.errors[0] if self.errors else None


def _invalid(field_name: str, message: str, key: str) -> ValidationResult:
    return ValidationResult(
        is_valid=False, error=message, error_key=key, field=field_name,
    )


def _check_number(value: Any, field_name: str) -> ValidationResult | None:
    """Common checks shared by all kinds. Returns None when value is a finite number."""
    if value is None:
        return _invalid(field_name, f"{field_name} is required", "validation.required")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return _invalid(field_name, f"{field_name} must be a number", "validation.mustBeNumber")
    if math.isnan(value):
        return _invalid(field_name, f"{field_name} is not a valid number", "validation.invalidNumber")
    if math.isinf(value):
        return _invalid(field_name, f"{field_name} must be a finite number", "validation.mustBeFinite")
    if value < 0:
        return _invalid(field_name, f"{field_name} cannot be negative", "validation.cannotBeNegative")
    return None


def validate_positive_number(value: Any, field_name: str = "Value") -> ValidationResult:
    """Strictly greater than zero."""
    problem = _check_number(value, field_name)
    if problem:
        return problem
    if value == 0:
        return _invalid(
            field_name, f"{field_name} must be greater than zero", "validation.mustBePositive",
        )
    return VALID


def validate_non_negative_number(value: Any, field_name: str = "Value") -> ValidationResult:
    """Zero or greater (optional costs may legitimately be zero)."""
    return _check_number(value, field_name) or VALID


def validate_percentage(value: Any, field_name: str = "Percentage") -> ValidationResult:
    """Non-negative; above 100 stays valid but is flagged."""
    problem = _check_number(value, field_name)
    if problem:
        return problem
    if value > 100:
        return ValidationResult(
            is_valid=True,
            field=field_name,
            warning=f"{field_name} exceeds 100%. This may indicate an error.",
            warning_key="validation.percentageExceeds100",
        )
    return VALID


_VALIDATORS = {
    "positive": validate_positive_number,
    "non_negative": validate_non_negative_number,
    "percentage": validate_percentage,
}


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


def validate_calculator_inputs(
    data: dict[str, Any], specs: list[FieldSpec],
) -> MultiFieldValidation:
    """Validate every field in specs; missing optional fields are skipped."""
    errors: list[ValidationResult] = []
    warnings: list[ValidationResult] = []

    for spec in specs:
        value = data.get(spec.name)
        label = spec.display_name or spec.name

        if _is_empty(value):
            if spec.required:
                errors.append(_invalid(spec.name, f"{label} is required", "validation.required"))
            continue

        result = _VALIDATORS[spec.kind](value, label)
        if not result.is_valid:
            errors.append(ValidationResult(
                is_valid=False, error=result.error,
                error_key=result.error_key, field=spec.name,
            ))
        elif result.has_warning:
            warnings.append(ValidationResult(
                is_valid=True, field=spec.name,
                warning=result.warning, warning_key=result.warning_key,
            ))

    return MultiFieldValidation(
        is_valid=not errors, errors=errors, warnings=warnings,
    )


def is_valid_positive_number(value: Any) -> bool:
    return validate_positive_number(value).is_valid


def is_valid_percentage(value: Any) -> bool:
    """In [0, 100] — the >100 warning counts as not valid here."""
    result = validate_percentage(value)
    return result.is_valid and not result.has_warning


def parse_numeric_input(raw: str | int | float | None) -> float:
    """Parse form input to float; NaN when unparseable.

    Arabic-Indic digits and the Arabic decimal separator are normalised and the
    Arabic thousands separator (U+066C) is dropped. ASCII commas are not accepted:
    "1,5" gives NaN.
    """
    if raw is None or raw == "":
        return math.nan
    if isinstance(raw, bool):
        return math.nan
    if isinstance(raw, (int, float)):
        return float(raw)
    cleaned = raw.strip().translate(_ARABIC_INDIC_DIGITS)
    try:
        return float(cleaned)
    except ValueError:
        return math.nan
