"""Error Hierarchy — typed, categorized exceptions for all Merchant Tools failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST error envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with ToolkitError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    AUTHORIZATION = "authorization"
    DATABASE = "database"
    MIGRATION = "migration"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    tool_slug: str | None = None
    migration: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class ToolkitError(Exception):
    """Base exception for all Merchant Tools errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "tool_slug": self.context.tool_slug,
                    "migration": self.context.migration,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class CalculationInputError(ToolkitError):
    """Calculator input failed a domain rule (positive price, percentage range...)."""
    def __init__(
        self,
        message: str,
        field: str | None,
        error_key: str | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "INVALID_CALCULATION_INPUT", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field
        self.error_key = error_key

    def to_response(self) -> dict:
        response = super().to_response()
        response["error"]["field"] = self.field
        response["error"]["error_key"] = self.error_key
        return response


class UnknownSizeError(ToolkitError):
    """Size label does not exist in the requested chart."""
    def __init__(self, category: str, system: str, size: str, context: ErrorContext | None = None):
        super().__init__(
            f"Size '{size}' not found in {system} chart for {category}",
            "UNKNOWN_SIZE", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class ResourceNotFoundError(ToolkitError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class AdminAuthError(ToolkitError):
    """Admin endpoint called without a valid admin key."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Admin key missing or invalid",
            "ADMIN_AUTH_REQUIRED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 401,
        )


class MigrationTargetNotFoundError(ToolkitError):
    """Target migration is not among the candidates for the requested operation."""
    def __init__(self, target: str, context: ErrorContext | None = None):
        super().__init__(
            f"Target migration not found: {target}",
            "MIGRATION_TARGET_NOT_FOUND", ErrorCategory.MIGRATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.target = target


class RollbackRequestError(ToolkitError):
    """Rollback requested without a target or a count."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Rollback requires either count or target",
            "ROLLBACK_TARGET_REQUIRED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )


class RollbackUnavailableError(ToolkitError):
    """Executed migration has no stored rollback SQL."""
    def __init__(self, migration: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.migration = migration
        super().__init__(
            f"No rollback SQL available for migration: {migration}",
            "ROLLBACK_UNAVAILABLE", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, ctx, 409,
        )


class UserIdentityRequiredError(ToolkitError):
    """Calculation history called without the X-User-Id header."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "X-User-Id header is required",
            "USER_ID_REQUIRED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 401,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class MigrationDirectoryError(ToolkitError):
    """Configured migrations directory does not exist."""
    def __init__(self, path: str, context: ErrorContext | None = None):
        super().__init__(
            f"Migrations directory not found: {path}",
            "MIGRATIONS_DIR_NOT_FOUND", ErrorCategory.MIGRATION,
            ErrorSeverity.CRITICAL, context, 500,
        )


class DatabaseError(ToolkitError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
