"""Error Hierarchy — typed, categorized exceptions for all daily-grid failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are caller-visible rejections with no partial effect
    - Infrastructure errors (500-level) are critical and never leak driver details
    - to_response() produces the REST envelope consumed by the global handler

Design Decisions:
    - Single hierarchy with DailyGridError base: FastAPI global handler catches all
      (ADR: uniform error shape)
    - Exhausted generation is NOT an exception: the generation loop returns a degraded
      outcome instead, so there is no class for it here
    - ErrorContext as dataclass: observability fields travel with the error, not the logger
"""

from dataclasses import dataclass, field
from enum import Enum
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
    DATABASE = "database"
    DATASET = "dataset"
    INTERNAL = "internal"
    CONFLICT = "conflict"
    UNAUTHORIZED = "unauthorized"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    grid_date: str | None = None
    template_id: str | None = None
    operation: str | None = None


class DailyGridError(Exception):
    """Base exception for all daily-grid errors."""

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
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "grid_date": self.context.grid_date,
                    "template_id": self.context.template_id,
                    "operation": self.context.operation,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class MalformedGridError(DailyGridError):
    """Grid without exactly 3+3 distinct, axis-valid attributes."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "MALFORMED_GRID", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class TemplateConflictError(DailyGridError):
    """Another published template already holds the requested date."""
    def __init__(
        self,
        scheduled_date: str,
        conflicting_title: str,
        conflicting_id: str,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f'Another template "{conflicting_title}" is already published '
            f"for {scheduled_date}",
            "TEMPLATE_CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
        self.scheduled_date = scheduled_date
        self.conflicting_title = conflicting_title
        self.conflicting_id = conflicting_id

    def to_response(self) -> dict:
        body = super().to_response()
        body["error"]["conflict"] = {
            "template_id": self.conflicting_id,
            "title": self.conflicting_title,
            "scheduled_date": self.scheduled_date,
        }
        return body


class TemplateImmutableError(DailyGridError):
    """Update or delete attempted on a published template."""
    def __init__(self, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Cannot {operation} a published template. Unpublish it first.",
            "TEMPLATE_IMMUTABLE", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )
        self.operation = operation


class TemplateStateError(DailyGridError):
    """Publish/unpublish precondition not met."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "TEMPLATE_STATE", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )


class ResourceNotFoundError(DailyGridError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class AdminAccessError(DailyGridError):
    """Privileged operation called without a recognised admin key."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Admin access required", "ADMIN_ACCESS_REQUIRED",
            ErrorCategory.UNAUTHORIZED, ErrorSeverity.WARNING, context, 401,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatasetUnavailableError(DailyGridError):
    """Player dataset query failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Dataset {operation} failed: {message}",
            "DATASET_UNAVAILABLE", ErrorCategory.DATASET,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class DatabaseError(DailyGridError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
