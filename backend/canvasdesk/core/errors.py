"""Error Hierarchy — typed, categorized exceptions for all CanvasDesk failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - ResourceNotFoundError covers true absence AND missing rights AND unmet lifecycle
      preconditions — the message never reveals which
    - to_response() produces the REST envelope; no internal details leaked

Design Decisions:
    - Single hierarchy with CanvasDeskError base: FastAPI global handler catches all
      (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - Capacity, no-op update and bad view are ValidationFailedError subclasses:
      one outcome code (400), distinct machine-readable codes
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
    AUTHENTICATION = "authentication"
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    file_id: str | None = None
    debug_info: dict[str, Any] | None = None


class CanvasDeskError(Exception):
    """Base exception for all CanvasDesk errors."""

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

    def details(self) -> list[dict] | None:
        return None

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        body = {
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
        }
        details = self.details()
        if details:
            body["details"] = details
        return {"error": body}


# ─── Domain Errors (400-level) ──────────────────────────────────

class UnauthenticatedError(CanvasDeskError):
    """Missing, malformed, expired or otherwise invalid credential."""
    def __init__(
        self, message: str = "Unauthorized", context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "UNAUTHENTICATED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class ResourceNotFoundError(CanvasDeskError):
    """Resource is absent, invisible to the caller, or in the wrong lifecycle state."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ValidationFailedError(CanvasDeskError):
    """Input shape or business rule violated."""
    def __init__(
        self,
        message: str,
        fields: list[str] | None = None,
        code: str = "VALIDATION_ERROR",
        category: ErrorCategory = ErrorCategory.VALIDATION,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, category, ErrorSeverity.ERROR, context, 400,
        )
        self.fields = fields or []

    def details(self) -> list[dict] | None:
        return [{"field": f, "message": self.message} for f in self.fields] or None


class CapacityExceededError(ValidationFailedError):
    """Parent collection already holds its maximum number of children."""
    def __init__(
        self, resource_type: str, limit: int, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"File has reached the maximum of {limit} {resource_type}s",
            fields=["file_id"], code="CAPACITY_EXCEEDED",
            category=ErrorCategory.BUSINESS_RULE, context=context,
        )
        self.limit = limit


class NoFieldsToUpdateError(ValidationFailedError):
    """Partial update carried zero recognized fields."""
    def __init__(self, allowed: list[str], context: ErrorContext | None = None):
        super().__init__(
            f"No fields to update (expected one of: {', '.join(allowed)})",
            fields=list(allowed), code="NO_FIELDS_TO_UPDATE", context=context,
        )


class InvalidViewError(ValidationFailedError):
    """Listing view is not one of the supported filters."""
    def __init__(self, view: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid view parameter: '{view}'",
            fields=["view"], code="INVALID_VIEW", context=context,
        )
        self.view = view


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(CanvasDeskError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
