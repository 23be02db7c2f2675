"""Error Hierarchy — typed, categorized exceptions for every formapp failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors are 400/404; storage errors are 500
    - to_response() produces the REST envelope used by both the server and the handler
    - DatabaseError carries the driver message through to the caller
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"


class FormAppError(Exception):
    """Base exception for all formapp errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        http_status: int = 500,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.http_status = http_status
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc)

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        error = {
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.details:
            error["details"] = self.details
        return {"error": error}


def validation_error_response(errors: list[dict]) -> dict:
    """Field-level 400 envelope for pydantic validation failures."""
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "category": ErrorCategory.VALIDATION.value,
            "severity": ErrorSeverity.WARNING.value,
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in errors
            ],
        },
    }


# ─── Client Errors (400-level) ──────────────────────────────────

class MissingFieldsError(FormAppError):
    """One or more required submission fields are absent or empty."""
    def __init__(self, missing: list[str], required: tuple[str, ...]):
        super().__init__(
            "Required fields are missing",
            "MISSING_REQUIRED_FIELDS", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, 400,
            {"missing": missing, "required": list(required)},
        )
        self.missing = missing


class InvalidEmailError(FormAppError):
    """Email does not look like local@domain.tld."""
    def __init__(self):
        super().__init__(
            "Invalid email format",
            "INVALID_EMAIL", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, 400,
        )


class MalformedBodyError(FormAppError):
    """Request body is not a parseable JSON object."""
    def __init__(self, reason: str | None = None):
        super().__init__(
            "Invalid JSON format",
            "MALFORMED_BODY", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, 400,
            {"reason": reason} if reason else None,
        )


class SubmissionNotFoundError(FormAppError):
    """No submission row matches the given id."""
    def __init__(self, submission_id: str):
        super().__init__(
            "Submission not found",
            "SUBMISSION_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, 404,
            {"id": submission_id},
        )
        self.submission_id = submission_id


class RouteNotFoundError(FormAppError):
    """Method + path pair matches no route (gateway handler)."""
    def __init__(self, method: str, path: str):
        super().__init__(
            "Route not found",
            "ROUTE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, 404,
            {"method": method, "path": path},
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(FormAppError):
    """Database connection or statement failed."""
    def __init__(self, message: str, operation: str):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, 500,
        )
        self.operation = operation
