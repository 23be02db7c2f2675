"""Error Handlers — global exception handlers for the server variant.

Invariants:
    - FormAppError → its own status and envelope (DatabaseError keeps the driver message)
    - RequestValidationError → 400; unparseable JSON is reported as MALFORMED_BODY
    - Exception (catch-all) → 500 with a generic message
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from formapp.core.errors import (
    ErrorSeverity, FormAppError, MalformedBodyError, validation_error_response,
)

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_formapp_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_formapp_error_handler(app: FastAPI) -> None:

    @app.exception_handler(FormAppError)
    async def formapp_error_handler(request: Request, exc: FormAppError):
        log = logger.error if exc.http_status >= 500 else logger.info
        log(
            f"FormAppError: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        errors = exc.errors()
        logger.warning(f"Validation error on {request.url.path}: {errors}")
        json_error = next(
            (e for e in errors if e.get("type") == "json_invalid"), None,
        )
        if json_error is not None:
            content = MalformedBodyError(
                str((json_error.get("ctx") or {}).get("error", "")) or None,
            ).to_response()
        else:
            content = validation_error_response(errors)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content=content,
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )
