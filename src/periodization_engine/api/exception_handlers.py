"""
Exception handlers for the FastAPI application.

Every failure leaves the API in one envelope:

    {"error": {"code", "category", "message", "details"}}

``category`` is one of validation, not_found, conflict, state, storage or
internal. For domain errors ``details`` names what failed: an ``entity_type``
and ``entity_id``, or a ``field``.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple, Type

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..exceptions import (
    ConflictError,
    DatabaseError,
    ErrorCode,
    NotFoundError,
    PeriodizationError,
    StateError,
    ValidationError,
)


logger = logging.getLogger("periodization_engine.api")

# Checked in order; subclasses resolve to their category's base
CATEGORIES: Tuple[Tuple[Type[PeriodizationError], str], ...] = (
    (ValidationError, "validation"),
    (NotFoundError, "not_found"),
    (ConflictError, "conflict"),
    (StateError, "state"),
    (DatabaseError, "storage"),
)

# Request sections FastAPI prefixes onto validation locations
_LOCATION_ROOTS = {"body", "query", "path", "header", "cookie"}


def error_category(exc: PeriodizationError) -> str:
    for error_type, category in CATEGORIES:
        if isinstance(exc, error_type):
            return category
    return "internal"


def describe_subject(details: Dict[str, Any]) -> Optional[str]:
    """Short 'what failed' label for log lines, e.g. "mesocycle meso_1"."""
    if "entity_type" in details and "entity_id" in details:
        return f"{details['entity_type']} {details['entity_id']}"
    if "field" in details:
        return f"field '{details['field']}'"
    return None


def error_response(
    status_code: int,
    code: str,
    category: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "category": category,
                "message": message,
                "details": details or {},
            }
        },
    )


def _field_path(loc: Tuple[Any, ...]) -> str:
    parts = list(loc)
    if parts and parts[0] in _LOCATION_ROOTS:
        parts = parts[1:]
    return ".".join(str(p) for p in parts) or "request"


async def periodization_error_handler(
    request: Request,
    exc: PeriodizationError,
) -> JSONResponse:
    """Map domain errors to their HTTP status and the error envelope."""
    category = error_category(exc)
    subject = describe_subject(exc.details)
    label = f"{exc.code.value} on {request.method} {request.url.path}"
    if subject:
        label += f" ({subject})"

    if exc.status_code >= 500:
        logger.error(f"{label}: {exc.message}")
    elif category in ("conflict", "state"):
        logger.warning(f"{label}: {exc.message}")
    else:
        logger.debug(f"{label}: {exc.message}")

    return error_response(exc.status_code, exc.code.value, category, exc.message, exc.details)


async def request_validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Report malformed request bodies and parameters as field errors."""
    errors: List[Dict[str, str]] = [
        {
            "field": _field_path(tuple(error["loc"])),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    details: Dict[str, Any] = {"errors": errors}
    if errors:
        details["field"] = errors[0]["field"]

    return error_response(
        status_code=422,
        code=ErrorCode.VALIDATION_ERROR.value,
        category="validation",
        message="Request validation failed",
        details=details,
    )


async def generic_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}")
    return error_response(
        status_code=500,
        code=ErrorCode.INTERNAL_ERROR.value,
        category="internal",
        message="An unexpected error occurred",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(PeriodizationError, periodization_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
