import logging
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ClinicError(Exception):
    """Base class for failures that map onto an HTTP status."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ClinicError):
    status_code = 400

    def __init__(self, message: str = "Validation error", details: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.details = details


class NotFound(ClinicError):
    status_code = 404


class Conflict(ClinicError):
    status_code = 409


class Unavailable(ClinicError):
    status_code = 500


class ResourceExhausted(ClinicError):
    status_code = 503


def create_error_response(error_message: str, details: Optional[List[Dict[str, Any]]] = None) -> dict:
    """Create a standardized error response"""
    content: Dict[str, Any] = {"error": error_message}
    if details is not None:
        content["details"] = details
    return content


def format_validation_errors(errors) -> List[Dict[str, Any]]:
    """Flatten pydantic error dicts into {field, message, type} entries."""
    details = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        details.append({
            "field": ".".join(loc),
            "message": error.get("msg", ""),
            "type": error.get("type", ""),
        })
    return details


async def clinic_exception_handler(request: Request, exc: ClinicError) -> JSONResponse:
    if isinstance(exc, ValidationError):
        return JSONResponse(
            status_code=exc.status_code,
            content=create_error_response(exc.message, exc.details),
        )
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=create_error_response(exc.message))


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content=create_error_response("Validation error", format_validation_errors(exc.errors())),
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Custom exception handler for HTTPException"""
    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(str(exc.detail)),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content=create_error_response("Internal server error"))
