"""
Structured exceptions and error responses for Daybook.

Provides consistent error handling across the API with:
- Custom exception classes
- Structured error response format
- FastAPI exception handlers
"""

from typing import Any, Dict, Optional, List
from fastapi import Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.logging_config import get_logger

logger = get_logger("error")


# =============================================================================
# Error Response Schema
# =============================================================================

class ErrorDetail(BaseModel):
    """Detail of a single error."""
    loc: Optional[List[str]] = None  # Location of error (e.g., ["body", "title"])
    msg: str
    type: str


class ErrorResponse(BaseModel):
    """Structured error response format."""
    error: str  # Error code (e.g., "not_found", "validation_error")
    message: str  # Human-readable message
    details: Optional[List[ErrorDetail]] = None


# =============================================================================
# Custom Exceptions
# =============================================================================

class DaybookException(Exception):
    """Base exception for all Daybook errors."""

    def __init__(
        self,
        message: str,
        error_code: str = "internal_error",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[List[Dict[str, Any]]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class NotFoundError(DaybookException):
    """Resource not found."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            message=f"{resource} with ID {resource_id} not found",
            error_code="not_found",
            status_code=status.HTTP_404_NOT_FOUND,
        )
        self.resource = resource
        self.resource_id = resource_id


class ValidationError(DaybookException):
    """A task (or other input) failed validation; nothing was changed."""

    def __init__(self, message: str, details: Optional[List[Dict[str, Any]]] = None):
        super().__init__(
            message=message,
            error_code="validation_error",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=details,
        )


class PeriodicParametersError(ValidationError):
    """Periodic task saved without a usable due date, end date or frequency."""

    def __init__(self, missing: List[str]):
        super().__init__(
            message="Periodic tasks require a due date, an end date and a frequency",
            details=[
                {"loc": ["body", field], "msg": "field required for periodic tasks", "type": "missing"}
                for field in missing
            ],
        )
        self.missing = missing


class FamilyTooLargeError(ValidationError):
    """A periodic family would need more child ids than the id scheme allows."""

    def __init__(self, mother_id: int, limit: int):
        super().__init__(
            message=f"Periodic task {mother_id} cannot have more than {limit} occurrences",
        )
        self.mother_id = mother_id
        self.limit = limit


class InvalidPayloadError(DaybookException):
    """Blob store write with a body that is not a JSON array."""

    def __init__(self, entity_name: str):
        super().__init__(
            message=f"Expected array of {entity_name}",
            error_code="expected_array",
            status_code=status.HTTP_400_BAD_REQUEST,
        )


class StoreError(DaybookException):
    """The backing JSON file could not be read or written."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            error_code="store_error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


class PersistenceError(DaybookException):
    """The task list could not be loaded from, or saved to, the gateway."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            error_code="persistence_error",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def daybook_exception_handler(request: Request, exc: DaybookException) -> JSONResponse:
    """Handle DaybookException and return structured response."""
    if exc.status_code >= 500:
        logger.error(f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=exc.error_code,
            message=exc.message,
            details=exc.details,
        ).model_dump(),
    )


def register_exception_handlers(app):
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(DaybookException, daybook_exception_handler)
