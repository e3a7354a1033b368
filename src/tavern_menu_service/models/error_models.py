"""API error models.

Every failure that leaves the service is expressed as an ApiError and
rendered through the ErrorResponse envelope by the error translator.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ErrorKind(str, Enum):
    """Stable discriminator for error responses."""

    VALIDATION_ERROR = "validation_error"
    SERVER_ERROR = "server_error"
    MISSING_ROUTE = "missing_route"
    MISSING_RESOURCE = "missing_resource"


class ValidationIssue(BaseModel):
    """A single failed field or rule from a validation stage."""

    path: list[str | int] = Field(default_factory=list, description="Location of the failing value")
    message: str = Field(..., description="Human readable description of the failure")


class ErrorResponse(BaseModel):
    """Wire envelope for all 4xx/5xx responses."""

    type: ErrorKind
    error: str
    details: list[ValidationIssue] | None = None


class ApiError(Exception):
    """Typed error carrying an HTTP status and an error kind.

    Raised by validation stages and services, and translated into an
    ErrorResponse by the registered error handlers.
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        kind: ErrorKind,
        details: list[ValidationIssue] | None = None,
    ) -> None:
        """Initialize the error.

        Args:
            message: Message returned to the caller
            status_code: HTTP status code (4xx or 5xx)
            kind: Error kind discriminator
            details: Optional list of validation issues
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.kind = kind
        self.details = details

    def to_response(self) -> ErrorResponse:
        """Build the wire envelope for this error."""
        return ErrorResponse(type=self.kind, error=self.message, details=self.details)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the wire envelope to a JSON-compatible dictionary."""
        return self.to_response().model_dump(mode="json")

    def __repr__(self) -> str:
        return f"ApiError({self.kind.value}, {self.status_code}, {self.message!r})"


def missing_route() -> ApiError:
    """Error for requests that matched no route."""
    return ApiError("Route not found", 404, ErrorKind.MISSING_ROUTE)


def missing_resource(message: str = "No such resource") -> ApiError:
    """Error for a referenced entity that does not exist."""
    return ApiError(message, 404, ErrorKind.MISSING_RESOURCE)


def validation_error(
    details: list[ValidationIssue],
    message: str = "Validation error",
    status_code: int = 400,
) -> ApiError:
    """Error for malformed or out-of-range input."""
    return ApiError(message, status_code, ErrorKind.VALIDATION_ERROR, details)


def server_error(message: str = "Server Error") -> ApiError:
    """Opaque error for unexpected failures."""
    return ApiError(message, 500, ErrorKind.SERVER_ERROR)
