"""Request validation stages.

A validation stage checks one slice of the request (path parameters, query
string or JSON body) against a pydantic schema. Stages are attached to routes
as FastAPI dependencies and run in declaration order; the first failing stage
stops the request and its ApiError is rendered by the error translator.
"""

import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from fastapi import Request
from pydantic import BaseModel, ValidationError

from tavern_menu_service.models.error_models import (
    ApiError,
    ValidationIssue,
    server_error,
    validation_error,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

MAX_BODY_BYTES = 2 * 1024 * 1024


class ValidationProperty(str, Enum):
    """Request slices a stage can validate."""

    BODY = "body"
    QUERY = "query"
    PARAMS = "params"


@dataclass(frozen=True)
class ValidationOutcome(Generic[ModelT]):
    """Result of validating one request slice: either a value or an error."""

    value: ModelT | None = None
    error: ApiError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> ModelT:
        """Return the parsed value, raising the error if validation failed."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


def issues_from_validation_error(error: ValidationError) -> list[ValidationIssue]:
    """Convert pydantic errors into ordered validation issues."""
    return [ValidationIssue(path=list(err["loc"]), message=err["msg"]) for err in error.errors()]


def validate_slice(schema: type[ModelT], value: Any) -> ValidationOutcome[ModelT]:
    """Validate a raw request slice against a schema.

    Args:
        schema: Pydantic model describing the slice
        value: Raw slice value (dict of strings or decoded JSON)

    Returns:
        Outcome holding the parsed model, a validation_error for schema
        failures, or a server_error for anything else raised while parsing
    """
    try:
        return ValidationOutcome(value=schema.model_validate(value))
    except ValidationError as e:
        issues = issues_from_validation_error(e)
        logger.info("Validation error", extra={"issues": [issue.model_dump() for issue in issues]})
        return ValidationOutcome(error=validation_error(issues))
    except Exception:
        logger.exception("Unexpected validation error")
        return ValidationOutcome(error=server_error("Unexpected error during validation"))


async def read_slice(request: Request, prop: ValidationProperty) -> Any:
    """Read the raw value of a request slice.

    Raises:
        ApiError: validation_error if the body is too large or is not JSON
    """
    if prop is ValidationProperty.PARAMS:
        return dict(request.path_params)
    if prop is ValidationProperty.QUERY:
        return dict(request.query_params)

    body = await request.body()
    if len(body) > MAX_BODY_BYTES:
        raise validation_error(
            [ValidationIssue(path=[], message=f"Request body exceeds {MAX_BODY_BYTES} bytes")],
            message="Payload too large",
            status_code=413,
        )
    if not body:
        return None
    try:
        return json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise validation_error([ValidationIssue(path=[], message=f"Invalid JSON body: {e}")]) from e


def validate(
    schema: type[ModelT],
    prop: ValidationProperty = ValidationProperty.BODY,
) -> Callable[[Request], Awaitable[ModelT]]:
    """Build a validation stage for a route.

    The parsed value replaces the slice: it is stored on ``request.state``
    under the slice name and returned to the handler.

    Example:
        @app.get("/menus/{type}")
        async def retrieve(
            params: MenuTypeParams = Depends(validate(MenuTypeParams, ValidationProperty.PARAMS)),
        ): ...
    """

    async def stage(request: Request) -> ModelT:
        value = await read_slice(request, prop)
        logger.debug(f"Received value {value!r} for property {prop.value}")

        parsed = validate_slice(schema, value).unwrap()
        setattr(request.state, prop.value, parsed)
        return parsed

    stage.__name__ = f"validate_{prop.value}_{schema.__name__}"
    return stage
