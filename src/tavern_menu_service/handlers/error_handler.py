"""Translation of failures into JSON error responses.

All errors leave the service through these handlers. ApiError instances are
rendered as-is; anything unrecognised becomes an opaque server_error so that
internal details are only ever logged, never returned.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from tavern_menu_service.models.error_models import (
    ApiError,
    ErrorKind,
    ValidationIssue,
    missing_route,
    server_error,
    validation_error,
)
from tavern_menu_service.observability.metrics import record_api_error

logger = logging.getLogger(__name__)


def render_api_error(error: ApiError) -> JSONResponse:
    """Render an ApiError as its JSON envelope and status."""
    record_api_error(error.kind.value, error.status_code)
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
    logger.warning(
        f"API ERROR: {exc.message} - [{exc.status_code}]",
        extra={"error_kind": exc.kind.value, "path": request.url.path},
    )
    return render_api_error(exc)


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Map framework HTTP errors (unmatched routes and methods) onto ApiError."""
    if exc.status_code in (404, 405):
        error = missing_route()
    elif exc.status_code >= 500:
        error = server_error()
    else:
        error = ApiError(str(exc.detail), exc.status_code, ErrorKind.VALIDATION_ERROR)
    logger.warning(
        f"API ERROR: {error.message} - [{error.status_code}]",
        extra={"error_kind": error.kind.value, "path": request.url.path, "method": request.method},
    )
    return render_api_error(error)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    issues = [ValidationIssue(path=list(err["loc"]), message=err["msg"]) for err in exc.errors()]
    error = validation_error(issues)
    logger.warning(
        f"API ERROR: {error.message} - [{error.status_code}]",
        extra={"error_kind": error.kind.value, "path": request.url.path},
    )
    return render_api_error(error)


def _render_unknown_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"UNKNOWN ERROR: {exc}",
        exc_info=exc,
        extra={"path": request.url.path, "method": request.method},
    )
    return render_api_error(server_error())


async def handle_unknown_error(request: Request, exc: Exception) -> JSONResponse:
    return _render_unknown_error(request, exc)


class UnhandledErrorMiddleware(BaseHTTPMiddleware):
    """Answer unexpected exceptions with an opaque server_error.

    Installed innermost so the 500 still passes through CORS and the request
    logger. Exceptions that escape other middleware are left to the
    application-level Exception handler.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            return _render_unknown_error(request, exc)


def register_error_handlers(app: FastAPI) -> None:
    """Attach the error translator to an application.

    Must be called after all routes are registered.
    """
    app.add_exception_handler(ApiError, handle_api_error)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, handle_unknown_error)
