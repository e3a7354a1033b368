"""Request/response logging middleware."""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

PLACEHOLDER = "_"


class RequestLoggerMiddleware(BaseHTTPMiddleware):
    """Emit one structured log line per completed request.

    The line carries method, path, status, duration and response length, and
    flags responses sent under a permissive CORS policy.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            # The error translator answers with a 500 after this middleware unwinds
            self._log(request, 500, start, None, None)
            raise

        self._log(
            request,
            response.status_code,
            start,
            response.headers.get("content-length"),
            response.headers.get("access-control-allow-origin"),
        )
        return response

    def _log(
        self,
        request: Request,
        status_code: int,
        start: float,
        content_length: str | None,
        allow_origin: str | None,
    ) -> None:
        duration_ms = int((time.perf_counter() - start) * 1000)
        method = request.method or PLACEHOLDER
        path = request.url.path or PLACEHOLDER
        if request.url.query:
            path = f"{path}?{request.url.query}"

        fields = {
            "method": method,
            "url": path,
            "status": status_code,
            "duration_ms": duration_ms,
            "response_length": content_length or PLACEHOLDER,
        }
        if allow_origin == "*" and method != "OPTIONS":
            fields["cors_policy"] = "permissive"

        message = f"{method} {path} {status_code} {duration_ms}ms - (response-length: {fields['response_length']})"
        if status_code >= 500:
            logger.error(message, extra=fields)
        elif status_code >= 400:
            logger.warning(message, extra=fields)
        else:
            logger.info(message, extra=fields)
