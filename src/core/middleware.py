"""Request middleware: context binding, access logging and request ids."""

import time
from collections.abc import Awaitable, Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from src.core.context import (
    clear_context,
    set_correlation_id,
    set_request_id,
    set_trace_id,
)


logger = structlog.get_logger(__name__)

DEFAULT_EXCLUDED_PATHS = ("/health",)


def trace_id_from_traceparent(traceparent: str | None) -> str | None:
    """Trace id of a W3C ``traceparent`` header (``version-trace-parent-flags``)."""
    if not traceparent:
        return None
    parts = traceparent.split("-")
    if len(parts) != 4 or len(parts[1]) != 32:
        return None
    return parts[1]


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind request/trace/correlation ids for the duration of a request.

    Every response carries ``X-Request-ID`` (echoed when the client sent
    one) and ``X-Response-Time-Ms``. Start and finish are logged except for
    excluded path prefixes.
    """

    REQUEST_ID_HEADER = "X-Request-ID"
    TRACE_ID_HEADER = "X-Trace-ID"
    CORRELATION_ID_HEADER = "X-Correlation-ID"
    TRACEPARENT_HEADER = "traceparent"
    RESPONSE_TIME_HEADER = "X-Response-Time-Ms"

    def __init__(
        self,
        app: ASGIApp,
        log_requests: bool = True,
        exclude_paths: list[str] | None = None,
    ) -> None:
        super().__init__(app)
        self.log_requests = log_requests
        self.exclude_paths = tuple(exclude_paths or DEFAULT_EXCLUDED_PATHS)

    def _bind_context(self, request: Request) -> str:
        headers = request.headers
        request_id = set_request_id(headers.get(self.REQUEST_ID_HEADER))
        request.state.request_id = request_id

        trace_id = headers.get(self.TRACE_ID_HEADER) or trace_id_from_traceparent(
            headers.get(self.TRACEPARENT_HEADER)
        )
        if trace_id:
            set_trace_id(trace_id)

        correlation_id = headers.get(self.CORRELATION_ID_HEADER)
        if correlation_id:
            set_correlation_id(correlation_id)

        return request_id

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        started = time.perf_counter()
        request_id = self._bind_context(request)
        path = request.url.path
        should_log = self.log_requests and not path.startswith(self.exclude_paths)

        if should_log:
            logger.info(
                "request_started",
                method=request.method,
                path=path,
                client_ip=request.client.host if request.client else None,
            )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception(
                "request_failed",
                method=request.method,
                path=path,
                error_type=type(e).__name__,
                duration_ms=_elapsed_ms(started),
            )
            raise
        else:
            duration_ms = _elapsed_ms(started)
            if should_log:
                log = logger.warning if response.status_code >= 400 else logger.info
                log(
                    "request_completed",
                    method=request.method,
                    path=path,
                    status_code=response.status_code,
                    duration_ms=duration_ms,
                )
            response.headers[self.REQUEST_ID_HEADER] = request_id
            response.headers[self.RESPONSE_TIME_HEADER] = str(duration_ms)
            return response
        finally:
            clear_context()


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
