"""
Request context middleware.

WHAT: Middleware that assigns every request an id, exposes it to logging,
and writes one access log line per request.

WHY: Services log failures they re-raise (and the two failures they absorb).
Tagging every log record with the request id ties those lines to the HTTP
call that caused them.

HOW: The context is stored in a ContextVar, which is async-safe. A logging
filter copies the current request id onto each record.
"""

import logging
import time
import uuid
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Optional, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


@dataclass(frozen=True)
class RequestContext:
    """What the access log and the log filter know about the current call."""

    request_id: str
    ip_address: str
    path: str
    method: str


_request_context: ContextVar[Optional[RequestContext]] = ContextVar(
    "request_context", default=None
)


def get_request_context() -> Optional[RequestContext]:
    """Context of the request being served, None outside a request."""
    return _request_context.get()


def get_client_ip(request: Request) -> str:
    """
    Extract the client IP address from a request.

    HOW: Checks X-Real-IP, then the first X-Forwarded-For entry, then the
    direct peer address. Proxy headers are only trustworthy behind a proxy
    that overwrites them.
    """
    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()

    client = request.client
    return client.host if client and client.host else "unknown"


class RequestIdFilter(logging.Filter):
    """
    Logging filter that stamps records with the current request id.

    WHY: Lets the log format reference %(request_id)s on every record,
    including records emitted outside a request ("-").
    """

    def filter(self, record: logging.LogRecord) -> bool:
        context = _request_context.get()
        record.request_id = context.request_id if context else "-"
        return True


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Middleware that captures request context and logs each request.

    WHAT: Reuses an incoming X-Request-ID (from a proxy) or generates one,
    echoes it on the response, and logs method, path, status and duration.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex

        context = RequestContext(
            request_id=request_id,
            ip_address=get_client_ip(request),
            path=request.url.path,
            method=request.method,
        )
        request.state.context = context
        token = _request_context.set(context)

        started = time.perf_counter()
        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            logger.info(
                "%s %s %s -> %s (%.1f ms)",
                context.ip_address,
                context.method,
                context.path,
                response.status_code,
                (time.perf_counter() - started) * 1000,
            )
            return response
        finally:
            _request_context.reset(token)
