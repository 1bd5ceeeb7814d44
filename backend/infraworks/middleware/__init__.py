"""
Middleware package.

WHY: Middleware provides cross-cutting concerns (request ids, access
logging) that apply to all requests.
"""

from infraworks.middleware.request_context import (
    RequestContextMiddleware,
    RequestIdFilter,
    RequestContext,
    get_request_context,
    get_client_ip,
)

__all__ = [
    "RequestContextMiddleware",
    "RequestIdFilter",
    "RequestContext",
    "get_request_context",
    "get_client_ip",
]
