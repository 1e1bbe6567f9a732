# Core infrastructure
from socialfeed.core.context import (
    clear_context,
    get_context,
    get_request_id,
    get_trace_id,
    get_user_id,
    set_request_id,
    set_trace_id,
    set_user_id,
)
from socialfeed.core.exceptions import AppError, to_http_exception
from socialfeed.core.logging import configure_structlog, get_logger
from socialfeed.core.middleware import RequestContextMiddleware


__all__ = [
    "AppError",
    "RequestContextMiddleware",
    "clear_context",
    "configure_structlog",
    "get_context",
    "get_logger",
    "get_request_id",
    "get_trace_id",
    "get_user_id",
    "set_request_id",
    "set_trace_id",
    "set_user_id",
    "to_http_exception",
]
