"""Observability – structured logging helpers."""
from campus_search.observability.logging.factory import JsonLoggerFactory, configure_logging
from campus_search.observability.logging.processors import (
    bind_request_context,
    clear_request_context,
    get_logger,
)

__all__ = [
    "JsonLoggerFactory",
    "bind_request_context",
    "clear_request_context",
    "configure_logging",
    "get_logger",
]
