"""Logging and metrics helpers for the fluent HTTP client."""

from fluent_http.utils.logging import (
    clear_correlation_id,
    configure_logging,
    get_correlation_id,
    get_logger,
    set_correlation_id,
)
from fluent_http.utils.metrics import create_counter, create_histogram, record_request

__all__ = [
    "clear_correlation_id",
    "configure_logging",
    "get_correlation_id",
    "get_logger",
    "set_correlation_id",
    "create_counter",
    "create_histogram",
    "record_request",
]
