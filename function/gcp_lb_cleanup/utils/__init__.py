"""Utility functions for GCP load balancer cleanup."""

from .logging_config import bind_correlation_id, get_logger
from .gcp_helpers import (
    SelfLinkParseError,
    format_timestamp,
    parse_self_link,
    parse_timestamp,
    utc_now,
)

__all__ = [
    "bind_correlation_id",
    "get_logger",
    "SelfLinkParseError",
    "format_timestamp",
    "parse_self_link",
    "parse_timestamp",
    "utc_now",
]
