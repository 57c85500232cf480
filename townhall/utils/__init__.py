"""Utility helpers for reusable functionality."""

from .datetime import (
    from_storage,
    get_app_timezone,
    isoformat_or_none,
    now_in_app_timezone,
    parse_timezone,
    to_storage,
)

__all__ = [
    "from_storage",
    "get_app_timezone",
    "isoformat_or_none",
    "now_in_app_timezone",
    "parse_timezone",
    "to_storage",
]
