"""Utility helpers for reusable functionality."""

from .datetime import (
    ensure_app_timezone,
    ensure_utc_naive_datetime,
    get_app_timezone,
    iso_or_none,
    now_in_app_timezone,
    now_utc_naive_datetime,
)

__all__ = [
    "ensure_app_timezone",
    "ensure_utc_naive_datetime",
    "get_app_timezone",
    "iso_or_none",
    "now_in_app_timezone",
    "now_utc_naive_datetime",
]
