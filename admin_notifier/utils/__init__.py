"""Utility functions for time handling."""

from .timestamps import (
    ensure_utc,
    format_display_date,
    format_display_datetime,
    utc_now,
)

__all__ = [
    "utc_now",
    "ensure_utc",
    "format_display_datetime",
    "format_display_date",
]
