"""
Utilities package for the CSV records service.

Exports shared helpers for logging, profiling, and other cross-cutting concerns.
Keep this package lightweight and free of domain-specific logic.
"""

from csv_records.utils.logging import configure_from_settings, configure_logging, get_logger
from csv_records.utils.profiler import ProfileStats, profile_block

__all__ = [
    "configure_from_settings",
    "configure_logging",
    "get_logger",
    "ProfileStats",
    "profile_block",
]
