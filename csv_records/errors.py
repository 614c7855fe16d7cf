"""
Exception hierarchy for the CSV records service.

Each layer raises its own error type so the HTTP boundary can map failures
to a status code and message without inspecting driver exceptions.
"""

from __future__ import annotations


class CsvRecordsError(Exception):
    """Base exception for all service failures."""


class ConfigError(CsvRecordsError):
    """Raised for invalid runtime configuration."""


class CsvParseError(CsvRecordsError):
    """Raised when an uploaded stream cannot be decoded or split into rows."""


class StoreError(CsvRecordsError):
    """Raised when the record store fails to read or delete."""


class StoreWriteError(StoreError):
    """Raised when a batch insert into the record store fails."""


__all__ = [
    "CsvRecordsError",
    "ConfigError",
    "CsvParseError",
    "StoreError",
    "StoreWriteError",
]
