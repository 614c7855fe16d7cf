"""
HTTP API package for the CSV records service.
"""

from csv_records.api.app import create_app

__all__ = ["create_app"]
