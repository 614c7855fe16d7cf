"""
Query package for the CSV records service.
"""

from csv_records.query.engine import QueryEngine, coerce_positive_int, total_pages

__all__ = ["QueryEngine", "coerce_positive_int", "total_pages"]
