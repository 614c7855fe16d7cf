"""
Query engine for listing, searching, and clearing stored records.

Paging parameters arrive as loosely typed strings from the HTTP layer and are
coerced with the same parse-or-default rule the ingestion pipeline applies to
post identifiers, so a bad value falls back to the default instead of failing.
"""

from __future__ import annotations

import math
from typing import Any, List, Optional

from csv_records.domain.models import COLUMNS, RecordPage
from csv_records.ingest.record_builder import parse_int, parse_or_default
from csv_records.store.abstract import RecordStore
from csv_records.utils.logging import get_logger

log = get_logger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

# Upper bound for page and limit; keeps (page - 1) * limit inside a signed
# 64-bit OFFSET.
MAX_PAGING_VALUE = 2**31 - 1


def coerce_positive_int(value: Any, default: int) -> int:
    """Parse ``value`` as an integer, falling back to ``default`` outside 1..MAX_PAGING_VALUE."""
    parsed = parse_or_default(value, parse_int, default)
    return parsed if 1 <= parsed <= MAX_PAGING_VALUE else default



def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit)


class QueryEngine:
    """
    Read-side operations over a RecordStore.
    """

    def __init__(
        self,
        store: RecordStore,
        default_page: int = DEFAULT_PAGE,
        default_limit: int = DEFAULT_LIMIT,
    ) -> None:
        self.store = store
        self.default_page = default_page
        self.default_limit = default_limit

    def list_records(
        self,
        page: Any = None,
        limit: Any = None,
        search: Optional[str] = None,
    ) -> RecordPage:
        """
        Return one id-ordered page of records, optionally filtered.

        Parameters
        ----------
        page : Any
            1-based page number; coerced, defaults to ``default_page``.
        limit : Any
            Page size; coerced, defaults to ``default_limit``.
        search : str | None
            Case-insensitive substring matched against name OR email OR body.
            Empty or None means no filter.
        """
        page_number = coerce_positive_int(page, self.default_page)
        page_size = coerce_positive_int(limit, self.default_limit)
        offset = (page_number - 1) * page_size
        term = search or None

        total, records = self.store.find_and_count(term, page_size, offset)
        log.debug(
            "Listed records",
            extra={"page": page_number, "limit": page_size, "search": term, "total": total},
        )
        return RecordPage(
            records=records,
            total=total,
            page=page_number,
            limit=page_size,
            total_pages=total_pages(total, page_size),
        )

    def clear_all(self) -> int:
        """Delete every record; succeeds on an empty store."""
        deleted = self.store.delete_all()
        log.info("All records cleared", extra={"deleted": deleted})
        return deleted

    @staticmethod
    def list_columns() -> List[str]:
        """The fixed, ordered column list shown to clients."""
        return list(COLUMNS)


__all__ = ["MAX_PAGING_VALUE", "QueryEngine", "coerce_positive_int", "total_pages"]
