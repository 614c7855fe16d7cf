"""
Abstract record store interfaces for the CSV records service.

Concrete stores (SQLite file, pooled Postgres) implement the RecordStore
protocol so the bulk loader and query engine never depend on a driver.

Consistency model: each call runs on its own connection. ``insert_many`` is
one atomic transaction, and ``find_and_count`` issues the count and the page
query back to back on one connection. Nothing orders calls across requests, so a concurrent
``delete_all`` may remove part of an in-flight batch or change a listing's
total. A stricter store can be swapped in behind this protocol without
changing its callers.
"""

from __future__ import annotations

import abc
from typing import List, Optional, Protocol, Sequence, Tuple, runtime_checkable

from csv_records.domain.models import Record, RecordDraft


@runtime_checkable
class RecordStore(Protocol):
    """
    Common interface all record stores must implement.

    Attributes
    ----------
    name : str
        A short machine-friendly identifier of the backend.
    """

    name: str

    def initialize(self) -> None:
        """Create the storage file/table if missing (idempotent)."""
        ...

    def insert_many(self, drafts: Sequence[RecordDraft]) -> int:
        """
        Insert all drafts as one atomic batch.

        Returns
        -------
        int
            Number of rows inserted.
        """
        ...

    def find_and_count(
        self, search: Optional[str], limit: int, offset: int
    ) -> Tuple[int, List[Record]]:
        """
        Count the rows matching ``search`` and return one id-ordered page of them.

        Parameters
        ----------
        search : str | None
            Case-insensitive substring matched against name, email, or body.
            None or "" disables filtering.
        limit : int
            Maximum number of rows in the page.
        offset : int
            Number of matching rows to skip.
        """
        ...

    def delete_all(self) -> int:
        """Delete every record and return the number removed."""
        ...

    def close(self) -> None:
        """Release connections or pools held by the store."""
        ...


class AbstractRecordStore(abc.ABC):
    """
    Optional ABC helper for class-based implementations.

    Subclasses should set `name` and implement the storage operations.
    """

    name: str

    @abc.abstractmethod
    def initialize(self) -> None:  # pragma: no cover - interface only
        raise NotImplementedError

    @abc.abstractmethod
    def insert_many(self, drafts: Sequence[RecordDraft]) -> int:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    def find_and_count(
        self, search: Optional[str], limit: int, offset: int
    ) -> Tuple[int, List[Record]]:  # pragma: no cover - interface only
        raise NotImplementedError

    @abc.abstractmethod
    def delete_all(self) -> int:  # pragma: no cover - interface only
        raise NotImplementedError

    def close(self) -> None:
        """Default no-op; stores holding pools override this."""
        return None


__all__ = ["AbstractRecordStore", "RecordStore"]
