"""
Domain models for the CSV records service.

Defines the persisted record schema aligned with the `csv_records` table, the
unpersisted draft produced by ingestion, and the listing result returned by
the query engine.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List

from pydantic import BaseModel, Field

COLUMNS: tuple[str, ...] = ("post_id", "name", "email", "body")


class RecordDraft(BaseModel):
    """
    A record built from one CSV row, before the store assigns id and timestamps.
    """

    post_id: int = Field(0, description="Parsed post identifier (0 when absent).")
    name: str = Field("", description="Trimmed name.")
    email: str = Field("", description="Trimmed email.")
    body: str = Field("", description="Trimmed body text.")

    model_config = {"frozen": True}


class Record(BaseModel):
    """
    Representation of a single row in the `csv_records` table.
    """

    id: int = Field(..., description="Primary key, assigned by the store.")
    post_id: int = Field(..., description="Parsed post identifier.")
    name: str = Field(..., description="Trimmed name.")
    email: str = Field(..., description="Trimmed email.")
    body: str = Field(..., description="Trimmed body text.")
    created_at: datetime = Field(..., description="Row creation timestamp.")
    updated_at: datetime = Field(..., description="Row update timestamp.")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "arbitrary_types_allowed": False,
    }

    def to_api(self) -> Dict[str, Any]:
        """Serialize with the camel-cased timestamp keys the HTTP API exposes."""
        return {
            "id": self.id,
            "post_id": self.post_id,
            "name": self.name,
            "email": self.email,
            "body": self.body,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }


class RecordPage(BaseModel):
    """One page of a (possibly filtered) listing plus pagination totals."""

    records: List[Record]
    total: int
    page: int
    limit: int
    total_pages: int

    def to_api(self) -> Dict[str, Any]:
        return {
            "records": [record.to_api() for record in self.records],
            "pagination": {
                "total": self.total,
                "page": self.page,
                "limit": self.limit,
                "totalPages": self.total_pages,
            },
        }


__all__ = ["COLUMNS", "Record", "RecordDraft", "RecordPage"]
