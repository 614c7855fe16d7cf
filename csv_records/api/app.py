"""
FastAPI application factory for the CSV records service.

The record store is created and its schema synchronized once at startup; the
store is closed on shutdown. Routes are mounted under ``settings.api_prefix``.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from csv_records import __version__
from csv_records.api.routes import router
from csv_records.config import Settings, get_settings
from csv_records.infrastructure.store_factory import create_store
from csv_records.ingest.bulk_loader import BulkLoader
from csv_records.query.engine import QueryEngine
from csv_records.store.abstract import RecordStore
from csv_records.utils.logging import get_logger

log = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[RecordStore] = None,
) -> FastAPI:
    """
    Build the API application.

    Parameters
    ----------
    settings : Settings | None
        Effective configuration; defaults to the cached environment settings.
    store : RecordStore | None
        Store override (tests); defaults to the configured backend.
    """
    settings = settings or get_settings()
    record_store = store or create_store(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        record_store.initialize()
        app.state.settings = settings
        app.state.store = record_store
        app.state.loader = BulkLoader(record_store)
        app.state.engine = QueryEngine(
            record_store,
            default_page=settings.default_page,
            default_limit=settings.default_limit,
        )
        log.info(
            "API ready",
            extra={"backend": record_store.name, "prefix": settings.api_prefix},
        )
        try:
            yield
        finally:
            record_store.close()

    app = FastAPI(title="CSV Records", version=__version__, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router, prefix=settings.api_prefix)

    @app.get("/")
    def health() -> dict:
        return {"status": "OK"}

    return app


__all__ = ["create_app"]
