"""FastAPI dependencies resolving the shared storage backend and trace fetcher."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from flights.ingestors import TraceFetcher
from flights.storage import StorageBackend


def get_storage(request: Request) -> StorageBackend:
    storage = getattr(request.app.state, "storage", None)
    if storage is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Storage backend not initialized",
        )
    return storage


def get_trace_fetcher(request: Request) -> TraceFetcher:
    fetcher = getattr(request.app.state, "trace_fetcher", None)
    if fetcher is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Trace source not configured",
        )
    return fetcher


__all__ = ["get_storage", "get_trace_fetcher"]
