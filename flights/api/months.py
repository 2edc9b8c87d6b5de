"""Enumeration of cached month buckets."""

from __future__ import annotations

from datetime import date, datetime, timezone
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from flights.config import settings
from flights.errors import StorageError
from flights.models.api import CacheMonthsResponse, ExistingMonth
from flights.services import existing_months_positions
from flights.storage import StorageBackend

from .dependencies import get_storage

router = APIRouter(prefix="/api/v1", tags=["cache"])

logger = logging.getLogger("flights.api.months")


def _parse_month(value: str) -> date:
    try:
        return datetime.strptime(value, "%Y-%m").date()
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid month {value!r}; expected YYYY-MM",
        ) from None


@router.get(
    "/cache/months",
    response_model=CacheMonthsResponse,
    summary="List cached (aircraft, month) buckets",
)
async def list_cached_months(
    month: list[str] = Query(..., description="Months to inspect, as YYYY-MM"),
    storage: StorageBackend = Depends(get_storage),
) -> CacheMonthsResponse:
    months = [_parse_month(value) for value in month]

    try:
        existing = await existing_months_positions(
            months, storage, concurrency=settings.enumerate_concurrency
        )
    except StorageError as exc:
        logger.warning("Cache enumeration failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)
        ) from exc

    return CacheMonthsResponse(
        generated_at=datetime.now(timezone.utc),
        months=[
            ExistingMonth(icao=icao, month=f"{start.year:04}-{start.month:02}")
            for icao, start in sorted(existing, key=lambda item: (item[1], item[0]))
        ],
    )
