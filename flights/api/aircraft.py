"""Per-aircraft position and leg endpoints."""

from __future__ import annotations

from datetime import date
import logging

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from flights.config import settings
from flights.errors import CorruptCacheError, StorageError, TraceFetchError
from flights.ingestors import TraceFetcher
from flights.models.api import (
    AircraftLegsResponse,
    AircraftPositionsResponse,
    LegResponse,
)
from flights.services import aircraft_positions, legs
from flights.storage import StorageBackend

from .dependencies import get_storage, get_trace_fetcher

router = APIRouter(prefix="/api/v1", tags=["aircraft"])

logger = logging.getLogger("flights.api.aircraft")

IcaoPath = Path(
    ...,
    pattern="^[0-9a-fA-F]{6}$",
    description="ICAO hex identifier",
)


async def _positions(
    icao: str,
    from_date: date,
    to_date: date,
    storage: StorageBackend,
    fetcher: TraceFetcher,
):
    if to_date <= from_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="to_date must be after from_date",
        )

    try:
        return await aircraft_positions(
            from_date,
            to_date,
            icao,
            storage,
            fetcher,
            concurrency=settings.month_concurrency,
            refresh_refreshable=settings.refresh_current_month,
            day_concurrency=settings.day_concurrency,
        )
    except CorruptCacheError as exc:
        logger.error("Corrupt cache while resolving %s: %s", icao, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Cached data is corrupt: {exc.key}",
        ) from exc
    except (TraceFetchError, StorageError) as exc:
        logger.warning("Position retrieval failed for %s: %s", icao, exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)
        ) from exc


@router.get(
    "/aircraft/{icao}/positions",
    response_model=AircraftPositionsResponse,
    summary="Positions per day for an aircraft",
)
async def get_positions(
    icao: str = IcaoPath,
    from_date: date = Query(..., description="First day (inclusive)"),
    to_date: date = Query(..., description="Last day (exclusive)"),
    storage: StorageBackend = Depends(get_storage),
    fetcher: TraceFetcher = Depends(get_trace_fetcher),
) -> AircraftPositionsResponse:
    icao = icao.lower()
    positions = await _positions(icao, from_date, to_date, storage, fetcher)
    return AircraftPositionsResponse(
        icao=icao, from_date=from_date, to_date=to_date, positions=positions
    )


@router.get(
    "/aircraft/{icao}/legs",
    response_model=AircraftLegsResponse,
    summary="Flight legs for an aircraft",
)
async def get_legs(
    icao: str = IcaoPath,
    from_date: date = Query(..., description="First day (inclusive)"),
    to_date: date = Query(..., description="Last day (exclusive)"),
    storage: StorageBackend = Depends(get_storage),
    fetcher: TraceFetcher = Depends(get_trace_fetcher),
) -> AircraftLegsResponse:
    """Segment the aircraft's positions in the window into legs."""

    icao = icao.lower()
    positions = await _positions(icao, from_date, to_date, storage, fetcher)
    trace = sorted(
        (p for day in positions.values() for p in day), key=lambda p: p.timestamp
    )

    logger.info("Computing legs for %s (%s positions)", icao, len(trace))
    result = legs(trace, allow_unterminated=settings.allow_unterminated_legs)

    return AircraftLegsResponse(
        icao=icao,
        from_date=from_date,
        to_date=to_date,
        legs=[
            LegResponse(
                from_=leg.from_,
                to=leg.to,
                distance_km=leg.distance_km(),
                duration_s=leg.duration().total_seconds(),
            )
            for leg in result
        ],
    )
