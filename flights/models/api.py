"""Response models for the HTTP API."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from .position import Position


class LegResponse(BaseModel):
    """A leg with derived distance and duration."""

    from_: Position = Field(..., alias="from")
    to: Position
    distance_km: float = Field(..., description="Great-circle distance in kilometers")
    duration_s: float = Field(..., description="Elapsed time in seconds")

    model_config = ConfigDict(populate_by_name=True)


class AircraftLegsResponse(BaseModel):
    icao: str
    from_date: date
    to_date: date
    legs: list[LegResponse]


class AircraftPositionsResponse(BaseModel):
    icao: str
    from_date: date
    to_date: date
    positions: dict[date, list[Position]]


class ExistingMonth(BaseModel):
    """A cached (aircraft, month) bucket."""

    icao: str = Field(..., description="ICAO hex identifier")
    month: str = Field(..., description="Month in YYYY-MM format")


class CacheMonthsResponse(BaseModel):
    generated_at: datetime
    months: list[ExistingMonth]


__all__ = [
    "AircraftLegsResponse",
    "AircraftPositionsResponse",
    "CacheMonthsResponse",
    "ExistingMonth",
    "LegResponse",
]
