"""Position samples with a two-state vertical model."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

# Samples below this barometric altitude (feet) are treated as on the ground.
GROUND_ALTITUDE_THRESHOLD_FT = 1000.0


class Grounded(BaseModel):
    """An aircraft sample on (or near) the ground."""

    state: Literal["grounded"] = "grounded"
    timestamp: datetime = Field(..., description="Sample time (UTC)")
    latitude: float = Field(..., description="Latitude in decimal degrees")
    longitude: float = Field(..., description="Longitude in decimal degrees")

    model_config = ConfigDict(frozen=True)


class Flying(BaseModel):
    """An airborne aircraft sample."""

    state: Literal["flying"] = "flying"
    timestamp: datetime = Field(..., description="Sample time (UTC)")
    latitude: float = Field(..., description="Latitude in decimal degrees")
    longitude: float = Field(..., description="Longitude in decimal degrees")
    altitude: float = Field(
        ...,
        ge=GROUND_ALTITUDE_THRESHOLD_FT,
        description="Barometric altitude in feet",
    )

    model_config = ConfigDict(frozen=True)


Position = Annotated[Union[Grounded, Flying], Field(discriminator="state")]

PositionList = TypeAdapter(list[Position])


def make_position(
    timestamp: datetime,
    latitude: float,
    longitude: float,
    altitude: float | None = None,
) -> Grounded | Flying:
    """Build a position, normalizing missing or low altitudes to ``Grounded``."""

    if altitude is None or altitude < GROUND_ALTITUDE_THRESHOLD_FT:
        return Grounded(timestamp=timestamp, latitude=latitude, longitude=longitude)
    return Flying(
        timestamp=timestamp, latitude=latitude, longitude=longitude, altitude=altitude
    )


def is_flying(position: Grounded | Flying) -> bool:
    return isinstance(position, Flying)


__all__ = [
    "Flying",
    "GROUND_ALTITUDE_THRESHOLD_FT",
    "Grounded",
    "Position",
    "PositionList",
    "is_flying",
    "make_position",
]
