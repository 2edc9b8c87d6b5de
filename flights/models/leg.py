"""Flight legs inferred from ground/air transitions."""

from __future__ import annotations

import math
from datetime import timedelta

from pydantic import BaseModel, ConfigDict, Field

from .position import Position

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in kilometers."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = phi2 - phi1
    d_lambda = math.radians(lon2 - lon1)
    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


class Leg(BaseModel):
    """One continuous flight from the last grounded sample to the first landed one."""

    from_: Position = Field(..., alias="from", description="Departure sample")
    to: Position = Field(..., description="Arrival sample")

    model_config = ConfigDict(populate_by_name=True)

    def positions(self) -> tuple[Position, Position]:
        return (self.from_, self.to)

    def duration(self) -> timedelta:
        return self.to.timestamp - self.from_.timestamp

    def distance_km(self) -> float:
        return haversine_km(
            self.from_.latitude,
            self.from_.longitude,
            self.to.latitude,
            self.to.longitude,
        )


__all__ = ["Leg", "haversine_km"]
