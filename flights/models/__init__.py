"""Pydantic models for the flights service."""

from .leg import Leg, haversine_km
from .position import (
    GROUND_ALTITUDE_THRESHOLD_FT,
    Flying,
    Grounded,
    Position,
    PositionList,
    is_flying,
    make_position,
)

__all__ = [
    "Flying",
    "GROUND_ALTITUDE_THRESHOLD_FT",
    "Grounded",
    "Leg",
    "Position",
    "PositionList",
    "haversine_km",
    "is_flying",
    "make_position",
]
