"""Service-layer helpers for the flights service."""

from .legs import legs
from .positions import (
    aircraft_positions,
    existing_months_positions,
    gather_bounded,
    iter_dates,
    month_bounds,
    month_positions,
)

__all__ = [
    "aircraft_positions",
    "existing_months_positions",
    "gather_bounded",
    "iter_dates",
    "legs",
    "month_bounds",
    "month_positions",
]
