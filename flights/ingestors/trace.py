"""ADS-B Exchange globe history ingestor returning one aircraft's daily trace."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
import logging
import math
from typing import Any, Optional, Protocol

import httpx

from flights.config import get_adsb_cookie, settings
from flights.errors import TraceFetchError
from flights.models import Flying, Grounded, make_position

logger = logging.getLogger("flights.ingestors.trace")

GROUND_SENTINEL = "ground"


class TraceFetcher(Protocol):
    """Source of raw per-day positions for one aircraft."""

    async def fetch_day_trace(self, icao: str, day: date) -> list[Grounded | Flying]:
        """Return the positions recorded for ``icao`` on ``day``."""


def trace_url(base_url: str, icao: str, day: date) -> str:
    return (
        f"{base_url.rstrip('/')}/globe_history/"
        f"{day.year}/{day.month:02}/{day.day:02}/traces/{icao[-2:]}/trace_full_{icao}.json"
    )


def _parse_altitude(raw: Any) -> float | None:
    if raw is None or raw == GROUND_SENTINEL:
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        logger.debug("Unrecognized altitude value: %r", raw)
        return None
    return value if math.isfinite(value) else None


def parse_trace(payload: Any) -> list[Grounded | Flying]:
    """Convert a ``trace_full`` payload into positions.

    Each sample is ``[seconds_offset, lat, lon, altitude | "ground", ...]``
    relative to the payload ``timestamp`` (epoch seconds). Samples without
    coordinates are dropped; non-numeric or non-finite values raise
    ``TraceFetchError``.
    """

    if not isinstance(payload, dict):
        raise TraceFetchError("Trace payload is not an object")

    base = payload.get("timestamp")
    samples = payload.get("trace") or []
    if samples and (
        isinstance(base, bool)
        or not isinstance(base, (int, float))
        or not math.isfinite(base)
    ):
        raise TraceFetchError("Trace payload has no valid timestamp")

    positions: list[Grounded | Flying] = []
    for sample in samples:
        if not isinstance(sample, (list, tuple)) or len(sample) < 4:
            continue
        offset, lat, lon = sample[0], sample[1], sample[2]
        if lat is None or lon is None or offset is None:
            continue
        try:
            timestamp = datetime.fromtimestamp(base, tz=timezone.utc) + timedelta(
                seconds=float(offset)
            )
            lat, lon = float(lat), float(lon)
        except (TypeError, ValueError, OverflowError) as exc:
            raise TraceFetchError(f"Malformed trace sample: {sample!r}") from exc
        if not (math.isfinite(lat) and math.isfinite(lon)):
            raise TraceFetchError(f"Malformed trace sample: {sample!r}")
        positions.append(make_position(timestamp, lat, lon, _parse_altitude(sample[3])))
    return positions


class AdsbExchangeTraceFetcher:
    """Fetch full-day traces from ADS-B Exchange's globe history."""

    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        cookie: Optional[str] = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url or settings.adsb_base_url
        self.timeout = timeout or settings.adsb_timeout
        self.cookie = cookie
        self.transport = transport

    def _headers(self, icao: str) -> dict[str, str]:
        headers = {"Referer": f"{self.base_url.rstrip('/')}/?icao={icao}"}
        cookie = self.cookie if self.cookie is not None else get_adsb_cookie()
        if cookie:
            headers["Cookie"] = cookie
        return headers

    async def fetch_day_trace(self, icao: str, day: date) -> list[Grounded | Flying]:
        url = trace_url(self.base_url, icao, day)
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.get(url, headers=self._headers(icao))
        except httpx.TimeoutException as exc:
            logger.warning("Trace request timed out for %s on %s: %s", icao, day, exc)
            raise TraceFetchError(f"Trace request timed out for {icao} on {day}") from exc
        except httpx.RequestError as exc:
            logger.warning("Trace request failed for %s on %s: %s", icao, day, exc)
            raise TraceFetchError(f"Trace request failed for {icao} on {day}") from exc

        if response.status_code == 404:
            # No trace means the aircraft did not transmit that day.
            logger.debug("No trace for %s on %s", icao, day)
            return []
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Trace source returned HTTP %s for %s on %s",
                exc.response.status_code,
                icao,
                day,
            )
            raise TraceFetchError(
                f"Trace source returned HTTP {exc.response.status_code}"
            ) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning("Failed to parse trace JSON for %s on %s: %s", icao, day, exc)
            raise TraceFetchError("Trace response is not valid JSON") from exc

        positions = parse_trace(payload)
        logger.debug("Fetched %s positions for %s on %s", len(positions), icao, day)
        return positions


__all__ = ["AdsbExchangeTraceFetcher", "TraceFetcher", "parse_trace", "trace_url"]
