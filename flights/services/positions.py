"""Month-bucketed position cache and date-range assembly."""

from __future__ import annotations

import asyncio
from datetime import date, timedelta
import logging
from functools import partial
from typing import Awaitable, Callable, Iterable, Iterator, Optional, TypeVar

from pydantic import TypeAdapter, ValidationError

from flights.cache import CacheAction, cached_call
from flights.errors import CorruptCacheError, InvariantError
from flights.ingestors import TraceFetcher
from flights.keys import month_key, month_prefix, parse_month_key
from flights.models import Position
from flights.storage import StorageBackend

logger = logging.getLogger("flights.services.positions")

T = TypeVar("T")

PositionsByDate = dict[date, list[Position]]

_BUCKET_ADAPTER: TypeAdapter[dict[date, list[Position]]] = TypeAdapter(
    dict[date, list[Position]]
)


def iter_dates(from_date: date, to_date: date) -> Iterator[date]:
    """Yield every date in the half-open range ``[from_date, to_date)``."""

    current = from_date
    while current < to_date:
        yield current
        current += timedelta(days=1)


def first_of_month(day: date) -> date:
    return day.replace(day=1)


def month_bounds(month: date) -> tuple[date, date]:
    """Return the first day of ``month`` and the first day of the next month."""

    start = first_of_month(month)
    if start.month == 12:
        return start, date(start.year + 1, 1, 1)
    return start, date(start.year, start.month + 1, 1)


async def gather_bounded(
    factories: Iterable[Callable[[], Awaitable[T]]], limit: int
) -> list[T]:
    """Run every factory's awaitable with at most ``limit`` in flight at once.

    A factory is only called once a slot is free. Results are returned in
    input order. The first failure cancels every task still waiting or
    running and is re-raised.
    """

    if limit < 1:
        raise ValueError("limit must be at least 1")

    semaphore = asyncio.Semaphore(limit)

    async def run(factory: Callable[[], Awaitable[T]]) -> T:
        async with semaphore:
            return await factory()

    tasks = [asyncio.ensure_future(run(factory)) for factory in factories]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


def encode_bucket(positions: PositionsByDate) -> bytes:
    return _BUCKET_ADAPTER.dump_json(positions)


def decode_bucket(key: str, data: bytes) -> PositionsByDate:
    try:
        return _BUCKET_ADAPTER.validate_json(data)
    except ValidationError as exc:
        logger.error("Cached bucket %s failed to deserialize: %s", key, exc)
        raise CorruptCacheError(key, str(exc)) from exc


async def month_positions(
    month: date,
    icao: str,
    backend: StorageBackend,
    fetcher: TraceFetcher,
    *,
    today: Optional[date] = None,
    refresh_refreshable: bool = False,
    day_concurrency: int = 1,
) -> PositionsByDate:
    """Return ``icao``'s positions for every day of ``month``, cached as one object.

    On a miss every day of the month is fetched, not only the days a caller
    is interested in, so overlapping ranges share the same cached bucket.
    """

    if month.day != 1:
        raise ValueError(f"month must be the first day of a month, got {month}")
    logger.info("month_positions(%s, %s)", month, icao)

    key = month_key(icao, month)
    start, end = month_bounds(month)
    action = CacheAction.from_date(end, today)

    async def fetch() -> bytes:
        days = list(iter_dates(start, end))
        traces = await gather_bounded(
            (partial(fetcher.fetch_day_trace, icao, day) for day in days),
            day_concurrency,
        )
        return encode_bucket(dict(zip(days, traces)))

    data = await cached_call(
        key, fetch, action, backend, refresh_refreshable=refresh_refreshable
    )
    return decode_bucket(key, data)


async def aircraft_positions(
    from_date: date,
    to_date: date,
    icao: str,
    backend: StorageBackend,
    fetcher: TraceFetcher,
    *,
    concurrency: int = 1,
    today: Optional[date] = None,
    refresh_refreshable: bool = False,
    day_concurrency: int = 1,
) -> PositionsByDate:
    """Return a mapping of every date in ``[from_date, to_date)`` to its positions.

    Data is retrieved in whole-month buckets through the storage cache,
    resolving at most ``concurrency`` months at a time.
    """

    dates = list(iter_dates(from_date, to_date))
    months = sorted({first_of_month(day) for day in dates})

    results = await gather_bounded(
        (
            partial(
                month_positions,
                month,
                icao,
                backend,
                fetcher,
                today=today,
                refresh_refreshable=refresh_refreshable,
                day_concurrency=day_concurrency,
            )
            for month in months
        ),
        concurrency,
    )

    merged: PositionsByDate = {}
    for bucket in results:
        merged.update(bucket)

    positions: PositionsByDate = {}
    for day in dates:
        try:
            # Dates are unique, so each entry is handed over exactly once.
            positions[day] = merged.pop(day)
        except KeyError:
            raise InvariantError(
                f"{day} is not covered by the fetched months for {icao}"
            ) from None
    return positions


async def existing_months_positions_for(
    month: date, backend: StorageBackend
) -> list[tuple[str, date]]:
    """Return the ``(icao, month)`` buckets stored for a single month."""

    logger.info("existing_months_positions_for(%s)", month)
    keys = await backend.list_by_prefix(month_prefix(month))
    return [parsed for parsed in map(parse_month_key, keys) if parsed is not None]


async def existing_months_positions(
    months: Iterable[date],
    backend: StorageBackend,
    concurrency: int = 10,
) -> set[tuple[str, date]]:
    """Return the set of ``(icao, month)`` buckets that already exist in storage."""

    months = list(months)
    logger.info("existing_months_positions(%s)", len(months))
    results = await gather_bounded(
        (partial(existing_months_positions_for, month, backend) for month in months),
        concurrency,
    )
    return {item for items in results for item in items}


__all__ = [
    "aircraft_positions",
    "decode_bucket",
    "encode_bucket",
    "existing_months_positions",
    "existing_months_positions_for",
    "first_of_month",
    "gather_bounded",
    "iter_dates",
    "month_bounds",
    "month_positions",
]
