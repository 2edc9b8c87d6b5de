"""Write-through caching of expensive computations on a storage backend."""

from __future__ import annotations

from datetime import date
from enum import Enum
import logging
from typing import Awaitable, Callable, Optional

from flights.errors import BlobNotFound
from flights.storage import StorageBackend

logger = logging.getLogger("flights.cache")


class CacheAction(str, Enum):
    """Whether a cached object can still change.

    ``FINAL`` objects cover a period that has fully elapsed. ``REFRESHABLE``
    objects cover a period that includes today or the future.
    """

    FINAL = "FINAL"
    REFRESHABLE = "REFRESHABLE"

    @classmethod
    def from_date(cls, end: date, today: Optional[date] = None) -> "CacheAction":
        """Policy for a period whose exclusive end is ``end``."""

        today = today or date.today()
        return cls.FINAL if end <= today else cls.REFRESHABLE


async def cached_call(
    key: str,
    producer: Callable[[], Awaitable[bytes]],
    action: CacheAction,
    backend: StorageBackend,
    *,
    refresh_refreshable: bool = False,
) -> bytes:
    """Return the object at ``key``, producing and storing it on a miss.

    A hit is returned as-is regardless of ``action``, unless
    ``refresh_refreshable`` is set and the object is ``REFRESHABLE``, in
    which case the producer always runs and its result overwrites the entry.
    Nothing is written if the producer raises or is cancelled.
    """

    if action is CacheAction.REFRESHABLE and refresh_refreshable:
        logger.info("Refreshing %s", key)
    else:
        try:
            data = await backend.read(key)
        except BlobNotFound:
            logger.info("Cache miss for %s (%s)", key, action.value)
        else:
            logger.debug("Cache hit for %s", key)
            return data

    data = await producer()
    await backend.write(key, data)
    return data


__all__ = ["CacheAction", "cached_call"]
