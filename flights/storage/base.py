"""Storage backend interface shared by the local and S3 implementations."""

from __future__ import annotations

from typing import Protocol


class StorageBackend(Protocol):
    """Durable key/value store addressed by slash-separated keys.

    Writes replace the whole object. ``list_by_prefix`` returns every key that
    starts with ``prefix`` at call time, in no particular order.
    """

    async def read(self, key: str) -> bytes:
        """Return the stored bytes or raise ``BlobNotFound``."""

    async def write(self, key: str, data: bytes) -> None:
        """Store ``data`` under ``key``, overwriting any existing object."""

    async def list_by_prefix(self, prefix: str) -> list[str]:
        """Return all keys starting with ``prefix``."""


__all__ = ["StorageBackend"]
