"""Exception hierarchy shared by the storage, ingestion and service layers."""

from __future__ import annotations


class TraceFetchError(RuntimeError):
    """Raised when the remote trace source fails to return a usable trace."""


class StorageError(RuntimeError):
    """Raised when a storage backend read, write or listing fails."""


class BlobNotFound(StorageError):
    """Raised when a key does not exist in the storage backend."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Key not found: {key}")
        self.key = key


class CorruptCacheError(RuntimeError):
    """Raised when a cached object exists but cannot be deserialized."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Cached object {key} is unreadable: {reason}")
        self.key = key


class InvariantError(AssertionError):
    """Raised when an internal consistency check fails."""


__all__ = [
    "BlobNotFound",
    "CorruptCacheError",
    "InvariantError",
    "StorageError",
    "TraceFetchError",
]
