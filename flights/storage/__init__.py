"""Storage backends for cached traces."""

from __future__ import annotations

from flights.config import Settings, settings

from .base import StorageBackend
from .local import LocalStorage
from .s3 import S3Storage


def build_storage_backend(config: Settings | None = None) -> StorageBackend:
    """Instantiate the backend selected by ``storage_backend``."""

    config = config or settings
    backend = config.storage_backend.lower()
    if backend == "disk":
        return LocalStorage(config.storage_root)
    if backend == "s3":
        return S3Storage(
            config.s3_bucket,
            region_name=config.aws_region,
            endpoint_url=config.s3_endpoint_url,
        )
    raise ValueError(f"Unsupported storage backend: {config.storage_backend}")


__all__ = ["LocalStorage", "S3Storage", "StorageBackend", "build_storage_backend"]
