"""Amazon S3 storage backend."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from flights.errors import BlobNotFound, StorageError

logger = logging.getLogger("flights.storage.s3")

_NOT_FOUND_CODES = {"NoSuchKey", "404", "NotFound"}


class S3Storage:
    """Store objects in an S3 bucket, one object per key.

    boto3 is synchronous, so every call is pushed to a worker thread to keep
    the event loop responsive.
    """

    def __init__(
        self,
        bucket: str,
        *,
        client: Any | None = None,
        region_name: str | None = None,
        endpoint_url: str | None = None,
    ) -> None:
        self.bucket = bucket
        self.client = client or boto3.client(
            "s3", region_name=region_name, endpoint_url=endpoint_url
        )

    async def read(self, key: str) -> bytes:
        return await asyncio.to_thread(self._read, key)

    async def write(self, key: str, data: bytes) -> None:
        await asyncio.to_thread(self._write, key, data)
        logger.debug("Uploaded %s bytes to s3://%s/%s", len(data), self.bucket, key)

    async def list_by_prefix(self, prefix: str) -> list[str]:
        return await asyncio.to_thread(self._list, prefix)

    def _read(self, key: str) -> bytes:
        try:
            response = self.client.get_object(Bucket=self.bucket, Key=key)
            return response["Body"].read()
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in _NOT_FOUND_CODES:
                raise BlobNotFound(key) from None
            logger.error("S3 get_object failed for %s: %s", key, exc)
            raise StorageError(f"Failed to read {key}") from exc
        except BotoCoreError as exc:
            logger.error("S3 get_object failed for %s: %s", key, exc)
            raise StorageError(f"Failed to read {key}") from exc

    def _write(self, key: str, data: bytes) -> None:
        try:
            self.client.put_object(Bucket=self.bucket, Key=key, Body=data)
        except (ClientError, BotoCoreError) as exc:
            logger.error("S3 put_object failed for %s: %s", key, exc)
            raise StorageError(f"Failed to write {key}") from exc

    def _list(self, prefix: str) -> list[str]:
        keys: list[str] = []
        try:
            paginator = self.client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix):
                keys.extend(item["Key"] for item in page.get("Contents", []))
        except (ClientError, BotoCoreError) as exc:
            logger.error("S3 listing failed for prefix %s: %s", prefix, exc)
            raise StorageError(f"Failed to list {prefix}") from exc
        return keys


__all__ = ["S3Storage"]
