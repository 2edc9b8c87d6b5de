"""Local filesystem storage backend."""

from __future__ import annotations

import asyncio
import logging
import os
import tempfile
from pathlib import Path

from flights.errors import BlobNotFound, StorageError

logger = logging.getLogger("flights.storage.local")


class LocalStorage:
    """Store objects as files below ``root``; keys are relative POSIX paths."""

    def __init__(self, root: str | Path = ".") -> None:
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        return self.root.joinpath(*key.split("/"))

    async def read(self, key: str) -> bytes:
        return await asyncio.to_thread(self._read, key)

    async def write(self, key: str, data: bytes) -> None:
        await asyncio.to_thread(self._write, key, data)
        logger.debug("Wrote %s bytes to %s", len(data), key)

    async def list_by_prefix(self, prefix: str) -> list[str]:
        return await asyncio.to_thread(self._list, prefix)

    def _read(self, key: str) -> bytes:
        path = self._path(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            raise BlobNotFound(key) from None
        except OSError as exc:
            logger.error("Failed to read %s: %s", path, exc)
            raise StorageError(f"Failed to read {key}") from exc

    def _write(self, key: str, data: bytes) -> None:
        path = self._path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            # Write to a sibling file and swap it in so readers never observe
            # a partially written object.
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
            try:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(data)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            logger.error("Failed to write %s: %s", path, exc)
            raise StorageError(f"Failed to write {key}") from exc

    def _list(self, prefix: str) -> list[str]:
        directory, _, _ = prefix.rpartition("/")
        base = self._path(directory) if directory else self.root
        if not base.is_dir():
            return []

        keys = []
        for path in base.rglob("*"):
            if not path.is_file() or path.name.startswith("."):
                continue
            key = path.relative_to(self.root).as_posix()
            if key.startswith(prefix):
                keys.append(key)
        return keys


__all__ = ["LocalStorage"]
