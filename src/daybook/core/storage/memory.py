"""In-memory storage, for tests and for running without any persistence."""

from __future__ import annotations

import asyncio

from .base import BlobStore, LocalCache, StorageError


class MemoryBlobStore(BlobStore):
    """Dict-backed blob store that can simulate an unreachable or slow remote.

    Args:
        fail_gets: Raise StorageError from every ``get``.
        fail_puts: Raise StorageError from every ``put``.
        delay: Seconds to sleep before each call completes.
    """

    def __init__(self, *, fail_gets: bool = False, fail_puts: bool = False, delay: float = 0.0, **config):
        super().__init__(**config)
        self.blobs: dict[str, bytes] = {}
        self.fail_gets = fail_gets
        self.fail_puts = fail_puts
        self.delay = delay
        self.put_count = 0
        self.get_count = 0

    async def get(self, key: str) -> bytes | None:
        self.get_count += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_gets:
            raise StorageError(f"Simulated get failure for {key}")
        return self.blobs.get(key)

    async def put(self, key: str, data: bytes) -> None:
        self.put_count += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_puts:
            raise StorageError(f"Simulated put failure for {key}")
        self.blobs[key] = bytes(data)


class MemoryCache(LocalCache):
    """Dict-backed local cache."""

    def __init__(self) -> None:
        self.blobs: dict[str, bytes] = {}

    def get(self, key: str) -> bytes | None:
        return self.blobs.get(key)

    def put(self, key: str, data: bytes) -> None:
        self.blobs[key] = bytes(data)
