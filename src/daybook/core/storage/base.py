"""
Abstract contracts for blob storage.

Two flavours share the same ``get``/``put`` shape:

* :class:`BlobStore` — the remote side (a synced folder, Google Drive, ...).
  Async, may be slow or unavailable.
* :class:`LocalCache` — the on-device mirror. Synchronous and always
  available; used as the offline fallback.
"""

from abc import ABC, abstractmethod

from daybook.core.exceptions import DaybookError


class BlobStore(ABC):
    """Async key -> bytes store used as the remote sync target."""

    def __init__(self, **config):
        self.config = config

    @abstractmethod
    async def get(self, key: str) -> bytes | None:
        """Return the stored bytes, or None if the key is absent.

        Raises StorageError when the store cannot be reached.
        """

    @abstractmethod
    async def put(self, key: str, data: bytes) -> None:
        """Store *data* under *key*, replacing any previous value.

        Raises StorageError on failure.
        """

    @property
    def name(self) -> str:
        """Short label used in log lines."""
        return type(self).__name__


class LocalCache(ABC):
    """Synchronous key -> bytes cache with the same contract as BlobStore."""

    @abstractmethod
    def get(self, key: str) -> bytes | None:
        """Return cached bytes, or None if the key is absent."""

    @abstractmethod
    def put(self, key: str, data: bytes) -> None:
        """Store *data* under *key*."""


class StorageError(DaybookError):
    """Base exception for storage errors."""


class StoragePermissionError(StorageError):
    """Raised when a storage operation is not permitted."""


class StorageTimeoutError(StorageError):
    """Raised when a remote call exceeds its timeout."""
