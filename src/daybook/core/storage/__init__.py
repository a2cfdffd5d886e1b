"""
Storage backends for daybook.

Provides the remote blob-store contract (async), the local cache contract
(sync), filesystem and in-memory implementations, and gzip helpers.
"""

from .base import (
    BlobStore,
    LocalCache,
    StorageError,
    StoragePermissionError,
    StorageTimeoutError,
)
from .compression import CompressionType, compress_bytes, decompress_bytes, estimate_compression_ratio
from .local import FileCache, FolderBlobStore
from .memory import MemoryBlobStore, MemoryCache

__all__ = [
    "BlobStore",
    "CompressionType",
    "FileCache",
    "FolderBlobStore",
    "LocalCache",
    "MemoryBlobStore",
    "MemoryCache",
    "StorageError",
    "StoragePermissionError",
    "StorageTimeoutError",
    "compress_bytes",
    "decompress_bytes",
    "estimate_compression_ratio",
]
