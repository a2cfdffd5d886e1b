"""Gzip helpers for FolderBlobStore(compress=True).

Diary documents are small and very repetitive JSON, so a mid-level gzip is
plenty; there is no other codec.
"""

import gzip
from enum import Enum

GZIP_SUFFIX = ".gz"
GZIP_MAGIC = b"\x1f\x8b"
GZIP_LEVEL = 6


class CompressionType(Enum):
    NONE = "none"
    GZIP = "gzip"


def is_gzipped(data: bytes) -> bool:
    return data[:2] == GZIP_MAGIC


def compress_bytes(data: bytes, compression: CompressionType = CompressionType.GZIP) -> bytes:
    if compression is CompressionType.NONE:
        return data
    if compression is CompressionType.GZIP:
        # mtime=0 keeps output stable for identical documents
        return gzip.compress(data, compresslevel=GZIP_LEVEL, mtime=0)
    raise ValueError(f"Unsupported compression type: {compression}")


def decompress_bytes(data: bytes, compression: CompressionType = CompressionType.GZIP) -> bytes:
    """Inflate *data*. Raises ValueError for GZIP input without a gzip header."""
    if compression is CompressionType.NONE:
        return data
    if compression is CompressionType.GZIP:
        if not is_gzipped(data):
            raise ValueError("Not gzip data")
        return gzip.decompress(data)
    raise ValueError(f"Unsupported compression type: {compression}")


def estimate_compression_ratio(original_size: int, compressed_size: int) -> float:
    """Space saved, as a percentage of *original_size*."""
    if not original_size:
        return 0.0
    return 100.0 * (original_size - compressed_size) / original_size
