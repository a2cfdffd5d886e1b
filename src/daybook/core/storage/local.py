"""
Filesystem-backed storage.

:class:`FolderBlobStore` treats a directory (typically one kept in sync by a
desktop client) as the remote blob store. :class:`FileCache` is the
synchronous on-device mirror.
"""

import os
import tempfile
from pathlib import Path

import aiofiles
import aiofiles.os
from loguru import logger

from .base import BlobStore, LocalCache, StorageError, StoragePermissionError
from .compression import (
    GZIP_SUFFIX,
    CompressionType,
    compress_bytes,
    decompress_bytes,
    estimate_compression_ratio,
)


_FORBIDDEN_KEY_CHARS = {"\x00": "null bytes", "\\": "backslashes (use '/')"}


def resolve_key_path(base_path: Path, key: str) -> Path:
    """Map a blob key like ``"backups/2024/entries.json"`` to a file under *base_path*.

    Raises:
        StoragePermissionError: For empty, absolute, home-relative or
            escaping keys, and keys with null bytes or backslashes.
    """
    name = key.strip()
    if not name:
        raise StoragePermissionError("Empty storage key")
    for char, label in _FORBIDDEN_KEY_CHARS.items():
        if char in name:
            raise StoragePermissionError(f"Storage key {key!r} contains {label}")
    if name.startswith(("/", "~")) or Path(name).is_absolute():
        raise StoragePermissionError(f"Storage key {key!r} must be relative")

    target = (base_path / name).resolve()
    if not target.is_relative_to(base_path):
        raise StoragePermissionError(f"Storage key {key!r} escapes {base_path}")
    return target


class FolderBlobStore(BlobStore):
    """Blob store rooted at a directory, with optional gzip compression."""

    def __init__(self, base_path: str, compress: bool = False, **config):
        super().__init__(**config)
        self.base_path = Path(base_path).expanduser().resolve()
        self.compress = compress

    def _path_for(self, key: str) -> Path:
        path = resolve_key_path(self.base_path, key)
        if self.compress:
            path = path.with_suffix(path.suffix + GZIP_SUFFIX)
        return path

    async def get(self, key: str) -> bytes | None:
        path = self._path_for(key)
        if not await aiofiles.os.path.exists(path):
            return None

        try:
            async with aiofiles.open(path, "rb") as f:
                data = await f.read()
        except PermissionError as e:
            raise StoragePermissionError(f"Cannot read {path}: {e}") from e
        except OSError as e:
            raise StorageError(f"Cannot read {path}: {e}") from e

        if self.compress:
            try:
                data = decompress_bytes(data, CompressionType.GZIP)
            except (ValueError, EOFError, OSError) as e:
                raise StorageError(f"Corrupt compressed blob {path}: {e}") from e
        return data

    async def put(self, key: str, data: bytes) -> None:
        path = self._path_for(key)
        payload = compress_bytes(data, CompressionType.GZIP) if self.compress else data

        try:
            await aiofiles.os.makedirs(path.parent, exist_ok=True)
            async with aiofiles.open(path, "wb") as f:
                await f.write(payload)
        except PermissionError as e:
            raise StoragePermissionError(f"Cannot write to {path}: {e}") from e
        except OSError as e:
            raise StorageError(f"Cannot write to {path}: {e}") from e

        if self.compress:
            ratio = estimate_compression_ratio(len(data), len(payload))
            logger.debug(f"Wrote {key} to {self.base_path} ({len(payload)} bytes, {ratio:.0f}% smaller)")
        else:
            logger.debug(f"Wrote {key} to {self.base_path} ({len(payload)} bytes)")


class FileCache(LocalCache):
    """Synchronous on-device cache; one file per key."""

    def __init__(self, cache_dir: str | None = None):
        """
        Args:
            cache_dir: Directory to store cache files.
                       If None, defaults to ~/.daybook-data/cache.
        """
        if cache_dir is None:
            cache_dir = os.path.join(os.path.expanduser("~"), ".daybook-data", "cache")
        self.cache_dir = Path(cache_dir).expanduser().resolve()
        self.cache_dir.mkdir(parents=True, exist_ok=True)

    def get(self, key: str) -> bytes | None:
        path = resolve_key_path(self.cache_dir, key)
        if not path.exists():
            return None
        try:
            return path.read_bytes()
        except PermissionError as e:
            raise StoragePermissionError(f"Cannot read cache file {path}: {e}") from e
        except OSError as e:
            raise StorageError(f"Cannot read cache file {path}: {e}") from e

    def put(self, key: str, data: bytes) -> None:
        """Write atomically: temp file in the same directory, then rename."""
        path = resolve_key_path(self.cache_dir, key)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, path)
        except OSError as e:
            if os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise StorageError(f"Cannot write cache file {path}: {e}") from e
