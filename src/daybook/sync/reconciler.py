"""Sync reconciler — mirrors the in-memory diary to a remote blob store.

Edits are debounced: each one cancels the waiting push and starts a new
timer, so a burst of keystrokes produces a single upload. Every push is
written to the local cache as well, whether or not the remote accepted it.
Pulls prefer the remote and fall back to the cache.

There is no merging between remote and local content: the most recent
explicit write wins. Pushes are serialized, so an older document can never
land on the remote after a newer one; a push older than the last finished
one is dropped. Stale pulls are discarded by the session (see
:meth:`daybook.app.controller.DiarySession.load`).
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Coroutine
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from loguru import logger

from daybook.core.events import SYNC_PUSHED, SYNC_STATUS, Event, EventBus
from daybook.core.exceptions import DocumentError
from daybook.core.storage import BlobStore, LocalCache, StorageError, StorageTimeoutError
from daybook.journal.models import DateKey, Entry

from .config import SyncConfig
from .documents import (
    decode_document,
    encode_document,
    entries_from_document,
    entries_to_document,
    settings_to_document,
    titles_from_document,
)


class SyncStatus(StrEnum):
    OFFLINE = "offline"
    SYNCING = "syncing"
    SYNCED = "synced"
    ERROR = "error"


@dataclass(frozen=True)
class SyncSnapshot:
    """State to push, stamped with the store version it was taken at."""

    version: int
    entries: dict[DateKey, Entry]
    field_titles: tuple[str, str, str]


@dataclass
class PullResult:
    """What a pull found. ``source`` is "remote", "cache", or None when nothing is stored."""

    entries: dict[DateKey, Entry] | None = None
    field_titles: tuple[str, str, str] | None = None
    source: str | None = None

    @property
    def found(self) -> bool:
        return self.entries is not None or self.field_titles is not None


SnapshotFn = Callable[[], SyncSnapshot]


class PendingSync:
    """A debounced push: waits ``delay`` seconds, then starts it.

    Cancelling only stops the timer. Once started, the push runs to
    completion. Must be created inside a running event loop.
    """

    def __init__(self, version: int, delay: float, start: Callable[[], asyncio.Task]):
        self.version = version
        self._start = start
        self._task: asyncio.Task | None = None
        self._timer = asyncio.get_running_loop().call_later(delay, self.fire)

    @property
    def waiting(self) -> bool:
        return self._task is None and not self._timer.cancelled()

    def fire(self) -> asyncio.Task | None:
        """Start the push now unless it already started or was cancelled."""
        if not self.waiting:
            return self._task
        self._timer.cancel()
        self._task = self._start()
        return self._task

    def cancel(self) -> bool:
        """Stop the timer. Returns False if the push had already started."""
        if self._task is not None:
            return False
        self._timer.cancel()
        return True


class SyncReconciler:
    """Push/pull the diary between memory, a remote BlobStore and a LocalCache.

    Args:
        cache: Local mirror, always written.
        remote: Remote store, or None to run offline.
        config: Keys, debounce window and timeout.
        bus: Optional event bus for ``sync.status`` / ``sync.pushed`` events.

    Example::

        reconciler = SyncReconciler(FileCache(cache_dir), FolderBlobStore(folder))
        result = await reconciler.pull()
        reconciler.schedule(store.version, take_snapshot)   # after each edit
        await reconciler.flush()                            # before exiting
    """

    def __init__(
        self,
        cache: LocalCache,
        remote: BlobStore | None = None,
        config: SyncConfig | None = None,
        bus: EventBus | None = None,
    ):
        self.cache = cache
        self.remote = remote
        self.config = config or SyncConfig()
        self.bus = bus
        self._status = SyncStatus.OFFLINE
        self._pending: PendingSync | None = None
        self._in_flight: set[asyncio.Task] = set()
        self._last_pushed_version = -1
        self._push_lock = asyncio.Lock()

    # ── Status ─────────────────────────────────────────────────────

    @property
    def status(self) -> SyncStatus:
        return self._status

    def _set_status(self, status: SyncStatus) -> None:
        if status == self._status:
            return
        previous, self._status = self._status, status
        logger.debug(f"Sync status {previous} -> {status}")
        if self.bus is not None:
            self.bus.emit_sync(
                Event(name=SYNC_STATUS, payload={"status": str(status), "previous": str(previous)}, source="sync")
            )

    # ── Debounce ───────────────────────────────────────────────────

    @property
    def pending(self) -> PendingSync | None:
        return self._pending

    def schedule(self, version: int, snapshot_fn: SnapshotFn) -> PendingSync:
        """(Re)start the debounce timer for a push of the state at fire time.

        Must be called from inside a running event loop.
        """
        if self._pending is not None and self._pending.cancel():
            logger.debug(f"Debounce restarted (v{self._pending.version} -> v{version})")
        self._pending = PendingSync(
            version,
            self.config.debounce_seconds,
            start=lambda: self._spawn(self.push(snapshot_fn())),
        )
        return self._pending

    def cancel_pending(self) -> bool:
        """Drop a waiting push. In-flight pushes are not interrupted."""
        if self._pending is None:
            return False
        return self._pending.cancel()

    async def flush(self) -> None:
        """Start any waiting push immediately and wait for all in-flight pushes."""
        if self._pending is not None and self._pending.waiting:
            self._pending.fire()
        if self._in_flight:
            await asyncio.gather(*list(self._in_flight))

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        return task

    # ── Remote calls ───────────────────────────────────────────────

    async def _call(self, awaitable: Awaitable[Any], what: str) -> Any:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.config.timeout_seconds)
        except TimeoutError as e:
            raise StorageTimeoutError(f"{what} timed out after {self.config.timeout_seconds}s") from e

    def _write_cache(self, blobs: dict[str, bytes]) -> None:
        for key, data in blobs.items():
            try:
                self.cache.put(key, data)
            except StorageError as e:
                logger.error(f"Local cache write failed for {key}: {e}")

    # ── Push ───────────────────────────────────────────────────────

    async def push(self, snapshot: SyncSnapshot) -> SyncStatus:
        """Write both documents to the remote (if any) and the local cache.

        Pushes run one at a time, in the order they started. A push older
        than one that already finished is dropped without touching the
        remote, the cache or the status.

        Returns:
            The status after this push.
        """
        async with self._push_lock:
            if snapshot.version < self._last_pushed_version:
                logger.debug(f"Skipping push v{snapshot.version}; v{self._last_pushed_version} already pushed")
                return self._status
            return await self._push_locked(snapshot)

    async def _push_locked(self, snapshot: SyncSnapshot) -> SyncStatus:
        blobs = {
            self.config.entries_key: encode_document(entries_to_document(snapshot.entries)),
            self.config.settings_key: encode_document(settings_to_document(snapshot.field_titles)),
        }

        if self.remote is None:
            self._finish_push(snapshot.version, SyncStatus.OFFLINE, blobs)
            return self._status

        self._set_status(SyncStatus.SYNCING)
        try:
            for key, data in blobs.items():
                await self._call(self.remote.put(key, data), f"{self.remote.name}.put({key})")
        except StorageError as e:
            logger.warning(f"Push of v{snapshot.version} failed, kept in local cache only: {e}")
            self._finish_push(snapshot.version, SyncStatus.ERROR, blobs)
            return self._status

        logger.info(f"Pushed v{snapshot.version} ({len(snapshot.entries)} day(s)) to {self.remote.name}")
        self._finish_push(snapshot.version, SyncStatus.SYNCED, blobs)
        return self._status

    def _finish_push(self, version: int, status: SyncStatus, blobs: dict[str, bytes]) -> None:
        self._last_pushed_version = version
        self._write_cache(blobs)
        self._set_status(status)
        if self.bus is not None:
            self.bus.emit_sync(Event(name=SYNC_PUSHED, payload={"version": version, "status": str(status)}))

    # ── Pull ───────────────────────────────────────────────────────

    def _decode(self, entries_blob: bytes | None, settings_blob: bytes | None, source: str) -> PullResult:
        entries = entries_from_document(decode_document(entries_blob)) if entries_blob is not None else None
        titles = titles_from_document(decode_document(settings_blob)) if settings_blob is not None else None
        result = PullResult(entries=entries, field_titles=titles)
        if result.found:
            result.source = source
        return result

    def load_cached(self) -> PullResult:
        """Read whatever the local cache holds; malformed documents count as absent."""
        try:
            return self._decode(
                self.cache.get(self.config.entries_key),
                self.cache.get(self.config.settings_key),
                source="cache",
            )
        except (DocumentError, StorageError) as e:
            logger.warning(f"Ignoring unreadable local cache: {e}")
            return PullResult()

    async def pull(self) -> PullResult:
        """Fetch state from the remote, falling back to the local cache."""
        if self.remote is None:
            self._set_status(SyncStatus.OFFLINE)
            return self.load_cached()

        self._set_status(SyncStatus.SYNCING)
        try:
            entries_blob = await self._call(self.remote.get(self.config.entries_key), f"{self.remote.name}.get")
            settings_blob = await self._call(self.remote.get(self.config.settings_key), f"{self.remote.name}.get")
        except StorageError as e:
            logger.warning(f"Pull failed, using local cache: {e}")
            self._set_status(SyncStatus.ERROR)
            return self.load_cached()

        if entries_blob is None and settings_blob is None:
            logger.info(f"Nothing stored on {self.remote.name} yet, using local cache")
            self._set_status(SyncStatus.SYNCED)
            return self.load_cached()

        try:
            result = self._decode(entries_blob, settings_blob, source="remote")
        except DocumentError as e:
            logger.warning(f"Remote document unreadable, using local cache: {e}")
            self._set_status(SyncStatus.ERROR)
            return self.load_cached()

        mirrored = {self.config.entries_key: entries_blob, self.config.settings_key: settings_blob}
        self._write_cache({k: v for k, v in mirrored.items() if v is not None})
        count = len(result.entries) if result.entries is not None else 0
        logger.info(f"Pulled {count} day(s) from {self.remote.name}")
        self._set_status(SyncStatus.SYNCED)
        return result
