"""Diary session — owns the store, applies commands, drives sync.

All state a running diary needs (entries, field titles, search mode, sync
status) hangs off one :class:`DiarySession`. Callers change it only by
dispatching commands; each applied command emits an event and, when a
reconciler is attached and an event loop is running, restarts the debounced
push.
"""

from __future__ import annotations

import asyncio
from datetime import date
from typing import Any

from loguru import logger

from daybook.core.events import (
    ENTRY_UPDATED,
    IMPORT_MERGED,
    STATE_LOADED,
    TITLES_RENAMED,
    Event,
    EventBus,
)
from daybook.journal.config import CsvConfig, SearchConfig
from daybook.journal.csv_codec import ImportResult, export_csv_bytes, import_csv
from daybook.journal.models import DateKey, Entry, SearchResult
from daybook.journal.search import EntrySearcher
from daybook.journal.store import EntryStore
from daybook.sync.reconciler import PullResult, SyncReconciler, SyncSnapshot, SyncStatus

from .commands import Command, MergeImport, RenameTitles, SetMood, UpdateField


class DiarySession:
    """One user's diary session.

    Example::

        session = DiarySession(reconciler=reconciler)
        await session.load()
        session.dispatch(UpdateField("2024-03-05", 0, "Rode the bike to work"))
        session.dispatch(SetMood("2024-03-05", 3))
        session.search("bike")
        await session.flush()
    """

    def __init__(
        self,
        store: EntryStore | None = None,
        reconciler: SyncReconciler | None = None,
        search_config: SearchConfig | None = None,
        csv_config: CsvConfig | None = None,
        bus: EventBus | None = None,
    ):
        self.store = store or EntryStore()
        self.reconciler = reconciler
        self.bus = bus or (reconciler.bus if reconciler and reconciler.bus else EventBus())
        self.searcher = EntrySearcher(search_config)
        self.csv_config = csv_config or CsvConfig()
        self.fuzzy_enabled = self.searcher.config.fuzzy_enabled
        self._unsynced = False

    # ── Queries ────────────────────────────────────────────────────

    @property
    def field_titles(self) -> tuple[str, str, str]:
        return self.store.field_titles

    @property
    def sync_status(self) -> SyncStatus:
        return self.reconciler.status if self.reconciler else SyncStatus.OFFLINE

    def entry(self, date_key: DateKey | date) -> Entry:
        return self.store.get(date_key)

    def search(self, query: str, fuzzy_enabled: bool | None = None) -> list[SearchResult]:
        if fuzzy_enabled is None:
            fuzzy_enabled = self.fuzzy_enabled
        return self.searcher.search(self.store, query, fuzzy_enabled)

    def export_csv_bytes(self) -> bytes:
        return export_csv_bytes(self.store, self.csv_config)

    def snapshot(self) -> SyncSnapshot:
        return SyncSnapshot(
            version=self.store.version,
            entries=self.store.snapshot(),
            field_titles=self.store.field_titles,
        )

    # ── Commands ───────────────────────────────────────────────────

    def dispatch(self, command: Command) -> Any:
        """Apply *command* and return its result.

        Returns:
            The updated Entry for UpdateField/SetMood, the new titles for
            RenameTitles, an ImportResult for MergeImport.
        """
        changed = True
        if isinstance(command, UpdateField):
            result = self.store.update_field(command.date, command.index, command.text)
            self._emit(ENTRY_UPDATED, {"date": result.date, "field": command.index})
        elif isinstance(command, SetMood):
            result = self.store.set_mood(command.date, command.mood)
            self._emit(ENTRY_UPDATED, {"date": result.date, "mood": result.mood})
        elif isinstance(command, RenameTitles):
            result = self.store.rename_titles(command.titles)
            self._emit(TITLES_RENAMED, {"titles": list(result)})
        elif isinstance(command, MergeImport):
            result = self._merge_import(command.csv_text)
            changed = result.imported_count > 0 or result.new_field_titles is not None
        else:
            raise TypeError(f"Unknown command: {command!r}")

        if changed:
            self._schedule_sync()
        return result

    def _merge_import(self, csv_text: str) -> ImportResult:
        result = import_csv(self.store, csv_text, self.csv_config)
        self._emit(
            IMPORT_MERGED,
            {
                "imported": result.imported_count,
                "skipped": result.skipped_count,
                "existing": result.existing_count,
                "titles": list(result.new_field_titles) if result.new_field_titles else None,
            },
        )
        return result

    def _emit(self, name: str, payload: dict[str, Any]) -> None:
        self.bus.emit_sync(Event(name=name, payload=payload, source="session"))

    def _schedule_sync(self) -> None:
        if self.reconciler is None:
            return
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            # No loop to run a timer on; the next flush() pushes.
            self._unsynced = True
            return
        self.reconciler.schedule(self.store.version, self.snapshot)

    # ── Sync ───────────────────────────────────────────────────────

    async def load(self) -> PullResult:
        """Pull stored state and make it current.

        The result is discarded if the store was edited while the pull was in
        flight, so a slow remote can never clobber newer local edits.
        """
        if self.reconciler is None:
            return PullResult()

        version = self.store.version
        result = await self.reconciler.pull()
        if self.store.version != version:
            logger.warning(
                f"Discarding {result.source or 'empty'} pull: store changed from v{version} "
                f"to v{self.store.version} while it was in flight"
            )
            return result

        if result.found:
            entries = result.entries if result.entries is not None else self.store.snapshot()
            self.store.replace_all(entries, result.field_titles)
            self._emit(STATE_LOADED, {"source": result.source, "days": len(self.store)})
        return result

    async def flush(self) -> SyncStatus:
        """Push outstanding edits now and wait for every in-flight push."""
        if self.reconciler is None:
            return SyncStatus.OFFLINE
        if self._unsynced:
            self._unsynced = False
            self.reconciler.schedule(self.store.version, self.snapshot)
        await self.reconciler.flush()
        return self.reconciler.status

    async def push_now(self) -> SyncStatus:
        """Push the current state immediately, bypassing the debounce timer."""
        if self.reconciler is None:
            return SyncStatus.OFFLINE
        self.reconciler.cancel_pending()
        self._unsynced = False
        return await self.reconciler.push(self.snapshot())
