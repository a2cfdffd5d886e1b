"""In-process notifications for diary changes and sync progress.

The session announces every applied command and the reconciler announces
status changes, so a front end (or a test) can react without either side
knowing about it. Hooks may be plain functions or coroutines.

Usage::

    from daybook.core.events import ENTRY_UPDATED, Event, EventBus

    bus = EventBus()
    bus.on(ENTRY_UPDATED, lambda event: print("edited", event.payload["date"]))
    bus.emit_sync(Event(name=ENTRY_UPDATED, payload={"date": "2024-03-05"}, source="session"))
"""

from __future__ import annotations

import asyncio
import inspect
from collections import defaultdict
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from time import time
from typing import Any

from loguru import logger

# Session
ENTRY_UPDATED = "entry.updated"  # payload: date, field | mood
TITLES_RENAMED = "titles.renamed"  # payload: titles
IMPORT_MERGED = "import.merged"  # payload: imported, skipped, existing, titles
STATE_LOADED = "state.loaded"  # payload: source, days

# Reconciler
SYNC_STATUS = "sync.status"  # payload: status, previous
SYNC_PUSHED = "sync.pushed"  # payload: version, status

Hook = Callable[["Event"], None] | Callable[["Event"], Awaitable[None]]


@dataclass(frozen=True)
class Event:
    """One notification. ``source`` names the component that emitted it."""

    name: str
    payload: dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time)
    source: str = ""


class EventBus:
    """Publish/subscribe by event name, plus wildcard hooks that see everything.

    A failing hook is logged and skipped; it never breaks the emitter or the
    hooks after it.
    """

    def __init__(self) -> None:
        self._hooks: dict[str, list[Hook]] = defaultdict(list)
        self._wildcard: list[Hook] = []
        self._tasks: set[asyncio.Task] = set()

    def on(self, event_name: str, hook: Hook) -> Hook:
        self._hooks[event_name].append(hook)
        return hook

    def on_all(self, hook: Hook) -> Hook:
        self._wildcard.append(hook)
        return hook

    def off(self, event_name: str, hook: Hook) -> None:
        """Remove *hook* from *event_name*; unknown hooks are ignored."""
        hooks = self._hooks.get(event_name, [])
        if hook in hooks:
            hooks.remove(hook)

    def _subscribers(self, event: Event) -> list[Hook]:
        return [*self._hooks.get(event.name, ()), *self._wildcard]

    def _failed(self, event: Event, exc: Exception) -> None:
        logger.warning(f"Event hook failed for {event.name}: {exc}")

    async def emit(self, event: Event) -> None:
        """Run every subscriber in order, awaiting coroutine hooks."""
        for hook in self._subscribers(event):
            try:
                result = hook(event)
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:
                self._failed(event, exc)

    def emit_sync(self, event: Event) -> None:
        """Emit from synchronous code.

        Coroutine hooks become background tasks when a loop is running and
        are dropped otherwise.
        """
        try:
            loop: asyncio.AbstractEventLoop | None = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        for hook in self._subscribers(event):
            if inspect.iscoroutinefunction(hook):
                if loop is None:
                    logger.debug(f"No event loop; dropping async hook {hook!r} for {event.name}")
                    continue
                task = loop.create_task(self._guarded(hook, event))
                self._tasks.add(task)
                task.add_done_callback(self._tasks.discard)
                continue
            try:
                hook(event)
            except Exception as exc:
                self._failed(event, exc)

    async def _guarded(self, hook: Hook, event: Event) -> None:
        try:
            await hook(event)
        except Exception as exc:
            self._failed(event, exc)
