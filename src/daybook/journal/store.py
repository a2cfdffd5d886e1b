"""In-memory diary store: DateKey -> Entry, plus the three field titles.

The store is owned by one session and is only ever changed through
``update``, ``merge``, ``rename_titles`` and ``replace_all``. Every change
bumps ``version`` so that asynchronous work (sync pushes and pulls) can tell
whether the state it was derived from is still current.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, replace
from datetime import date
from typing import Final

from loguru import logger

from daybook.core.exceptions import ValidationError

from .config import DEFAULT_FIELD_TITLES
from .models import FIELD_COUNT, DateKey, Entry, Mood, coerce_mood, to_date_key


class _MoodTarget:
    def __repr__(self) -> str:
        return "MOOD"


MOOD: Final = _MoodTarget()
"""Pass as ``target`` to :meth:`EntryStore.update` to set the mood instead of a field."""


@dataclass(frozen=True)
class MergeResult:
    """Outcome of a non-destructive merge."""

    inserted: int = 0
    skipped: int = 0


def _keyed(key: DateKey, entry: Entry) -> Entry:
    return entry if entry.date == key else replace(entry, date=key)


def normalize_titles(titles: Iterable[str]) -> tuple[str, str, str]:
    """Validate and freeze a sequence of exactly three titles."""
    titles = tuple(titles)
    if len(titles) != FIELD_COUNT or not all(isinstance(t, str) for t in titles):
        raise ValidationError(f"Exactly {FIELD_COUNT} field titles required, got {titles!r}")
    return titles  # type: ignore[return-value]


class EntryStore:
    """Mapping of diary days with create/update/merge semantics.

    Example::

        store = EntryStore()
        store.update("2024-03-05", 0, "Rode the bike to work")
        store.update("2024-03-05", MOOD, 3)
        store.get("2024-03-05").mood   # Mood.GOOD
        store.get("2024-03-06")        # empty Entry; the store is unchanged
    """

    def __init__(
        self,
        entries: Mapping[DateKey, Entry] | None = None,
        field_titles: Iterable[str] = DEFAULT_FIELD_TITLES,
    ):
        self._entries: dict[DateKey, Entry] = {}
        self._field_titles = normalize_titles(field_titles)
        self._version = 0
        for key, entry in (entries or {}).items():
            key = to_date_key(key)
            self._entries[key] = _keyed(key, entry)

    # ── Read side ──────────────────────────────────────────────────

    @property
    def version(self) -> int:
        """Counter bumped by every mutation."""
        return self._version

    @property
    def field_titles(self) -> tuple[str, str, str]:
        return self._field_titles

    def get(self, date_key: DateKey | date) -> Entry:
        """Return the stored entry, or a fresh empty one (never stored by reading)."""
        key = to_date_key(date_key)
        return self._entries.get(key) or Entry.empty(key)

    def dates(self) -> list[DateKey]:
        """All stored dates, ascending."""
        return sorted(self._entries)

    def snapshot(self) -> dict[DateKey, Entry]:
        """Shallow copy of the mapping; entries themselves are immutable."""
        return dict(self._entries)

    def __contains__(self, date_key: object) -> bool:
        try:
            return to_date_key(date_key) in self._entries  # type: ignore[arg-type]
        except ValidationError:
            return False

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(list(self._entries.values()))

    # ── Mutations ──────────────────────────────────────────────────

    def update(self, date_key: DateKey | date, target: int | _MoodTarget, value: object) -> Entry:
        """Replace one field (``target`` = 0..2) or the mood (``target`` = MOOD) of a day.

        The day is created if absent; all other days and fields are untouched.

        Returns:
            The new Entry for that day.

        Raises:
            ValidationError: On a bad date, field index, text or mood value.
        """
        key = to_date_key(date_key)
        current = self.get(key)

        if target is MOOD:
            mood = coerce_mood(value)
            if value is not None and mood is None:
                raise ValidationError(f"Mood must be 1, 2, 3 or None, got {value!r}")
            updated = replace(current, mood=mood)
        else:
            if not isinstance(target, int) or isinstance(target, bool) or not 0 <= target < FIELD_COUNT:
                raise ValidationError(f"Field index must be 0..{FIELD_COUNT - 1}, got {target!r}")
            if not isinstance(value, str):
                raise ValidationError(f"Field text must be a string, got {type(value).__name__}")
            fields = list(current.fields)
            fields[target] = value
            updated = replace(current, fields=tuple(fields))

        self._entries[key] = updated
        self._version += 1
        return updated

    def update_field(self, date_key: DateKey | date, index: int, text: str) -> Entry:
        return self.update(date_key, index, text)

    def set_mood(self, date_key: DateKey | date, mood: Mood | int | None) -> Entry:
        return self.update(date_key, MOOD, mood)

    def merge(self, incoming: Mapping[DateKey, Entry]) -> MergeResult:
        """Insert days absent from the store; days already present are left as they are.

        No field-level merge happens: a present day is kept even if it is empty
        and the incoming one isn't. Merging the same batch twice is a no-op the
        second time.
        """
        inserted = skipped = 0
        for key, entry in incoming.items():
            key = to_date_key(key)
            if key in self._entries:
                skipped += 1
                continue
            self._entries[key] = _keyed(key, entry)
            inserted += 1

        if inserted:
            self._version += 1
        logger.debug(f"Merged {inserted} new day(s), kept {skipped} existing")
        return MergeResult(inserted=inserted, skipped=skipped)

    def rename_titles(self, titles: Iterable[str]) -> tuple[str, str, str]:
        """Replace the field titles. Stored field values are not touched."""
        self._field_titles = normalize_titles(titles)
        self._version += 1
        return self._field_titles

    def replace_all(self, entries: Mapping[DateKey, Entry], field_titles: Iterable[str] | None = None) -> None:
        """Swap in state loaded from storage (last writer wins)."""
        self._entries = {}
        for key, entry in entries.items():
            key = to_date_key(key)
            self._entries[key] = _keyed(key, entry)
        if field_titles is not None:
            self._field_titles = normalize_titles(field_titles)
        self._version += 1

    def __repr__(self) -> str:
        return f"EntryStore(entries={len(self._entries)}, version={self._version})"
