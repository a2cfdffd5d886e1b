"""Typed commands — the only way callers change diary state."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from daybook.journal.models import DateKey, Mood


@dataclass(frozen=True)
class UpdateField:
    """Set field ``index`` (0-2) of a day to ``text``."""

    date: DateKey | date
    index: int
    text: str


@dataclass(frozen=True)
class SetMood:
    """Set or clear (``None``) the mood of a day."""

    date: DateKey | date
    mood: Mood | int | None


@dataclass(frozen=True)
class RenameTitles:
    titles: Sequence[str]


@dataclass(frozen=True)
class MergeImport:
    """Merge CSV text into the diary without overwriting existing days."""

    csv_text: str


Command = UpdateField | SetMood | RenameTitles | MergeImport
