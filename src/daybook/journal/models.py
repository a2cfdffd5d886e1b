"""Core data models for the diary.

An :class:`Entry` is one calendar day: three free-text fields aligned with
the store's field titles, plus an optional :class:`Mood`. Dates are plain
``YYYY-MM-DD`` strings (``DateKey``); lexical order is date order.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import IntEnum

from daybook.core.exceptions import ValidationError

DateKey = str
FIELD_COUNT = 3

_DATE_KEY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class Mood(IntEnum):
    """Three-point mood rating."""

    BAD = 1
    NEUTRAL = 2
    GOOD = 3

    @property
    def emoji(self) -> str:
        return _MOOD_EMOJI[self]

    @property
    def label(self) -> str:
        return self.name.capitalize()

    def display(self) -> str:
        """Emoji and label, e.g. ``"😊 Good"``."""
        return f"{self.emoji} {self.label}"


_MOOD_EMOJI = {Mood.BAD: "😔", Mood.NEUTRAL: "😐", Mood.GOOD: "😊"}
UNRATED_EMOJI = "❓"


def coerce_mood(value: object) -> Mood | None:
    """Map 1/2/3 (int, integral float or numeric string) to a Mood; anything else to None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Mood):
        return value
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        try:
            value = float(value)
        except ValueError:
            return None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        value = int(value)
    if isinstance(value, int) and value in (1, 2, 3):
        return Mood(value)
    return None


def parse_date_key(value: str) -> date:
    """Parse a canonical ``YYYY-MM-DD`` key into a date.

    Raises:
        ValidationError: If the text isn't zero-padded ISO or isn't a real date.
    """
    if not isinstance(value, str) or not _DATE_KEY_RE.match(value):
        raise ValidationError(f"Not a YYYY-MM-DD date key: {value!r}")
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as e:
        raise ValidationError(f"Not a valid calendar date: {value!r}") from e


def to_date_key(value: date | str) -> DateKey:
    """Normalize a date or canonical date string to a DateKey."""
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return value.isoformat()
    parse_date_key(value)
    return value


@dataclass(frozen=True)
class Entry:
    """One diary day.

    Attributes:
        date: Canonical ``YYYY-MM-DD`` key.
        fields: Exactly three texts, positionally aligned with the field titles.
        mood: Optional mood rating.
    """

    date: DateKey
    fields: tuple[str, ...] = ("", "", "")
    mood: Mood | None = None

    def __post_init__(self):
        fields = tuple(self.fields)
        if len(fields) != FIELD_COUNT:
            raise ValidationError(f"Entry needs exactly {FIELD_COUNT} fields, got {len(fields)}")
        if not all(isinstance(f, str) for f in fields):
            raise ValidationError("Entry fields must be strings")
        if self.mood is not None and not isinstance(self.mood, Mood):
            mood = coerce_mood(self.mood)
            if mood is None:
                raise ValidationError(f"Mood must be 1, 2, 3 or None, got {self.mood!r}")
            object.__setattr__(self, "mood", mood)
        object.__setattr__(self, "fields", fields)

    @classmethod
    def empty(cls, date_key: DateKey) -> Entry:
        return cls(date=date_key)

    @property
    def is_empty(self) -> bool:
        """True when every field is blank and no mood is set."""
        return self.mood is None and not any(self.fields)

    def __repr__(self) -> str:
        preview = " | ".join(f[:20] for f in self.fields)
        return f"Entry(date='{self.date}', mood={self.mood!r}, fields='{preview}')"


@dataclass(frozen=True)
class FieldMatch:
    """One matching field within a search result."""

    field_title: str
    snippet: str
    is_exact_match: bool = True


@dataclass
class SearchResult:
    """A diary day that matched a query, with the matching fields.

    Attributes:
        date: The matching day.
        matches: Matching fields in field order, then the mood match (if any).
        mood: The day's mood, for display.
    """

    date: DateKey
    matches: list[FieldMatch] = field(default_factory=list)
    mood: Mood | None = None

    @property
    def has_fuzzy_match(self) -> bool:
        return any(not m.is_exact_match for m in self.matches)

    def __repr__(self) -> str:
        return f"SearchResult(date='{self.date}', matches={len(self.matches)})"
