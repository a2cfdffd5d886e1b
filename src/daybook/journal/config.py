"""Configuration dataclasses for diary search and CSV interchange.

These are pure data containers with sensible defaults.
Override them from the YAML config (``from_config``) or constructor args.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from daybook.core.config import Config

DEFAULT_FIELD_TITLES = ("Field 1", "Field 2", "Field 3")

# Keyword -> mood value. German synonyms carried over from the first release.
DEFAULT_MOOD_KEYWORDS: dict[str, int] = {
    "bad": 1,
    "sad": 1,
    "down": 1,
    "schlecht": 1,
    "traurig": 1,
    "neutral": 2,
    "normal": 2,
    "okay": 2,
    "ok": 2,
    "good": 3,
    "great": 3,
    "super": 3,
    "gut": 3,
    "toll": 3,
    "großartig": 3,
}


@dataclass
class SearchConfig:
    """Settings for fuzzy search and snippet extraction.

    Attributes:
        fuzzy_enabled: Default for typo-tolerant matching when a call doesn't say.
        min_token_length: Tokens (and queries) shorter than this never fuzzy-match.
        max_relative_distance: Edit distance allowed as a fraction of the longer string.
        max_absolute_distance: Hard cap on edit distance regardless of length.
        context_chars: Characters shown on each side of an exact hit.
        preview_chars: Characters shown from the start of a field for fuzzy hits.
        ellipsis: Marker added where a snippet was clipped.
        mood_field_title: Reserved field title used for mood-keyword matches.
        mood_keywords: Query keyword -> mood value (1, 2, 3).
    """

    fuzzy_enabled: bool = True
    min_token_length: int = 3
    max_relative_distance: float = 0.3
    max_absolute_distance: int = 2
    context_chars: int = 30
    preview_chars: int = 60
    ellipsis: str = "..."
    mood_field_title: str = "Mood"
    mood_keywords: dict[str, int] = field(default_factory=lambda: dict(DEFAULT_MOOD_KEYWORDS))

    @classmethod
    def from_config(cls, config: Config) -> SearchConfig:
        """Build from the validated ``search`` section (raises ConfigurationError if invalid)."""
        return cls(fuzzy_enabled=config.validated().search.fuzzy)


@dataclass
class CsvConfig:
    """Settings for CSV export/import.

    Attributes:
        date_header: Label of the first column on export.
        mood_header: Label of the last column on export.
        default_field_titles: Used when an imported header cell is blank.
        byte_order_mark: Prefix exported bytes with a UTF-8 BOM (for spreadsheet apps).
        serial_epoch: Day zero of spreadsheet serial dates.
    """

    date_header: str = "Date"
    mood_header: str = "Mood"
    default_field_titles: tuple[str, str, str] = DEFAULT_FIELD_TITLES
    byte_order_mark: bool = True
    serial_epoch: date = date(1899, 12, 30)

    @classmethod
    def from_config(cls, config: Config) -> CsvConfig:
        """Build from the validated ``journal`` section (raises ConfigurationError if invalid)."""
        return cls(default_field_titles=tuple(config.validated().journal.default_field_titles))
