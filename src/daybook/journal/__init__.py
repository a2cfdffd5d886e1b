"""Diary domain: entries, the in-memory store, fuzzy search and CSV interchange."""

from .config import CsvConfig, SearchConfig
from .csv_codec import ImportIssue, ImportResult, export_csv, export_csv_bytes, import_csv, parse_import_date
from .matching import FuzzyMatcher, Snippet, levenshtein_distance
from .models import DateKey, Entry, FieldMatch, Mood, SearchResult, coerce_mood, to_date_key
from .search import EntrySearcher
from .store import MOOD, EntryStore, MergeResult

__all__ = [
    "MOOD",
    "CsvConfig",
    "DateKey",
    "Entry",
    "EntrySearcher",
    "EntryStore",
    "FieldMatch",
    "FuzzyMatcher",
    "ImportIssue",
    "ImportResult",
    "MergeResult",
    "Mood",
    "SearchConfig",
    "SearchResult",
    "Snippet",
    "coerce_mood",
    "export_csv",
    "export_csv_bytes",
    "import_csv",
    "levenshtein_distance",
    "parse_import_date",
    "to_date_key",
]
