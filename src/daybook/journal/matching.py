"""Typo-tolerant matching of a query against diary text.

Exact mode is a case-insensitive substring test. Fuzzy mode also accepts a
whitespace token whose edit distance to the query is within both a relative
bound (share of the longer string) and an absolute cap, so that short words
don't over-match and long ones don't drift.
"""

from __future__ import annotations

import math
from typing import NamedTuple

from .config import SearchConfig
from .models import FieldMatch, Mood, coerce_mood


def levenshtein_distance(a: str, b: str) -> int:
    """Minimum number of single-character insertions, deletions or substitutions turning *a* into *b*."""
    rows, cols = len(b) + 1, len(a) + 1
    matrix = [[0] * cols for _ in range(rows)]
    for i in range(rows):
        matrix[i][0] = i
    for j in range(cols):
        matrix[0][j] = j

    for i in range(1, rows):
        for j in range(1, cols):
            cost = 0 if a[j - 1] == b[i - 1] else 1
            matrix[i][j] = min(
                matrix[i - 1][j - 1] + cost,
                matrix[i][j - 1] + 1,
                matrix[i - 1][j] + 1,
            )
    return matrix[rows - 1][cols - 1]


class Snippet(NamedTuple):
    """Display excerpt for a matching field."""

    text: str
    is_fuzzy: bool


class FuzzyMatcher:
    """Decide whether a query matches a field and cut a snippet around the hit.

    Example::

        matcher = FuzzyMatcher()
        matcher.is_match("fahrd", "Mit dem Fahrrad zur Arbeit", fuzzy_enabled=True)   # True
        matcher.is_match("fahrd", "Mit dem Fahrrad zur Arbeit", fuzzy_enabled=False)  # False
    """

    def __init__(self, config: SearchConfig | None = None):
        self.config = config or SearchConfig()

    def _within_tolerance(self, query: str, token: str) -> bool:
        distance = levenshtein_distance(query, token)
        relative = math.floor(self.config.max_relative_distance * max(len(query), len(token)))
        return distance <= relative and distance <= self.config.max_absolute_distance

    def fuzzy_token_match(self, query: str, text: str) -> bool:
        """True if any whitespace token of *text* is within edit tolerance of *query*."""
        query_lower = query.lower()
        min_len = self.config.min_token_length
        if len(query_lower) < min_len:
            return False
        for token in text.lower().split():
            if len(token) < min_len:
                continue
            if self._within_tolerance(query_lower, token):
                return True
        return False

    def is_match(self, query: str, text: str, fuzzy_enabled: bool) -> bool:
        if query.lower() in text.lower():
            return True
        if not fuzzy_enabled:
            return False
        return self.fuzzy_token_match(query, text)

    def snippet(self, query: str, text: str, fuzzy_enabled: bool) -> Snippet:
        """Excerpt of *text* for display. Call only for texts where ``is_match`` holds."""
        ellipsis = self.config.ellipsis
        index = text.lower().find(query.lower())

        if index < 0 and fuzzy_enabled:
            preview = text[: self.config.preview_chars]
            if len(text) > self.config.preview_chars:
                preview += ellipsis
            return Snippet(preview, True)

        index = max(index, 0)
        start = max(0, index - self.config.context_chars)
        end = min(len(text), index + len(query) + self.config.context_chars)
        excerpt = text[start:end]
        if start > 0:
            excerpt = ellipsis + excerpt
        if end < len(text):
            excerpt += ellipsis
        return Snippet(excerpt, False)

    def match_field(self, query: str, title: str, text: str, fuzzy_enabled: bool) -> FieldMatch | None:
        """Match one field; returns the FieldMatch to show, or None."""
        if not self.is_match(query, text, fuzzy_enabled):
            return None
        snippet = self.snippet(query, text, fuzzy_enabled)
        return FieldMatch(field_title=title, snippet=snippet.text, is_exact_match=not snippet.is_fuzzy)

    def keyword_mood(self, query: str) -> Mood | None:
        """The mood a query names, if it is one of the mood keywords."""
        value = self.config.mood_keywords.get(query.strip().lower())
        return coerce_mood(value)

    def mood_match(self, query: str, mood: Mood | None) -> FieldMatch | None:
        """Synthetic match on the reserved mood title when the query names the entry's mood."""
        wanted = self.keyword_mood(query)
        if wanted is None or mood != wanted:
            return None
        return FieldMatch(field_title=self.config.mood_field_title, snippet=mood.display(), is_exact_match=True)
