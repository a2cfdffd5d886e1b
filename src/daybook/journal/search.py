"""Full scan search over the diary.

Every query walks all entries through the :class:`FuzzyMatcher`; nothing is
indexed or cached, which is fine for a personal diary (thousands of days).
Results come back newest first.
"""

from __future__ import annotations

from .config import SearchConfig
from .matching import FuzzyMatcher
from .models import SearchResult
from .store import EntryStore


class EntrySearcher:
    """Search a store's fields and mood keywords.

    Example::

        searcher = EntrySearcher()
        results = searcher.search(store, "fahrd")          # fuzzy by default
        results = searcher.search(store, "fahrd", False)    # exact substrings only
    """

    def __init__(self, config: SearchConfig | None = None):
        self.config = config or SearchConfig()
        self.matcher = FuzzyMatcher(self.config)

    def search(self, store: EntryStore, query: str, fuzzy_enabled: bool | None = None) -> list[SearchResult]:
        """Find days matching *query*.

        Args:
            store: The store to scan; its current field titles label the matches.
            query: Search text. Blank queries return no results.
            fuzzy_enabled: Typo tolerance. Defaults to ``config.fuzzy_enabled``.

        Returns:
            SearchResults sorted by date, descending.
        """
        query = (query or "").strip()
        if not query:
            return []
        if fuzzy_enabled is None:
            fuzzy_enabled = self.config.fuzzy_enabled

        titles = store.field_titles
        results = []
        for entry in store:
            matches = []
            for title, text in zip(titles, entry.fields):
                match = self.matcher.match_field(query, title, text, fuzzy_enabled)
                if match is not None:
                    matches.append(match)

            mood_match = self.matcher.mood_match(query, entry.mood)
            if mood_match is not None:
                matches.append(mood_match)

            if matches:
                results.append(SearchResult(date=entry.date, matches=matches, mood=entry.mood))

        # Canonical YYYY-MM-DD keys sort lexically in date order
        results.sort(key=lambda r: r.date, reverse=True)
        return results
