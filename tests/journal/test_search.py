"""Tests for daybook.journal.search."""

from daybook.journal.config import SearchConfig
from daybook.journal.models import Entry, Mood
from daybook.journal.search import EntrySearcher
from daybook.journal.store import EntryStore


class TestEntrySearcher:
    def test_exact_hits_newest_first(self, diary_store):
        results = EntrySearcher().search(diary_store, "fahrrad", fuzzy_enabled=False)
        assert [r.date for r in results] == ["2024-03-06", "2024-03-05"]
        assert results[0].matches[0].field_title == "Tomorrow"
        assert results[1].matches[0].field_title == "Gratitude"
        assert not any(r.has_fuzzy_match for r in results)

    def test_typo_needs_fuzzy(self, diary_store):
        searcher = EntrySearcher()
        assert searcher.search(diary_store, "fahrd", fuzzy_enabled=False) == []

        results = searcher.search(diary_store, "fahrd", fuzzy_enabled=True)
        assert [r.date for r in results] == ["2024-03-06", "2024-03-05"]
        assert all(r.has_fuzzy_match for r in results)
        assert results[1].matches[0].snippet == "Mit dem Fahrrad zur Arbeit"

    def test_default_mode_from_config(self, diary_store):
        assert EntrySearcher(SearchConfig(fuzzy_enabled=False)).search(diary_store, "fahrd") == []
        assert EntrySearcher().search(diary_store, "fahrd") != []

    def test_blank_query(self, diary_store):
        assert EntrySearcher().search(diary_store, "   ") == []

    def test_query_is_trimmed(self, diary_store):
        results = EntrySearcher().search(diary_store, "  sonne ", fuzzy_enabled=False)
        assert [r.date for r in results] == ["2024-03-05"]
        assert results[0].matches[0].snippet == "Sonne"

    def test_mood_keyword(self, diary_store):
        results = EntrySearcher().search(diary_store, "gut")
        assert [r.date for r in results] == ["2024-03-07", "2024-03-05"]
        mood_match = results[0].matches[-1]
        assert mood_match.field_title == "Mood"
        assert mood_match.snippet == "😊 Good"
        assert results[0].mood is Mood.GOOD

    def test_several_fields_in_order(self):
        store = EntryStore({"2024-03-05": Entry("2024-03-05", ("Regen", "mehr Regen", "kein Regen"))})
        results = EntrySearcher().search(store, "regen")
        assert [m.field_title for m in results[0].matches] == ["Field 1", "Field 2", "Field 3"]

    def test_no_match(self, diary_store):
        assert EntrySearcher().search(diary_store, "xylophon") == []
