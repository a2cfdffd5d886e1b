"""Tests for daybook.journal.store."""

from datetime import date

import pytest

from daybook.core.exceptions import ValidationError
from daybook.journal.models import Entry, Mood
from daybook.journal.store import MOOD, EntryStore


class TestGet:
    def test_absent_day_is_empty_and_not_stored(self):
        store = EntryStore()
        entry = store.get("2024-03-05")
        assert entry.is_empty
        assert entry.date == "2024-03-05"
        assert len(store) == 0
        assert store.version == 0

    def test_accepts_date_objects(self, diary_store):
        from datetime import date

        assert diary_store.get(date(2024, 3, 5)).mood is Mood.GOOD

    def test_invalid_key(self):
        with pytest.raises(ValidationError):
            EntryStore().get("5.3.2024")


class TestContains:
    def test_accepts_date_objects(self, diary_store):
        assert date(2024, 3, 5) in diary_store
        assert date(2024, 3, 8) not in diary_store

    @pytest.mark.parametrize("key", ["5.3.2024", "2024-02-30", 20240305, None])
    def test_invalid_keys_are_absent(self, diary_store, key):
        assert key not in diary_store


class TestUpdate:
    def test_inserts_absent_day(self):
        store = EntryStore()
        entry = store.update("2024-03-05", 1, "Sonne")
        assert entry.fields == ("", "Sonne", "")
        assert "2024-03-05" in store
        assert store.version == 1

    def test_replaces_only_target_field(self, diary_store):
        diary_store.update_field("2024-03-05", 2, "Einkaufen")
        entry = diary_store.get("2024-03-05")
        assert entry.fields == ("Mit dem Fahrrad zur Arbeit", "Sonne", "Einkaufen")
        assert entry.mood is Mood.GOOD

    def test_other_days_untouched(self, diary_store):
        before = diary_store.get("2024-03-06")
        diary_store.update_field("2024-03-05", 0, "changed")
        assert diary_store.get("2024-03-06") == before

    def test_set_and_clear_mood(self):
        store = EntryStore()
        assert store.update("2024-03-05", MOOD, 2).mood is Mood.NEUTRAL
        assert store.set_mood("2024-03-05", None).mood is None
        assert store.version == 2

    @pytest.mark.parametrize("index", [-1, 3, True, "0"])
    def test_bad_index(self, index):
        with pytest.raises(ValidationError):
            EntryStore().update("2024-03-05", index, "x")

    def test_bad_mood(self):
        with pytest.raises(ValidationError):
            EntryStore().set_mood("2024-03-05", 5)

    def test_non_string_text(self):
        with pytest.raises(ValidationError):
            EntryStore().update_field("2024-03-05", 0, 42)


class TestMerge:
    def test_inserts_only_absent_days(self, diary_store):
        incoming = {
            "2024-03-05": Entry("2024-03-05", ("overwritten?", "", ""), 1),
            "2024-03-08": Entry("2024-03-08", ("neu", "", ""), 2),
        }
        result = diary_store.merge(incoming)
        assert (result.inserted, result.skipped) == (1, 1)
        assert diary_store.get("2024-03-05").fields[0] == "Mit dem Fahrrad zur Arbeit"
        assert diary_store.get("2024-03-08").mood is Mood.NEUTRAL

    def test_present_empty_day_is_kept(self):
        store = EntryStore()
        store.set_mood("2024-03-05", None)
        store.merge({"2024-03-05": Entry("2024-03-05", ("text", "", ""))})
        assert store.get("2024-03-05").is_empty

    def test_idempotent(self, diary_store):
        incoming = {"2024-03-09": Entry("2024-03-09", ("a", "b", "c"))}
        diary_store.merge(incoming)
        snapshot, version = diary_store.snapshot(), diary_store.version

        result = diary_store.merge(incoming)
        assert result.inserted == 0
        assert diary_store.snapshot() == snapshot
        assert diary_store.version == version

    def test_entry_date_follows_key(self):
        store = EntryStore()
        store.merge({"2024-03-05": Entry("2024-01-01", ("a", "", ""))})
        assert store.get("2024-03-05").date == "2024-03-05"


class TestTitlesAndReplace:
    def test_rename_keeps_values(self, diary_store):
        before = diary_store.snapshot()
        diary_store.rename_titles(["A", "B", "C"])
        assert diary_store.field_titles == ("A", "B", "C")
        assert diary_store.snapshot() == before

    def test_rename_needs_three(self):
        with pytest.raises(ValidationError):
            EntryStore().rename_titles(["only", "two"])

    def test_replace_all(self, diary_store):
        version = diary_store.version
        diary_store.replace_all({"2024-01-01": Entry("2024-01-01", ("x", "", ""))}, ["X", "Y", "Z"])
        assert diary_store.dates() == ["2024-01-01"]
        assert diary_store.field_titles == ("X", "Y", "Z")
        assert diary_store.version == version + 1

    def test_replace_all_keeps_titles_when_none(self, diary_store):
        diary_store.replace_all({})
        assert diary_store.field_titles == ("Gratitude", "Highlights", "Tomorrow")
        assert len(diary_store) == 0


class TestIteration:
    def test_dates_sorted(self):
        store = EntryStore()
        for key in ["2024-03-07", "2023-12-31", "2024-03-05"]:
            store.set_mood(key, 2)
        assert store.dates() == ["2023-12-31", "2024-03-05", "2024-03-07"]

    def test_iter_yields_entries(self, diary_store):
        assert {e.date for e in diary_store} == {"2024-03-05", "2024-03-06", "2024-03-07"}

    def test_snapshot_is_a_copy(self, diary_store):
        snapshot = diary_store.snapshot()
        diary_store.update_field("2024-03-10", 0, "new")
        assert "2024-03-10" not in snapshot
