"""Tests for daybook.sync.documents — the persisted JSON format."""

import json
from datetime import UTC, datetime

import pytest

from daybook.core.exceptions import DocumentError
from daybook.journal.models import Entry, Mood
from daybook.sync.documents import (
    DOCUMENT_VERSION,
    decode_document,
    encode_document,
    entries_from_document,
    entries_to_document,
    settings_to_document,
    titles_from_document,
)

WHEN = datetime(2024, 3, 5, 20, 15, tzinfo=UTC)


class TestEncode:
    def test_entries_shape(self):
        document = entries_to_document({"2024-03-05": Entry("2024-03-05", ("a", "b", "c"), 3)}, WHEN)
        assert document == {
            "entries": {"2024-03-05": {"field1": "a", "field2": "b", "field3": "c", "mood": 3}},
            "lastModified": "2024-03-05T20:15:00+00:00",
            "version": DOCUMENT_VERSION,
        }

    def test_unrated_is_null(self):
        document = entries_to_document({"2024-03-05": Entry("2024-03-05")})
        assert document["entries"]["2024-03-05"]["mood"] is None

    def test_settings_shape(self):
        document = settings_to_document(("Dank", "Schön", "Morgen"), WHEN)
        assert document["fieldTitles"] == ["Dank", "Schön", "Morgen"]
        assert document["version"] == "1.0"

    def test_encoding_keeps_umlauts(self):
        data = encode_document(settings_to_document(("Schön", "b", "c")))
        assert "Schön".encode() in data


class TestDecode:
    def test_bom_tolerated(self):
        assert decode_document(b"\xef\xbb\xbf" + b'{"version": "1.0"}') == {"version": "1.0"}

    @pytest.mark.parametrize("data", [b"not json", b"[1, 2]", b'{"version": "2.0"}', b"\xff\xfe"])
    def test_rejected(self, data):
        with pytest.raises(DocumentError):
            decode_document(data)

    def test_missing_version_assumed_current(self):
        assert decode_document(b'{"entries": {}}') == {"entries": {}}


class TestEntriesFromDocument:
    def test_rebuilds_entries(self):
        entries = entries_from_document(
            {"entries": {"2024-03-05": {"field1": "a", "field2": "", "field3": None, "mood": 2}}}
        )
        assert entries == {"2024-03-05": Entry("2024-03-05", ("a", "", ""), Mood.NEUTRAL)}

    def test_bad_records_dropped(self):
        entries = entries_from_document(
            {
                "entries": {
                    "5.3.2024": {"field1": "wrong key format"},
                    "2024-03-06": "not an object",
                    "2024-03-07": {"field1": 42},
                    "2024-03-08": {"field1": "kept", "mood": 9},
                }
            }
        )
        assert list(entries) == ["2024-03-08"]
        assert entries["2024-03-08"].mood is None

    def test_missing_entries(self):
        with pytest.raises(DocumentError):
            entries_from_document({"version": "1.0"})

    def test_round_trip_through_bytes(self):
        original = {"2024-03-05": Entry("2024-03-05", ("Zeile 1\nZeile 2", "ä", ""), 1)}
        data = encode_document(entries_to_document(original))
        assert entries_from_document(decode_document(data)) == original
        assert json.loads(data)["entries"]["2024-03-05"]["mood"] == 1


class TestTitlesFromDocument:
    def test_valid(self):
        assert titles_from_document({"fieldTitles": ["a", "b", "c"]}) == ("a", "b", "c")

    @pytest.mark.parametrize("titles", [None, ["a", "b"], ["a", "b", 3], "abc"])
    def test_invalid(self, titles):
        with pytest.raises(DocumentError):
            titles_from_document({"fieldTitles": titles})
