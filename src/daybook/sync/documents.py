"""Persisted document format.

Two JSON documents are stored, one per blob key::

    {"entries": {"2024-03-05": {"field1": "...", "field2": "...", "field3": "...", "mood": 3}},
     "lastModified": "2024-03-05T20:15:00+00:00", "version": "1.0"}

    {"fieldTitles": ["Gratitude", "Highlights", "Tomorrow"],
     "lastModified": "2024-03-05T20:15:00+00:00", "version": "1.0"}
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from typing import Any

from loguru import logger

from daybook.core.exceptions import DocumentError, ValidationError
from daybook.journal.models import FIELD_COUNT, DateKey, Entry, coerce_mood, to_date_key

DOCUMENT_VERSION = "1.0"


def _timestamp(when: datetime | None) -> str:
    return (when or datetime.now(UTC)).isoformat()


def entries_to_document(entries: Mapping[DateKey, Entry], last_modified: datetime | None = None) -> dict[str, Any]:
    body = {}
    for key in sorted(entries):
        entry = entries[key]
        record: dict[str, Any] = {f"field{i + 1}": text for i, text in enumerate(entry.fields)}
        record["mood"] = int(entry.mood) if entry.mood is not None else None
        body[key] = record
    return {"entries": body, "lastModified": _timestamp(last_modified), "version": DOCUMENT_VERSION}


def settings_to_document(field_titles: Iterable[str], last_modified: datetime | None = None) -> dict[str, Any]:
    return {"fieldTitles": list(field_titles), "lastModified": _timestamp(last_modified), "version": DOCUMENT_VERSION}


def encode_document(document: Mapping[str, Any]) -> bytes:
    return json.dumps(document, ensure_ascii=False, indent=2).encode("utf-8")


def decode_document(data: bytes) -> dict[str, Any]:
    """Parse and version-check a stored document.

    Raises:
        DocumentError: On invalid JSON, a non-object payload or an unknown version.
    """
    try:
        document = json.loads(data.decode("utf-8-sig"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DocumentError(f"Document is not valid JSON: {e}") from e
    if not isinstance(document, dict):
        raise DocumentError("Document must be a JSON object")
    version = document.get("version", DOCUMENT_VERSION)
    if version != DOCUMENT_VERSION:
        raise DocumentError(f"Unsupported document version: {version!r}")
    return document


def entries_from_document(document: Mapping[str, Any]) -> dict[DateKey, Entry]:
    """Rebuild entries from an entries document.

    Records with an invalid date key or non-text fields are dropped with a
    warning; a mood outside 1-3 is read as unset.
    """
    raw = document.get("entries")
    if not isinstance(raw, dict):
        raise DocumentError("Entries document has no 'entries' object")

    entries: dict[DateKey, Entry] = {}
    for key, record in raw.items():
        try:
            date_key = to_date_key(key)
            if not isinstance(record, dict):
                raise ValidationError(f"record for {key} is not an object")
            fields = tuple(record.get(f"field{i + 1}") or "" for i in range(FIELD_COUNT))
            entries[date_key] = Entry(date=date_key, fields=fields, mood=coerce_mood(record.get("mood")))
        except ValidationError as e:
            logger.warning(f"Dropping stored entry {key!r}: {e}")
    return entries


def titles_from_document(document: Mapping[str, Any]) -> tuple[str, str, str]:
    titles = document.get("fieldTitles")
    if not isinstance(titles, list) or len(titles) != FIELD_COUNT or not all(isinstance(t, str) for t in titles):
        raise DocumentError(f"Settings document needs {FIELD_COUNT} string field titles, got {titles!r}")
    return tuple(titles)  # type: ignore[return-value]
