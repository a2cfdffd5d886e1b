"""CSV export and tolerant CSV import.

Export writes what spreadsheet apps open cleanly: every cell quoted, UTF-8
with a byte-order mark, header ``Date,<title 1>,<title 2>,<title 3>,Mood``.

Import accepts that shape back, plus what people produce by hand or by
re-saving the file elsewhere: German ``D.M.YYYY`` / ``D/M/YYYY`` dates,
spreadsheet serial day numbers, a missing Mood column. Existing days are
never overwritten; unreadable rows are skipped and reported.
"""

from __future__ import annotations

import csv
import io
import re
from dataclasses import dataclass, field
from datetime import date, timedelta

from loguru import logger

from daybook.core.exceptions import ParseError

from .config import CsvConfig
from .models import FIELD_COUNT, DateKey, Entry, coerce_mood
from .store import EntryStore

BOM = "\ufeff"

SKIP_TOO_FEW_COLUMNS = "too_few_columns"
SKIP_INVALID_DATE = "invalid_date"

_ISO_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
_DAY_FIRST_RE = re.compile(r"^(\d{1,2})([./])(\d{1,2})\2(\d{4})$")
_SERIAL_RE = re.compile(r"^\d+(?:\.\d+)?$")


@dataclass(frozen=True)
class ImportIssue:
    """A data row that was skipped, with its 1-based line number in the file."""

    line_number: int
    reason: str
    value: str = ""


@dataclass
class CsvImport:
    """Parsed CSV content, not yet merged into a store."""

    entries: dict[DateKey, Entry] = field(default_factory=dict)
    field_titles: tuple[str, str, str] | None = None
    issues: list[ImportIssue] = field(default_factory=list)
    duplicates: int = 0


@dataclass
class ImportResult:
    """What an import did, for the caller to report."""

    imported_count: int = 0
    skipped_count: int = 0
    existing_count: int = 0
    new_field_titles: tuple[str, str, str] | None = None
    issues: list[ImportIssue] = field(default_factory=list)


# ── Export ─────────────────────────────────────────────────────────


def export_csv(store: EntryStore, config: CsvConfig | None = None) -> str:
    """Serialize the store to CSV text, one row per day in ascending date order."""
    config = config or CsvConfig()
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow([config.date_header, *store.field_titles, config.mood_header])
    for date_key in store.dates():
        entry = store.get(date_key)
        mood = int(entry.mood) if entry.mood is not None else ""
        writer.writerow([date_key, *entry.fields, mood])
    return buffer.getvalue()


def export_csv_bytes(store: EntryStore, config: CsvConfig | None = None) -> bytes:
    """CSV export as UTF-8 bytes, BOM-prefixed unless disabled in config."""
    config = config or CsvConfig()
    text = export_csv(store, config)
    if config.byte_order_mark:
        text = BOM + text
    return text.encode("utf-8")


def default_export_filename(today: date | None = None) -> str:
    today = today or date.today()
    return f"diary_export_{today.isoformat()}.csv"


# ── Tokenizing ─────────────────────────────────────────────────────


def _finish_cell(chars: list[tuple[str, bool]]) -> str:
    """Join a cell's characters, trimming whitespace that sits outside quotes at either edge."""
    start, end = 0, len(chars)
    while start < end and not chars[start][1] and chars[start][0].isspace():
        start += 1
    while end > start and not chars[end - 1][1] and chars[end - 1][0].isspace():
        end -= 1
    return "".join(c for c, _quoted in chars[start:end])


def parse_csv_line(line: str) -> list[str]:
    """Split one CSV record into cells.

    ``,`` separates cells only outside quotes; ``"`` toggles quoting and a
    doubled ``""`` inside quotes is a literal quote. Quotes themselves are
    dropped from the cell text.
    """
    cells: list[str] = []
    current: list[tuple[str, bool]] = []
    in_quotes = False
    i = 0
    while i < len(line):
        char = line[i]
        if char == '"':
            if in_quotes and line[i + 1 : i + 2] == '"':
                current.append(('"', True))
                i += 2
                continue
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            cells.append(_finish_cell(current))
            current = []
        else:
            current.append((char, in_quotes))
        i += 1
    cells.append(_finish_cell(current))
    return cells


def split_records(text: str) -> list[tuple[int, str]]:
    """Split CSV text into logical records.

    Newlines inside quotes belong to the cell, so a record may span several
    physical lines. Blank records are dropped.

    Returns:
        ``(line_number, record)`` pairs; line numbers are 1-based and point at
        the record's first physical line.
    """
    if text.startswith(BOM):
        text = text[len(BOM) :]

    records: list[tuple[int, str]] = []
    current: list[str] = []
    in_quotes = False
    line_number = record_start = 1

    for char in text:
        if char == '"':
            in_quotes = not in_quotes
        if char == "\n":
            if not in_quotes:
                records.append((record_start, "".join(current)))
                current = []
                record_start = line_number + 1
                line_number += 1
                continue
            line_number += 1
        current.append(char)
    records.append((record_start, "".join(current)))

    return [(n, record.rstrip("\r")) for n, record in records if record.strip()]


# ── Dates ──────────────────────────────────────────────────────────


def _date_key(year: int, month: int, day: int) -> DateKey | None:
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return None


def parse_import_date(value: str, config: CsvConfig | None = None) -> DateKey | None:
    """Read a date cell in any accepted format; None if it isn't one.

    Tried in order: ``YYYY-M-D``; ``D.M.YYYY`` or ``D/M/YYYY``; a bare number
    as a spreadsheet serial (whole days since the 1899-12-30 epoch).
    Results are zero-padded ``YYYY-MM-DD`` and must be real calendar dates.
    """
    config = config or CsvConfig()
    cleaned = (value or "").replace('"', "").strip()
    if not cleaned:
        return None

    match = _ISO_RE.match(cleaned)
    if match:
        year, month, day = (int(g) for g in match.groups())
        return _date_key(year, month, day)

    match = _DAY_FIRST_RE.match(cleaned)
    if match:
        day, _sep, month, year = match.groups()
        return _date_key(int(year), int(month), int(day))

    if _SERIAL_RE.match(cleaned):
        serial = float(cleaned)
        if serial <= 1:
            return None
        try:
            return (config.serial_epoch + timedelta(days=int(serial))).isoformat()
        except OverflowError:
            return None

    return None


def parse_date_or_raise(value: str, config: CsvConfig | None = None) -> DateKey:
    """Like :func:`parse_import_date` but raises ParseError instead of returning None."""
    key = parse_import_date(value, config)
    if key is None:
        raise ParseError(f"Unrecognized date: {value!r}")
    return key


# ── Import ─────────────────────────────────────────────────────────


def _header_titles(header: list[str], config: CsvConfig) -> tuple[str, str, str] | None:
    if len(header) < FIELD_COUNT + 1:
        return None
    return tuple(header[i + 1] or config.default_field_titles[i] for i in range(FIELD_COUNT))  # type: ignore[return-value]


def parse_csv(text: str, config: CsvConfig | None = None) -> CsvImport:
    """Parse CSV text into candidate entries without touching any store.

    The first record is the header; with at least four columns its columns
    2-4 become the new field titles. Data rows need at least four columns and
    a readable date; an optional fifth column holds the mood (anything other
    than 1, 2 or 3 means unset). Within one file the first row for a date wins.

    Raises:
        ParseError: If the text contains no records at all.
    """
    config = config or CsvConfig()
    records = split_records(text)
    if not records:
        raise ParseError("CSV file is empty")

    _header_line, header_record = records[0]
    result = CsvImport(field_titles=_header_titles(parse_csv_line(header_record), config))

    for line_number, record in records[1:]:
        cells = parse_csv_line(record)
        if len(cells) < FIELD_COUNT + 1:
            result.issues.append(ImportIssue(line_number, SKIP_TOO_FEW_COLUMNS, record[:40]))
            logger.debug(f"Skipped line {line_number}: {len(cells)} column(s)")
            continue

        try:
            date_key = parse_date_or_raise(cells[0], config)
        except ParseError as e:
            result.issues.append(ImportIssue(line_number, SKIP_INVALID_DATE, cells[0]))
            logger.debug(f"Skipped line {line_number}: {e}")
            continue

        if date_key in result.entries:
            result.duplicates += 1
            continue

        mood_cell = cells[FIELD_COUNT + 1] if len(cells) > FIELD_COUNT + 1 else ""
        mood = coerce_mood(mood_cell)
        if mood is None and mood_cell:
            logger.debug(f"Line {line_number}: ignoring mood value {mood_cell!r}")

        result.entries[date_key] = Entry(date=date_key, fields=tuple(cells[1 : FIELD_COUNT + 1]), mood=mood)

    return result


def import_csv(store: EntryStore, text: str, config: CsvConfig | None = None) -> ImportResult:
    """Parse *text* and merge it into *store* without overwriting existing days.

    Field titles from the header (if any) replace the store's titles.
    """
    parsed = parse_csv(text, config)
    if parsed.field_titles is not None:
        store.rename_titles(parsed.field_titles)

    merged = store.merge(parsed.entries)
    result = ImportResult(
        imported_count=merged.inserted,
        skipped_count=len(parsed.issues),
        existing_count=merged.skipped + parsed.duplicates,
        new_field_titles=parsed.field_titles,
        issues=parsed.issues,
    )
    logger.info(
        f"CSV import: {result.imported_count} imported, {result.skipped_count} skipped, "
        f"{result.existing_count} already present"
    )
    return result
