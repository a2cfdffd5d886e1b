"""Terminal rendering with rich."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from daybook.journal.csv_codec import ImportResult
from daybook.journal.models import UNRATED_EMOJI, Entry, SearchResult, parse_date_key

_STATUS_STYLES = {
    "offline": "dim",
    "syncing": "yellow",
    "synced": "green",
    "error": "bold red",
}


def get_console() -> Console:
    return Console(highlight=False)


def format_day(date_key: str) -> str:
    """``2024-03-05`` -> ``Tue 05 Mar 2024``."""
    return parse_date_key(date_key).strftime("%a %d %b %Y")


def render_entry(console: Console, entry: Entry, titles: tuple[str, str, str]) -> None:
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold")
    table.add_column()
    for title, text in zip(titles, entry.fields, strict=True):
        table.add_row(Text(title), Text(text) if text else Text("-", style="dim"))
    mood = entry.mood.display() if entry.mood is not None else f"{UNRATED_EMOJI} Unrated"
    table.add_row(Text("Mood"), Text(mood))
    console.print(Panel(table, title=f"{format_day(entry.date)} ({entry.date})", title_align="left"))


def render_results(console: Console, results: list[SearchResult], query: str) -> None:
    if not results:
        console.print(Text(f"No entries match {query.strip()!r}."))
        return

    for result in results:
        header = Text(f"{result.date}  {format_day(result.date)}", style="bold")
        if result.mood is not None:
            header.append(f"  {result.mood.emoji}")
        console.print(header)
        for match in result.matches:
            line = Text("  ")
            line.append(f"{match.field_title}: ", style="cyan")
            line.append(match.snippet)
            if not match.is_exact_match:
                line.append("  (fuzzy)", style="dim italic")
            console.print(line)

    fuzzy = sum(1 for r in results if r.has_fuzzy_match)
    summary = f"{len(results)} day(s)"
    if fuzzy:
        summary += f", {fuzzy} by approximate match"
    console.print(Text(summary, style="dim"))


def render_import(console: Console, result: ImportResult) -> None:
    console.print(
        Text(
            f"Imported {result.imported_count} day(s), "
            f"skipped {result.skipped_count}, "
            f"{result.existing_count} already present."
        )
    )
    if result.new_field_titles:
        console.print(Text(f"Field titles: {', '.join(result.new_field_titles)}"))
    for issue in result.issues:
        detail = f" ({issue.value})" if issue.value else ""
        console.print(Text(f"  line {issue.line_number}: {issue.reason}{detail}", style="yellow"))


def render_status(console: Console, status: str) -> None:
    console.print(Text(f"Sync: {status}", style=_STATUS_STYLES.get(str(status), "")))
