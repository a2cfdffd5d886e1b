"""daybook show / write / mood / titles — read and edit single days."""

from __future__ import annotations

import click

from .common import DATE

_MOOD_CHOICES = ["1", "2", "3", "bad", "neutral", "good", "none"]
_MOOD_NAMES = {"bad": 1, "neutral": 2, "good": 3}


@click.command()
@click.argument("day", type=DATE, default="today")
@click.pass_obj
def show(obj, day: str) -> None:
    """Show the entry for DAY (default: today)."""
    from .common import run_session
    from .render import get_console, render_entry

    session, entry = run_session(obj, lambda s: s.entry(day), save=False)
    render_entry(get_console(), entry, session.field_titles)


@click.command()
@click.argument("day", type=DATE)
@click.argument("field", type=click.IntRange(1, 3))
@click.argument("text")
@click.option("--append", is_flag=True, help="Add TEXT on a new line instead of replacing the field.")
@click.pass_obj
def write(obj, day: str, field: int, text: str, append: bool) -> None:
    """Set field FIELD (1-3) of DAY to TEXT."""
    from daybook.app.commands import UpdateField

    from .common import run_session
    from .render import get_console, render_entry, render_status

    def apply(session):
        value = text
        current = session.entry(day).fields[field - 1]
        if append and current:
            value = f"{current}\n{text}"
        return session.dispatch(UpdateField(day, field - 1, value))

    session, entry = run_session(obj, apply)
    console = get_console()
    render_entry(console, entry, session.field_titles)
    render_status(console, session.sync_status)


@click.command()
@click.argument("day", type=DATE)
@click.argument("value", type=click.Choice(_MOOD_CHOICES, case_sensitive=False))
@click.pass_obj
def mood(obj, day: str, value: str) -> None:
    """Rate DAY as 1/bad, 2/neutral, 3/good, or clear it with 'none'."""
    from daybook.app.commands import SetMood

    from .common import run_session
    from .render import get_console, render_entry, render_status

    value = value.lower()
    rating = None if value == "none" else _MOOD_NAMES.get(value) or int(value)

    session, entry = run_session(obj, lambda s: s.dispatch(SetMood(day, rating)))
    console = get_console()
    render_entry(console, entry, session.field_titles)
    render_status(console, session.sync_status)


@click.command()
@click.argument("new_titles", nargs=-1)
@click.pass_obj
def titles(obj, new_titles: tuple[str, ...]) -> None:
    """Show the three field titles, or rename them: titles T1 T2 T3."""
    from daybook.app.commands import RenameTitles

    from .common import run_session
    from .render import get_console, render_status

    if new_titles and len(new_titles) != 3:
        raise click.UsageError(f"Give exactly 3 titles, got {len(new_titles)}.")

    if new_titles:
        session, current = run_session(obj, lambda s: s.dispatch(RenameTitles(new_titles)))
    else:
        session, current = run_session(obj, lambda s: s.field_titles, save=False)

    console = get_console()
    for i, title in enumerate(current, start=1):
        console.print(f"{i}. {title}", markup=False)
    if new_titles:
        render_status(console, session.sync_status)
