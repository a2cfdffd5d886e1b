"""daybook export / import — CSV interchange."""

from __future__ import annotations

from pathlib import Path

import click


@click.command("export")
@click.argument("path", required=False, type=click.Path(dir_okay=False, writable=True))
@click.pass_obj
def export_cmd(obj, path: str | None) -> None:
    """Write every day to a CSV file (default: diary_export_<today>.csv). Use '-' for stdout."""
    from daybook.journal.csv_codec import default_export_filename

    from .common import run_session

    session, data = run_session(obj, lambda s: s.export_csv_bytes(), save=False)

    if path == "-":
        click.get_binary_stream("stdout").write(data)
        return

    target = Path(path or default_export_filename())
    try:
        target.write_bytes(data)
    except OSError as e:
        raise click.ClickException(f"Cannot write {target}: {e}") from e
    click.echo(f"Exported {len(session.store)} day(s) to {target}")


@click.command("import")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def import_cmd(obj, path: str) -> None:
    """Merge a CSV file into the diary. Days that already exist are kept as they are."""
    from daybook.app.commands import MergeImport

    from .common import run_session
    from .render import get_console, render_import, render_status

    try:
        text = Path(path).read_bytes().decode("utf-8")
    except UnicodeDecodeError as e:
        raise click.ClickException(f"{path} is not UTF-8 text: {e}") from e

    session, result = run_session(obj, lambda s: s.dispatch(MergeImport(text)))
    console = get_console()
    render_import(console, result)
    render_status(console, session.sync_status)
