"""daybook search — find days by text or mood keyword."""

from __future__ import annotations

import click


@click.command()
@click.argument("query")
@click.option(
    "--fuzzy/--exact",
    default=None,
    help="Tolerate typos (default from search.fuzzy in config) or require an exact substring.",
)
@click.pass_obj
def search(obj, query: str, fuzzy: bool | None) -> None:
    """Search all entries for QUERY, newest first."""
    from .common import run_session
    from .render import get_console, render_results

    _session, results = run_session(obj, lambda s: s.search(query, fuzzy), save=False)
    render_results(get_console(), results, query)
