"""daybook sync — push the current diary to the configured remote."""

from __future__ import annotations

import asyncio
import sys

import click


@click.command()
@click.pass_obj
def sync(obj) -> None:
    """Pull the latest state, then push it back to the remote and local cache."""
    from daybook.core.exceptions import DaybookError

    from .common import create_session, load_config
    from .render import get_console, render_status

    config = load_config(obj)

    async def _run():
        session = create_session(config)
        pulled = await session.load()
        status = await session.push_now()
        return session, pulled, status

    try:
        session, pulled, status = asyncio.run(_run())
    except (DaybookError, ImportError) as e:
        raise click.ClickException(str(e)) from e

    console = get_console()
    source = pulled.source or "nothing stored yet"
    console.print(f"Loaded {len(session.store)} day(s) from {source}.", markup=False)
    render_status(console, status)
    if status == "error":
        sys.exit(1)
