"""Daybook CLI — entry point for reading, writing, searching and syncing the diary."""

import click

from daybook import __version__


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Config file (YAML or JSON). Defaults to ~/.daybook/config.yaml.",
)
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")
@click.version_option(version=__version__, package_name="daybook")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """Daybook — a three-field diary with fuzzy search and sync."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose


# Register subcommands (lazy imports inside each keep startup fast)
from .csv_cmd import export_cmd, import_cmd
from .entry_cmd import mood, show, titles, write
from .search_cmd import search
from .sync_cmd import sync

main.add_command(show)
main.add_command(write)
main.add_command(mood)
main.add_command(titles)
main.add_command(search)
main.add_command(export_cmd)
main.add_command(import_cmd)
main.add_command(sync)
