"""Shared setup logic for CLI commands."""

from __future__ import annotations

import asyncio
import os
from collections.abc import Callable
from datetime import date, timedelta
from pathlib import Path
from typing import Any, TypeVar

import click

from daybook.core.config import Config
from daybook.core.exceptions import DaybookError
from daybook.core.utils.logging import setup_logging
from daybook.journal.models import to_date_key

DAYBOOK_DIR = Path.home() / ".daybook"
CONFIG_PATH = DAYBOOK_DIR / "config.yaml"

T = TypeVar("T")


class DateKeyParam(click.ParamType):
    """A day on the command line: ``today``, ``yesterday`` or any importable date format."""

    name = "date"

    def convert(self, value: Any, param, ctx) -> str:
        if isinstance(value, date):
            return to_date_key(value)

        from daybook.journal.csv_codec import parse_import_date

        text = str(value).strip().lower()
        if text == "today":
            return date.today().isoformat()
        if text == "yesterday":
            return (date.today() - timedelta(days=1)).isoformat()

        key = parse_import_date(text)
        if key is None:
            self.fail(f"{value!r} is not a date (use YYYY-MM-DD or D.M.YYYY)", param, ctx)
        return key


DATE = DateKeyParam()


def load_config(obj: dict[str, Any]) -> Config:
    """Load config (``--config`` or ~/.daybook/config.yaml) and set up logging."""
    config = Config(config_file=str(obj.get("config_path") or CONFIG_PATH))
    try:
        config.ensure_directories()
    except OSError as e:
        raise click.ClickException(f"Cannot create data directories: {e}") from e

    log_dir = config.get("paths.log_dir")
    setup_logging(
        level="DEBUG" if obj.get("verbose") else "WARNING",
        log_file=os.path.join(log_dir, "daybook.log") if log_dir else None,
    )
    return config


def create_remote(config: Config):
    """Build the remote BlobStore selected by ``sync.backend`` (None for "none")."""
    settings = config.validated().sync
    if settings.backend == "folder":
        from daybook.core.storage import FolderBlobStore

        return FolderBlobStore(os.path.expanduser(settings.folder))

    if settings.backend == "gdrive":
        from daybook.core.auth import ServiceAccountAuth
        from daybook.integrations.google_drive import GoogleDriveBlobStore

        if not settings.service_account_key:
            raise click.ClickException("sync.backend is 'gdrive' but sync.service_account_key is not set.")
        return GoogleDriveBlobStore(ServiceAccountAuth(settings.service_account_key))

    return None


def create_session(config: Config):
    """Wire config, cache, remote and store into a DiarySession."""
    from daybook.app.controller import DiarySession
    from daybook.core.events import EventBus
    from daybook.core.storage import FileCache
    from daybook.journal.config import CsvConfig, SearchConfig
    from daybook.journal.store import EntryStore
    from daybook.sync import SyncConfig, SyncReconciler

    validated = config.validated()
    bus = EventBus()
    reconciler = SyncReconciler(
        cache=FileCache(config.get("paths.cache_dir")),
        remote=create_remote(config),
        config=SyncConfig.from_config(config),
        bus=bus,
    )
    return DiarySession(
        store=EntryStore(field_titles=validated.journal.default_field_titles),
        reconciler=reconciler,
        search_config=SearchConfig.from_config(config),
        csv_config=CsvConfig.from_config(config),
        bus=bus,
    )


def run_session(obj: dict[str, Any], action: Callable[[Any], T], *, save: bool = True) -> tuple[Any, T]:
    """Load the diary, apply *action* to the session and (optionally) flush the push.

    Returns:
        ``(session, action_result)``.
    """
    config = load_config(obj)

    async def _run():
        session = create_session(config)
        await session.load()
        result = action(session)
        if save:
            await session.flush()
        return session, result

    try:
        return asyncio.run(_run())
    except (DaybookError, ImportError) as e:
        raise click.ClickException(str(e)) from e
