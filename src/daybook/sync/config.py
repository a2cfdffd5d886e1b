"""Runtime settings for the sync reconciler."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from daybook.core.config import Config


@dataclass
class SyncConfig:
    """Settings for pushing to and pulling from the blob stores.

    Attributes:
        entries_key: Blob key of the entries document.
        settings_key: Blob key of the field-titles document.
        debounce_seconds: Quiet period after the last edit before a push fires.
        timeout_seconds: Limit for each remote get/put.
    """

    entries_key: str = "diary_entries.json"
    settings_key: str = "diary_settings.json"
    debounce_seconds: float = 1.0
    timeout_seconds: float = 10.0

    @classmethod
    def from_config(cls, config: Config) -> SyncConfig:
        """Build from the validated ``sync`` section of a :class:`~daybook.core.config.Config`.

        Raises:
            ConfigurationError: If the config fails validation.
        """
        sync = config.validated().sync
        return cls(
            entries_key=sync.entries_key,
            settings_key=sync.settings_key,
            debounce_seconds=sync.debounce_seconds,
            timeout_seconds=sync.timeout_seconds,
        )
