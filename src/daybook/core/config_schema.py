"""Pydantic models for config validation.

Opt-in schema validation for ``Config.config_data``.  Call
``Config.validated()`` to obtain a typed, validated ``DaybookConfig``
instance.  Dict-based access through ``Config.get`` keeps working unchanged.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, field_validator


class PathsConfig(BaseModel):
    """File-system paths used by the application."""

    data_dir: Path
    cache_dir: Path | None = None
    log_dir: Path | None = None

    @field_validator("data_dir", "cache_dir", "log_dir", mode="before")
    @classmethod
    def _expand_user(cls, v: Any) -> Any:
        if isinstance(v, str):
            return Path(v).expanduser()
        if isinstance(v, Path):
            return v.expanduser()
        return v


class SyncSettings(BaseModel):
    """Remote blob store selection and sync tuning knobs."""

    backend: Literal["none", "folder", "gdrive"] = "none"
    folder: str = ""
    service_account_key: str = ""
    entries_key: str = "diary_entries.json"
    settings_key: str = "diary_settings.json"
    debounce_seconds: float = 1.0
    timeout_seconds: float = 10.0

    @field_validator("debounce_seconds", "timeout_seconds")
    @classmethod
    def _non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("must be >= 0")
        return v


class SearchSettings(BaseModel):
    """Search defaults."""

    fuzzy: bool = True


class JournalSettings(BaseModel):
    """Diary layout defaults."""

    default_field_titles: list[str] = ["Field 1", "Field 2", "Field 3"]

    @field_validator("default_field_titles")
    @classmethod
    def _three_titles(cls, v: list[str]) -> list[str]:
        if len(v) != 3:
            raise ValueError(f"exactly 3 field titles required, got {len(v)}")
        return v


class DaybookConfig(BaseModel):
    """Root configuration model.

    Uses ``extra="allow"`` so consumers can bolt on custom sections
    without touching this schema.
    """

    model_config = ConfigDict(extra="allow")

    paths: PathsConfig = PathsConfig(data_dir=Path("~/.daybook-data"))
    sync: SyncSettings = SyncSettings()
    search: SearchSettings = SearchSettings()
    journal: JournalSettings = JournalSettings()
