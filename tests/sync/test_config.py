"""Tests for daybook.sync.config."""

import pytest

from daybook.core.config import Config
from daybook.core.exceptions import ConfigurationError
from daybook.sync import SyncConfig


class TestSyncConfig:
    def test_defaults_match_config_defaults(self, tmp_dir):
        assert SyncConfig.from_config(Config(data_dir=tmp_dir)) == SyncConfig()

    def test_env_strings_are_coerced(self, tmp_dir, monkeypatch):
        monkeypatch.setenv("DAYBOOK_SYNC__DEBOUNCE_SECONDS", "0.25")
        monkeypatch.setenv("DAYBOOK_SYNC__ENTRIES_KEY", "entries.json")
        sync = SyncConfig.from_config(Config(data_dir=tmp_dir))
        assert sync.debounce_seconds == 0.25
        assert sync.entries_key == "entries.json"

    def test_negative_timeout_rejected(self, tmp_dir):
        config = Config(data_dir=tmp_dir)
        config.set("sync.timeout_seconds", -1)
        with pytest.raises(ConfigurationError):
            SyncConfig.from_config(config)
