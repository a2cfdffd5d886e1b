"""Tests for daybook.core.config."""

import os

import pytest
import yaml

from daybook.core.config import Config, get_config, reset_config
from daybook.core.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def _reset_singleton():
    """Reset config singleton between tests."""
    reset_config()
    yield
    reset_config()


class TestConfig:
    def test_defaults(self):
        config = Config()
        assert config.get("paths.data_dir").endswith(".daybook-data")
        assert config.get("sync.backend") == "none"
        assert config.get("journal.default_field_titles") == ["Field 1", "Field 2", "Field 3"]

    def test_custom_data_dir(self, tmp_dir):
        config = Config(data_dir=tmp_dir)
        assert config.get("paths.data_dir") == tmp_dir
        assert config.get("paths.cache_dir") == os.path.join(tmp_dir, "cache")
        assert config.get("sync.folder") == os.path.join(tmp_dir, "remote")

    def test_yaml_config_file(self, tmp_config_file, tmp_dir):
        config = Config(config_file=tmp_config_file)
        assert config.get("sync.backend") == "folder"
        assert config.get("sync.debounce_seconds") == 0.01
        # untouched defaults survive the merge
        assert config.get("sync.entries_key") == "diary_entries.json"

    def test_json_config_file(self, tmp_dir):
        path = os.path.join(tmp_dir, "config.json")
        with open(path, "w") as f:
            f.write('{"search": {"fuzzy": false}}')
        assert Config(config_file=path, data_dir=tmp_dir).get("search.fuzzy") is False

    def test_unparseable_file(self, tmp_dir):
        path = os.path.join(tmp_dir, "config.yaml")
        with open(path, "w") as f:
            f.write("sync: [unclosed\n")
        with pytest.raises(ConfigurationError):
            Config(config_file=path, data_dir=tmp_dir)

    def test_missing_file_uses_defaults(self, tmp_dir):
        config = Config(config_file=os.path.join(tmp_dir, "absent.yaml"), data_dir=tmp_dir)
        assert config.get("sync.backend") == "none"

    def test_env_overrides_file(self, tmp_dir, monkeypatch):
        config_path = os.path.join(tmp_dir, "config.yaml")
        with open(config_path, "w") as f:
            yaml.dump({"sync": {"backend": "folder"}}, f)

        monkeypatch.setenv("DAYBOOK_SYNC__BACKEND", "gdrive")
        config = Config(config_file=config_path, data_dir=tmp_dir)
        assert config.get("sync.backend") == "gdrive"

    def test_custom_env_prefix(self, monkeypatch, tmp_dir):
        monkeypatch.setenv("DIARY_SEARCH__FUZZY", "false")
        config = Config(env_prefix="DIARY_", data_dir=tmp_dir)
        assert config.get("search.fuzzy") == "false"

    def test_get_missing_key(self, tmp_dir):
        config = Config(data_dir=tmp_dir)
        assert config.get("nonexistent.key") is None
        assert config.get("nonexistent.key", "fallback") == "fallback"

    def test_set(self, tmp_dir):
        config = Config(data_dir=tmp_dir)
        config.set("custom.nested.value", 42)
        assert config.get("custom.nested.value") == 42

    def test_get_data_dir(self, tmp_dir):
        assert Config(data_dir=tmp_dir).get_data_dir() == tmp_dir

    def test_ensure_directories(self, tmp_dir):
        config = Config(data_dir=tmp_dir)
        config.ensure_directories()
        assert os.path.isdir(os.path.join(tmp_dir, "cache"))
        assert os.path.isdir(os.path.join(tmp_dir, "logs"))

    def test_extra_defaults(self, tmp_dir):
        config = Config(data_dir=tmp_dir, defaults={"custom": {"key": "value"}})
        assert config.get("custom.key") == "value"


class TestGetConfig:
    def test_singleton(self, tmp_dir):
        first = get_config(data_dir=tmp_dir)
        assert get_config() is first

    def test_reset(self, tmp_dir):
        first = get_config(data_dir=tmp_dir)
        reset_config()
        assert get_config(data_dir=tmp_dir) is not first
