"""Tests for the CLI entry point."""

import os
import sys

import pytest
import yaml
from click.testing import CliRunner
from loguru import logger

from daybook.core.cli import main


@pytest.fixture(autouse=True)
def _restore_logging():
    """The CLI reconfigures loguru; put the default stderr sink back afterwards."""
    yield
    logger.remove()
    logger.add(sys.stderr)


def local_paths(root: str) -> dict:
    return {name: os.path.join(root, name) for name in ("data_dir", "cache_dir", "log_dir")}


@pytest.fixture
def run(tmp_config_file):
    runner = CliRunner()

    def invoke(*args):
        return runner.invoke(main, ["--config", tmp_config_file, *args])

    return invoke


class TestCliGroup:
    def test_help(self):
        result = CliRunner().invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Daybook" in result.output
        for command in ("show", "write", "mood", "titles", "search", "export", "import", "sync"):
            assert command in result.output

    def test_version(self):
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


@pytest.mark.smoke
class TestEntryCommands:
    def test_write_then_show(self, run, tmp_dir):
        result = run("write", "2024-03-05", "1", "Mit dem Fahrrad")
        assert result.exit_code == 0, result.output
        assert "Mit dem Fahrrad" in result.output
        assert "Sync: synced" in result.output
        assert os.path.exists(os.path.join(tmp_dir, "remote", "diary_entries.json"))

        result = run("show", "5.3.2024")
        assert result.exit_code == 0, result.output
        assert "Mit dem Fahrrad" in result.output
        assert "Unrated" in result.output

    def test_write_append(self, run):
        run("write", "2024-03-05", "2", "Sonne")
        result = run("write", "2024-03-05", "2", "Regen", "--append")
        assert result.exit_code == 0, result.output
        assert "Sonne" in result.output
        assert "Regen" in result.output

    def test_mood(self, run):
        result = run("mood", "2024-03-05", "good")
        assert result.exit_code == 0, result.output
        assert "😊 Good" in result.output

        result = run("mood", "2024-03-05", "none")
        assert "Unrated" in result.output

    def test_bad_date(self, run):
        result = run("write", "31.02.2024", "1", "x")
        assert result.exit_code == 2
        assert "is not a date" in result.output

    def test_bad_field_number(self, run):
        assert run("write", "2024-03-05", "4", "x").exit_code == 2

    def test_titles(self, run):
        result = run("titles", "Dank", "Schön", "Morgen")
        assert result.exit_code == 0, result.output

        result = run("titles")
        assert "1. Dank" in result.output
        assert "3. Morgen" in result.output

    def test_titles_need_three(self, run):
        assert run("titles", "only", "two").exit_code == 2


@pytest.mark.smoke
class TestSearchCommand:
    def test_fuzzy_and_exact(self, run):
        run("write", "2024-03-05", "1", "Mit dem Fahrrad zur Arbeit")

        result = run("search", "fahrd")
        assert result.exit_code == 0, result.output
        assert "2024-03-05" in result.output
        assert "(fuzzy)" in result.output

        result = run("search", "fahrd", "--exact")
        assert "No entries match 'fahrd'" in result.output

    def test_mood_keyword(self, run):
        run("mood", "2024-03-05", "3")
        result = run("search", "gut")
        assert "2024-03-05" in result.output
        assert "Mood" in result.output


@pytest.mark.smoke
class TestCsvCommands:
    def test_export(self, run, tmp_dir):
        run("write", "2024-03-05", "1", "x")
        target = os.path.join(tmp_dir, "out.csv")

        result = run("export", target)
        assert result.exit_code == 0, result.output
        assert "Exported 1 day(s)" in result.output
        with open(target, "rb") as f:
            data = f.read()
        assert data.startswith(b"\xef\xbb\xbf")
        assert b'"2024-03-05","x","","",""' in data

    def test_import(self, run, tmp_dir):
        source = os.path.join(tmp_dir, "in.csv")
        with open(source, "w", encoding="utf-8") as f:
            f.write("Date,Dank,Schön,Morgen,Mood\n6.3.2024,neu,,,2\nbad,row\n")

        result = run("import", source)
        assert result.exit_code == 0, result.output
        assert "Imported 1 day(s), skipped 1, 0 already present." in result.output
        assert "too_few_columns" in result.output

        assert "neu" in run("show", "2024-03-06").output

    def test_import_empty_file(self, run, tmp_dir):
        source = os.path.join(tmp_dir, "empty.csv")
        open(source, "w").close()
        result = run("import", source)
        assert result.exit_code == 1
        assert "empty" in result.output


@pytest.mark.smoke
class TestSyncCommand:
    def test_sync(self, run, tmp_dir):
        run("write", "2024-03-05", "1", "x")
        result = run("sync")
        assert result.exit_code == 0, result.output
        assert "Loaded 1 day(s) from remote." in result.output
        assert "Sync: synced" in result.output

    def test_offline_backend(self, tmp_dir):
        config_path = os.path.join(tmp_dir, "offline.yaml")
        with open(config_path, "w") as f:
            yaml.dump({"paths": local_paths(tmp_dir)}, f)

        result = CliRunner().invoke(main, ["--config", config_path, "sync"])
        assert result.exit_code == 0, result.output
        assert "Sync: offline" in result.output

    def test_invalid_backend(self, tmp_dir):
        config_path = os.path.join(tmp_dir, "bad.yaml")
        with open(config_path, "w") as f:
            yaml.dump({"paths": local_paths(tmp_dir), "sync": {"backend": "dropbox"}}, f)

        result = CliRunner().invoke(main, ["--config", config_path, "show"])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
