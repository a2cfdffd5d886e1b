"""Shared test fixtures for daybook."""

import os
import tempfile

import pytest

from daybook.journal.models import Entry
from daybook.journal.store import EntryStore


@pytest.fixture
def tmp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as d:
        yield d


@pytest.fixture
def tmp_config_file(tmp_dir):
    """Create a temporary YAML config using a local folder as the sync remote."""
    import yaml

    config_data = {
        "paths": {
            "data_dir": os.path.join(tmp_dir, "data"),
            "cache_dir": os.path.join(tmp_dir, "cache"),
            "log_dir": os.path.join(tmp_dir, "logs"),
        },
        "sync": {
            "backend": "folder",
            "folder": os.path.join(tmp_dir, "remote"),
            "debounce_seconds": 0.01,
            "timeout_seconds": 5,
        },
    }
    config_path = os.path.join(tmp_dir, "config.yaml")
    with open(config_path, "w") as f:
        yaml.dump(config_data, f)
    return config_path


@pytest.fixture
def diary_store():
    """A small store with a bike commute, a rainy day and a rated-only day."""
    return EntryStore(
        {
            "2024-03-05": Entry("2024-03-05", ("Mit dem Fahrrad zur Arbeit", "Sonne", ""), 3),
            "2024-03-06": Entry("2024-03-06", ("Regen den ganzen Tag", "", "Fahrrad reparieren"), 1),
            "2024-03-07": Entry("2024-03-07", ("", "", ""), 3),
        },
        field_titles=("Gratitude", "Highlights", "Tomorrow"),
    )
