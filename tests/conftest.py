"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from longpath.core.progress import ProgressSink


@pytest.fixture(autouse=True)
def isolate_settings(tmp_path, monkeypatch):
    """Point the settings store at a temp config home."""
    config_home = tmp_path / "xdg_config"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    return config_home / "longpath" / "settings.json"


@pytest.fixture
def tree(tmp_path) -> Path:
    """Small tree: 3 directories and 4 files under ``tmp_path/root``.

    root/
        a.txt
        docs/
            readme.md
            nested/
                deep.txt
        src/
            main.py
    """
    root = tmp_path / "root"
    (root / "docs" / "nested").mkdir(parents=True)
    (root / "src").mkdir()
    (root / "a.txt").write_text("a")
    (root / "docs" / "readme.md").write_text("r")
    (root / "docs" / "nested" / "deep.txt").write_text("d")
    (root / "src" / "main.py").write_text("m")
    return root


@pytest.fixture
def long_file(tmp_path) -> Path:
    """A file whose absolute path is exactly 300 characters long."""
    root = tmp_path / "long"
    parent = root / ("a" * 100) / ("b" * 100)
    name_len = 300 - len(str(parent)) - 1
    if not 1 <= name_len <= 255:
        pytest.skip("temporary directory path length unsuitable")
    parent.mkdir(parents=True)
    path = parent / ("c" * name_len)
    path.write_text("x")
    assert len(str(path)) == 300
    return path


class RecordingSink(ProgressSink):
    """Sink that keeps every event it receives."""

    def __init__(self) -> None:
        self.progress = []
        self.errors = []
        self.finished = []

    def on_progress(self, event):
        self.progress.append(event)

    def on_error(self, message):
        self.errors.append(message)

    def on_finished(self, event):
        self.finished.append(event)


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()
