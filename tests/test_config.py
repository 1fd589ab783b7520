"""Tests for journal configuration."""

from pathlib import Path

import pytest

from private_journal.config import (
    CONFIG_FILENAME,
    JournalConfig,
    load_config,
    load_or_create_config,
    resolve_journal_path,
    save_config,
)
from private_journal.types import Scope


def test_creates_default_config(tmp_path):
    config = load_or_create_config(tmp_path / "journal")
    assert (tmp_path / "journal" / CONFIG_FILENAME).exists()
    assert config.embedding.name == "sentence-transformers"
    assert config.embedding.params == {"model": "all-MiniLM-L6-v2"}
    assert config.search.min_score == 0.1
    assert config.roots() == [(tmp_path / "journal", Scope.USER)]


def test_round_trip(tmp_path):
    config = JournalConfig(path=tmp_path, agent_name="scout", project_path=tmp_path / "proj")
    config.search.min_score = 0.25
    config.search.excerpt_length = 120
    save_config(config)

    loaded = load_config(tmp_path)
    assert loaded.agent_name == "scout"
    assert loaded.project_path == tmp_path / "proj"
    assert loaded.search.min_score == 0.25
    assert loaded.search.excerpt_length == 120
    assert loaded.user_journal_path == tmp_path / "scout"
    assert loaded.roots() == [
        (tmp_path / "scout", Scope.USER),
        (tmp_path / "proj", Scope.PROJECT),
    ]


def test_agent_env_override(tmp_path, monkeypatch):
    monkeypatch.setenv("PRIVATE_JOURNAL_AGENT", "helper")
    config = load_or_create_config(tmp_path)
    assert config.user_journal_path == tmp_path / "helper"


def test_resolve_journal_path(tmp_path, monkeypatch):
    assert resolve_journal_path(tmp_path) == tmp_path
    monkeypatch.setenv("PRIVATE_JOURNAL_PATH", str(tmp_path / "from-env"))
    assert resolve_journal_path() == tmp_path / "from-env"
    monkeypatch.delenv("PRIVATE_JOURNAL_PATH")
    monkeypatch.setenv("HOME", str(tmp_path))
    assert resolve_journal_path() == tmp_path / ".private-journal"
    assert resolve_journal_path("relative") == tmp_path / "relative"


def test_newer_version_rejected(tmp_path):
    (tmp_path / CONFIG_FILENAME).write_text("[journal]\nversion = 99\n")
    with pytest.raises(ValueError):
        load_config(tmp_path)


def test_invalid_toml(tmp_path):
    (tmp_path / CONFIG_FILENAME).write_text("[journal\n")
    with pytest.raises(ValueError):
        load_config(tmp_path)


def test_missing_config(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(Path(tmp_path))


@pytest.mark.parametrize("project", ["journal/notes", "journal", "."])
def test_overlapping_project_path_rejected(tmp_path, project):
    config = JournalConfig(path=tmp_path / "journal", project_path=tmp_path / project)
    with pytest.raises(ValueError, match="overlaps"):
        config.roots()


def test_project_path_inside_base_but_beside_agent_dir(tmp_path):
    config = JournalConfig(path=tmp_path, agent_name="scout", project_path=tmp_path / "proj")
    assert [scope for _, scope in config.roots()] == [Scope.USER, Scope.PROJECT]


def test_exists(tmp_path):
    config = JournalConfig(path=tmp_path)
    assert not config.exists()
    save_config(config)
    assert config.exists()
