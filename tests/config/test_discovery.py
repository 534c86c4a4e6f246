"""Tests for config file discovery."""

from __future__ import annotations

from pathlib import Path

import pytest

from caliber.config.discovery import (
    CONFIG_FILENAME,
    default_journal_path,
    find_config,
    user_config_path,
)


class TestFindConfig:
    def test_finds_in_start_dir(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text("[filters]\n")
        assert find_config(tmp_path) == config_file

    def test_walks_up(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text("")
        child = tmp_path / "a" / "b"
        child.mkdir(parents=True)
        assert find_config(child) == config_file

    def test_none_when_missing(self, tmp_path: Path) -> None:
        child = tmp_path / "empty"
        child.mkdir()
        assert find_config(child) is None

    def test_falls_back_to_user_config(self, tmp_path: Path) -> None:
        user_file = user_config_path()
        user_file.parent.mkdir(parents=True)
        user_file.write_text("")
        start = tmp_path / "elsewhere"
        start.mkdir()
        assert find_config(start) == user_file

    def test_project_file_beats_user_file(self, tmp_path: Path) -> None:
        user_file = user_config_path()
        user_file.parent.mkdir(parents=True)
        user_file.write_text("")
        project_file = tmp_path / CONFIG_FILENAME
        project_file.write_text("")
        assert find_config(tmp_path) == project_file

    def test_env_var_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        custom = tmp_path / "custom.toml"
        custom.write_text("")
        (tmp_path / CONFIG_FILENAME).write_text("")
        monkeypatch.setenv("CALIBER_CONFIG", str(custom))
        assert find_config(tmp_path) == custom

    def test_env_var_pointing_nowhere(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        monkeypatch.setenv("CALIBER_CONFIG", str(tmp_path / "missing.toml"))
        assert find_config(tmp_path) is None


class TestUserPaths:
    def test_under_home(self) -> None:
        base = Path.home() / ".config" / "caliber"
        assert user_config_path() == base / "config.toml"
        assert default_journal_path() == base / "journals" / "journal.md"
