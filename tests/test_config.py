"""Tests for apitree.config -- XDG paths, atomic writes, precedence."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from apitree.config import (
    atomic_write,
    get_config_dir,
    get_data_dir,
    load_config_file,
    load_global_config,
    resolve_config,
    save_global_config,
    user_config_path,
)
from apitree.exceptions import ConfigError
from apitree.models import DEFAULT_PREFIX_RULES, GlobalConfig


def _write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


# ---------------------------------------------------------------------------
# XDG path resolution
# ---------------------------------------------------------------------------


class TestDirectories:

    def test_config_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("apitree.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        result = get_config_dir()
        assert result == tmp_path / ".config" / "apitree"
        assert result.is_dir()

    def test_config_dir_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("apitree.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
        assert get_config_dir() == tmp_path / "xdg" / "apitree"

    def test_data_dir_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("apitree.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
        assert get_data_dir() == tmp_path / "data" / "apitree"

    def test_fallback_dirs(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("apitree.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        assert get_config_dir() == tmp_path / ".apitree"
        assert get_data_dir() == tmp_path / ".apitree" / "logs"


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:

    def test_writes_content(self, tmp_path: Path) -> None:
        target = tmp_path / "parsed.json"
        atomic_write(target, '{"paths": []}')
        assert target.read_text(encoding="utf-8") == '{"paths": []}'

    def test_overwrites(self, tmp_path: Path) -> None:
        target = tmp_path / "parsed.json"
        target.write_text("old", encoding="utf-8")
        atomic_write(target, "new")
        assert target.read_text(encoding="utf-8") == "new"

    def test_creates_parents(self, tmp_path: Path) -> None:
        target = tmp_path / "out" / "gen" / "parsed.json"
        atomic_write(target, "{}")
        assert target.is_file()

    def test_no_temp_file_left(self, tmp_path: Path) -> None:
        target = tmp_path / "parsed.json"
        atomic_write(target, "{}")
        assert list(tmp_path.iterdir()) == [target]

    def test_failure_keeps_original(self, tmp_path: Path) -> None:
        target = tmp_path / "parsed.json"
        target.write_text("previous", encoding="utf-8")
        with patch("apitree.config.os.fsync", side_effect=OSError("disk error")):
            with pytest.raises(OSError, match="disk error"):
                atomic_write(target, "partial")
        assert target.read_text(encoding="utf-8") == "previous"
        assert [f for f in tmp_path.iterdir() if ".tmp" in f.name] == []


# ---------------------------------------------------------------------------
# Config files
# ---------------------------------------------------------------------------


class TestConfigFiles:

    def test_defaults_when_missing(self, isolated_config: Path) -> None:
        config = load_global_config()
        assert config == GlobalConfig()
        assert config.parser.prefix_rules == DEFAULT_PREFIX_RULES

    def test_save_and_load(self, isolated_config: Path) -> None:
        config = GlobalConfig()
        config.parser.parameter_defaults["user"] = "me"
        path = save_global_config(config)
        assert path == isolated_config / "apitree" / "config.json"
        assert load_global_config().parser.parameter_defaults["user"] == "me"

    def test_saved_file_is_plain_json(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig())
        data = json.loads(user_config_path().read_text(encoding="utf-8"))
        assert data["parser"]["version_defaults"]["scim"] == "v2"
        assert data["output"] == {"format": "auto", "indent": 2}

    def test_partial_file_fills_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "glip.json"
        _write_json(path, {"parser": {"parameter_defaults": {"chats": "me"}}})
        config = load_config_file(path)
        assert config.parser.parameter_defaults == {"chats": "me"}
        assert config.parser.version_defaults["scim"] == "v2"
        assert config.output.indent == 2

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_config_file(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid config"):
            load_config_file(path)

    def test_invalid_schema(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        _write_json(path, {"parser": {"prefix_rules": [{"pattern": 1}]}})
        with pytest.raises(ConfigError, match="Invalid config"):
            load_config_file(path)


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


class TestResolveConfig:

    @pytest.fixture
    def sources(self, isolated_config: Path, tmp_path: Path) -> dict[str, Path]:
        """One config file per source, each pinning a different output indent."""
        paths = {
            "user": isolated_config / "apitree" / "config.json",
            "project": Path.cwd() / "apitree.json",
            "env": tmp_path / "env.json",
            "cli": tmp_path / "cli.json",
        }
        for indent, path in enumerate(paths.values(), start=1):
            _write_json(path, {"output": {"indent": indent}})
        return paths

    def test_defaults(self, isolated_config: Path) -> None:
        assert resolve_config() == GlobalConfig()

    def test_user_file(self, sources: dict[str, Path]) -> None:
        sources["project"].unlink()
        assert resolve_config().output.indent == 1

    def test_project_beats_user(self, sources: dict[str, Path]) -> None:
        assert resolve_config().output.indent == 2

    def test_env_beats_project(self, sources: dict[str, Path], monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APITREE_CONFIG", str(sources["env"]))
        assert resolve_config().output.indent == 3

    def test_cli_beats_env(self, sources: dict[str, Path], monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APITREE_CONFIG", str(sources["env"]))
        assert resolve_config(cli_config=str(sources["cli"])).output.indent == 4

    def test_cli_format_overrides_file(self, sources: dict[str, Path]) -> None:
        config = resolve_config(cli_format="json")
        assert config.output.format == "json"
        assert config.output.indent == 2

    def test_explicit_missing_file(self, isolated_config: Path, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            resolve_config(cli_config=str(tmp_path / "missing.json"))
