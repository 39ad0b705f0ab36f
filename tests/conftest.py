"""Shared test fixtures for apitree.

Provides the fixture documents, a parsed result of the mini platform
document, and an isolated configuration environment. These fixtures are
discovered by pytest and available to every test module.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from apitree.models import ParseResult
from apitree.output import reset_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches sys.stdout/sys.stderr at creation time; after
    a CliRunner invocation those streams are closed.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


@pytest.fixture
def rc_spec_path() -> Path:
    return FIXTURES_DIR / "rc_platform_mini.json"


@pytest.fixture
def rc_raw(rc_spec_path: Path) -> dict[str, Any]:
    """The raw mini platform document."""
    with open(rc_spec_path, encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def rc_result(rc_raw: dict[str, Any]) -> ParseResult:
    """The mini platform document, parsed with the default configuration."""
    from apitree.parser import parse

    return parse(rc_raw)


# ---------------------------------------------------------------------------
# Configuration isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point every config location at *tmp_path*.

    XDG directories are redirected, ``APITREE_CONFIG`` is cleared and the
    working directory is moved so no project ``apitree.json`` leaks in.

    Returns:
        The directory used as ``XDG_CONFIG_HOME``.
    """
    config_home = tmp_path / "config"
    monkeypatch.setattr("apitree.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.delenv("APITREE_CONFIG", raising=False)
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    return config_home
