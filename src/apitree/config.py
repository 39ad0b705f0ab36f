"""Configuration management with XDG paths, atomic writes, and precedence resolution.

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.apitree/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Config files** -- a :class:`~apitree.models.GlobalConfig` JSON document.
  The user file lives in the config directory; a project can pin its own
  naming conventions with ``./apitree.json``.
* **Precedence resolution** -- :func:`resolve_config` picks the effective
  configuration from the ``--config`` flag, ``APITREE_CONFIG``, the project
  file and the user file.

All file writes use an atomic temp-file-then-rename strategy
(:func:`atomic_write`) so a crash never leaves a truncated ``parsed.json``
behind for the code generator to pick up.
"""

from __future__ import annotations

import json
import logging
import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

from apitree.exceptions import ConfigError
from apitree.models import GlobalConfig

logger = logging.getLogger(__name__)

_APP_NAME = "apitree"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "apitree.json"
_CONFIG_ENV_VAR = "APITREE_CONFIG"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    return Path.home().joinpath(*default_segments)


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/apitree/`` (default ``~/.config/apitree/``).
    On macOS/Windows: ``~/.apitree/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/apitree/`` (default ``~/.local/share/apitree/``).
    On macOS/Windows: ``~/.apitree/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}" / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def atomic_write(path: Path, data: str) -> None:
    """Write *data* to *path* atomically using a temp file + rename.

    The temporary file is created next to *path* so that ``os.replace`` is an
    atomic rename on POSIX. On any failure the temp file is removed and the
    original *path* is left untouched.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    tmp_path: Optional[str] = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        ) as fd:
            tmp_path = fd.name
            fd.write(data)
            fd.flush()
            os.fsync(fd.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Config files ---


def user_config_path() -> Path:
    """Path to the user-wide config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_config_file(path: Path) -> GlobalConfig:
    """Load and validate the config file at *path*.

    Raises:
        ConfigError: If the file is missing, is not valid JSON, or fails
            Pydantic validation.
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc


def load_global_config() -> GlobalConfig:
    """Load the user config, or defaults when there is none."""
    path = user_config_path()
    if not path.is_file():
        return GlobalConfig()
    return load_config_file(path)


def save_global_config(config: GlobalConfig) -> Path:
    """Persist *config* as the user config and return its path."""
    path = user_config_path()
    data = config.model_dump(mode="json")
    atomic_write(path, json.dumps(data, indent=2) + "\n")
    return path


def project_config_path() -> Optional[Path]:
    """Return ``./apitree.json`` if it exists."""
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    return path if path.is_file() else None


# --- Precedence resolution ---


def resolve_config(
    cli_config: Optional[str] = None,
    cli_format: Optional[str] = None,
) -> GlobalConfig:
    """Resolve the effective configuration.

    The first source found wins; files are not merged with each other.

    Precedence (high to low):
        1. ``--config`` CLI flag
        2. ``APITREE_CONFIG`` environment variable
        3. Project config (``./apitree.json``)
        4. User config (``~/.config/apitree/config.json``)
        5. Defaults

    ``cli_format`` overrides ``output.format`` from whichever source won.

    Raises:
        ConfigError: If the chosen file is missing or invalid.
    """
    explicit = cli_config or os.environ.get(_CONFIG_ENV_VAR)
    if explicit:
        logger.debug("using config %s", explicit)
        config = load_config_file(Path(explicit).expanduser())
    else:
        project = project_config_path()
        if project is not None:
            logger.debug("using project config %s", project)
            config = load_config_file(project)
        else:
            config = load_global_config()

    if cli_format is not None:
        config.output.format = cli_format
    return config
