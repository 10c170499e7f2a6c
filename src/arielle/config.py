"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for arielle:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.arielle/`` on macOS and Windows. See :func:`get_config_dir`
  and :func:`get_data_dir`.
* **User config** -- An optional ``config.json`` in the config directory
  holding a partial :class:`~arielle.models.AppConfig`.
* **Project config** -- An optional ``./arielle.json`` holding a partial
  :class:`~arielle.models.AppConfig` that is layered on top of the user file.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project config, and user config into the one
  :class:`~arielle.models.AppConfig` the run uses.
* **Credential resolution** -- :func:`resolve_credential` reads API keys
  from env vars or files.

Artifacts are written with an atomic temp-file-then-rename strategy
(:func:`atomic_write`).
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from arielle.exceptions import ConfigError
from arielle.models import AppConfig

_APP_NAME = "arielle"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "arielle.json"

# Environment variable -> (section, field) in AppConfig
_ENV_OVERRIDES: dict[str, tuple[Optional[str], str]] = {
    "ARIELLE_PROVIDER": ("llm", "provider"),
    "ARIELLE_MODEL": ("llm", "model"),
    "ARIELLE_EMBEDDING_MODEL": ("llm", "embedding_model"),
    "ARIELLE_OUTPUT_DIR": (None, "output_dir"),
    "CHROMA_SERVER_URL": ("vector_store", "url"),
    "CHROMA_COLLECTION_NAME": ("vector_store", "collection_name"),
}


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/arielle/`` (default ``~/.config/arielle/``).
    On macOS/Windows: ``~/.arielle/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/arielle/`` (default ``~/.local/share/arielle/``).
    On macOS/Windows: ``~/.arielle/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is cleaned up and the error re-raised.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close below
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- User config ---


def _user_config_path() -> Path:
    """Path to the user config file."""
    return get_config_dir() / _CONFIG_FILENAME


def _read_json_object(path: Path, label: str) -> dict[str, Any]:
    """Read *path* as a JSON object, raising :class:`ConfigError` on bad content."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Invalid {label} at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid {label} at {path}: expected a JSON object")
    return data


def load_user_config() -> dict[str, Any]:
    """Load the raw user configuration dict, or ``{}`` when the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = _user_config_path()
    if not path.is_file():
        return {}
    return _read_json_object(path, "user config")


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./arielle.json``.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    return _read_json_object(path, "project config")


# --- Precedence resolution ---


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return *base* updated with *override*, merging nested dicts key by key."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _set_override(data: dict[str, Any], section: Optional[str], field: str, value: Any) -> None:
    """Set ``data[section][field]`` (or ``data[field]`` when *section* is None)."""
    if section is None:
        data[field] = value
    else:
        data.setdefault(section, {})[field] = value


def _env_overrides() -> dict[str, Any]:
    """Collect configuration overrides from ``ARIELLE_*`` / ``CHROMA_*`` env vars."""
    overrides: dict[str, Any] = {}
    for env_var, (section, field) in _ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if value:
            _set_override(overrides, section, field, value)
    return overrides


def resolve_config(
    cli_provider: Optional[str] = None,
    cli_model: Optional[str] = None,
    cli_embedding_model: Optional[str] = None,
    cli_output_dir: Optional[str] = None,
    cli_verbose: bool = False,
) -> AppConfig:
    """Resolve the effective configuration with the full precedence chain.

    Precedence (high to low):
        1. CLI flags
        2. Environment variables (``ARIELLE_PROVIDER``, ``ARIELLE_MODEL``,
           ``ARIELLE_EMBEDDING_MODEL``, ``ARIELLE_OUTPUT_DIR``,
           ``CHROMA_SERVER_URL``, ``CHROMA_COLLECTION_NAME``)
        3. Project config (``./arielle.json``)
        4. User config (``~/.config/arielle/config.json``)
        5. Defaults

    Returns:
        The validated :class:`~arielle.models.AppConfig`.

    Raises:
        ConfigError: If any layer is unreadable or the merged values fail
            validation.
    """
    # 5 + 4
    data = load_user_config()

    # 3
    project = load_project_config()
    if project is not None:
        data = _deep_merge(data, project)

    # 2
    data = _deep_merge(data, _env_overrides())

    # 1
    cli: dict[str, Any] = {}
    if cli_provider is not None:
        _set_override(cli, "llm", "provider", cli_provider)
    if cli_model is not None:
        _set_override(cli, "llm", "model", cli_model)
    if cli_embedding_model is not None:
        _set_override(cli, "llm", "embedding_model", cli_embedding_model)
    if cli_output_dir is not None:
        _set_override(cli, None, "output_dir", cli_output_dir)
    if cli_verbose:
        cli["verbose"] = True
    data = _deep_merge(data, cli)

    try:
        return AppConfig.model_validate(data)
    except PydanticValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


# --- Credential source resolution ---


def resolve_credential(source: str) -> str:
    """Resolve a credential from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace

    Raises:
        ConfigError: If the source can't be resolved.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if not value:
            raise ConfigError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    raise ConfigError(f"Unknown credential source format: {source}")
