"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles the persistent configuration of the ``discord-oauth``
CLI:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.discord-oauth/`` on macOS and Windows. See :func:`get_config_dir`.
* **Config file** -- a single :class:`~discord_oauth.models.ClientConfig`
  JSON file. Managed via :func:`load_config` and :func:`save_config`.
* **Precedence resolution** -- :func:`resolve_config` layers environment
  variables and CLI flags over the config file.
* **Credential resolution** -- :func:`resolve_credential` reads secrets
  from env vars, files, or an interactive prompt.

The library API (:mod:`discord_oauth.client`) never reads configuration on
its own; callers pass a :class:`~discord_oauth.models.ClientConfig` or an
httpx client explicitly.
"""

from __future__ import annotations

import getpass
import json
import logging
import os
import platform
import sys
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from discord_oauth.exceptions import ConfigError
from discord_oauth.models import ClientConfig

logger = logging.getLogger(__name__)

_APP_NAME = "discord-oauth"
_CONFIG_FILENAME = "config.json"

ENV_CLIENT_ID = "DISCORD_OAUTH_CLIENT_ID"
ENV_CLIENT_SECRET_SOURCE = "DISCORD_OAUTH_CLIENT_SECRET_SOURCE"
ENV_REDIRECT_URI = "DISCORD_OAUTH_REDIRECT_URI"
ENV_TIMEOUT = "DISCORD_OAUTH_TIMEOUT"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/discord-oauth/`` (default
    ``~/.config/discord-oauth/``). On macOS/Windows: ``~/.discord-oauth/``.
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_CONFIG_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".config"
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


def config_path() -> Path:
    """Path to the config file."""
    return get_config_dir() / _CONFIG_FILENAME


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is removed and the original file is left untouched.
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
        fd = None
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


# --- Config file ---


def load_config() -> ClientConfig:
    """Load the configuration file.

    Returns:
        The deserialised :class:`~discord_oauth.models.ClientConfig`, or a
        default instance when the file does not exist.

    Raises:
        ConfigError: If the file contains invalid JSON or fails validation.
    """
    path = config_path()
    if not path.is_file():
        return ClientConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return ClientConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc


def save_config(config: ClientConfig) -> None:
    """Persist *config* atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(config_path(), json.dumps(data, indent=2) + "\n")


def set_config_value(key: str, value: str) -> ClientConfig:
    """Update a single field of the stored config and save it.

    An unreadable config file is replaced, starting from defaults, so that
    this stays usable for repairing it.

    Args:
        key: A :class:`~discord_oauth.models.ClientConfig` field name.
        value: The new value as text; Pydantic coerces it to the field type.

    Returns:
        The saved configuration.

    Raises:
        ConfigError: If *key* is unknown or *value* fails validation.
    """
    if key not in ClientConfig.model_fields:
        known = ", ".join(sorted(ClientConfig.model_fields))
        raise ConfigError(f"Unknown config key '{key}' (known keys: {known})")
    try:
        current = load_config()
    except ConfigError as exc:
        logger.warning("%s; starting from defaults", exc)
        current = ClientConfig()
    data = current.model_dump()
    data[key] = value
    try:
        config = ClientConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid value for '{key}': {exc}") from exc
    save_config(config)
    return config


# --- Precedence resolution ---


def _env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for var, key in (
        (ENV_CLIENT_ID, "client_id"),
        (ENV_CLIENT_SECRET_SOURCE, "client_secret_source"),
        (ENV_REDIRECT_URI, "redirect_uri"),
        (ENV_TIMEOUT, "timeout"),
    ):
        value = os.environ.get(var)
        if value:
            overrides[key] = value
    return overrides


def resolve_config(**cli_overrides: Any) -> ClientConfig:
    """Resolve the effective configuration.

    Precedence (high to low):
        1. Keyword arguments (CLI flags); ``None`` values are ignored
        2. Environment variables (``DISCORD_OAUTH_*``)
        3. Config file
        4. Defaults

    Raises:
        ConfigError: If the merged values fail validation.
    """
    data = load_config().model_dump()
    data.update(_env_overrides())
    data.update({k: v for k, v in cli_overrides.items() if v is not None})
    try:
        return ClientConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


# --- Credential source resolution ---


def resolve_credential(source: str) -> str:
    """Resolve a credential from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace
        - ``"prompt"`` -- prompts user interactively (requires a TTY)

    Raises:
        ConfigError: If the source can't be resolved.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
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

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError(
                "Cannot prompt for credentials: stdin is not a TTY (source: prompt)"
            )
        return getpass.getpass("Client secret: ")

    raise ConfigError(f"Unknown credential source format: {source}")
