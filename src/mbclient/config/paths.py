"""Shared path utilities for configuration and log locations.

This module centralizes how the client discovers the files it reads.

Policy:
- Config: ``$MBCLIENT_CONFIG`` when set, otherwise
  ``$XDG_CONFIG_HOME/mbclient/config.toml`` (``~/.config`` fallback, or
  ``%APPDATA%`` on Windows).
- Log file: only when ``MBCLIENT_LOG_FILE`` is set; console logging is
  always enabled.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Callable, Final


_ENV_CONFIG_PATH: Final[str] = "MBCLIENT_CONFIG"
_ENV_LOG_FILE: Final[str] = "MBCLIENT_LOG_FILE"
_APP_DIR_NAME: Final[str] = "mbclient"


def resolve_overridable_path(
    *,
    explicit_path: Path | str | None,
    env: Mapping[str, str] | None,
    env_var: str | None,
    default_factory: Callable[[], Path],
) -> Path:
    """Resolve a configuration path honoring explicit and environment overrides."""

    if explicit_path is not None:
        return Path(explicit_path).expanduser().resolve()

    mapping = env if env is not None else os.environ
    if env_var:
        candidate = mapping.get(env_var) or ""
        candidate = candidate.strip()
        if candidate:
            return Path(candidate).expanduser().resolve()

    default_path = default_factory()
    return default_path.expanduser().resolve()


def user_config_dir(env: Mapping[str, str] | None = None) -> Path:
    """Return the per-user configuration directory for the client.

    Args:
        env: Optional environment mapping. Defaults to ``os.environ``.

    Returns:
        Path: Platform-specific directory; it is not created.
    """
    mapping = env if env is not None else os.environ

    if sys.platform.startswith("win"):
        base = Path(mapping.get("APPDATA") or str(Path.home()))
        return base / _APP_DIR_NAME

    xdg = (mapping.get("XDG_CONFIG_HOME") or "").strip()
    if xdg:
        return Path(xdg) / _APP_DIR_NAME
    return Path.home() / ".config" / _APP_DIR_NAME


def default_config_path(env: Mapping[str, str] | None = None) -> Path:
    """Get the path of the TOML config file."""

    return resolve_overridable_path(
        explicit_path=None,
        env=env,
        env_var=_ENV_CONFIG_PATH,
        default_factory=lambda: user_config_dir(env) / "config.toml",
    )


def default_log_file(env: Mapping[str, str] | None = None) -> Path | None:
    """Get the log file path, or None when file logging is not requested."""

    mapping = env if env is not None else os.environ
    candidate = (mapping.get(_ENV_LOG_FILE) or "").strip()
    if not candidate:
        return None
    return Path(candidate).expanduser().resolve()


__all__ = [
    "default_config_path",
    "default_log_file",
    "resolve_overridable_path",
    "user_config_dir",
]
