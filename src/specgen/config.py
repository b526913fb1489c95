"""Configuration-file handling, debug toggles and XDG paths.

This module covers the parts of configuration that live outside the
generation engine:

* **Config path resolution** -- :func:`resolve_config_path` turns the
  ``--config-file`` value into an absolute path relative to the working
  directory.
* **Debug toggle** -- :func:`debug_enabled` checks ``DEBUG`` and
  ``SPECGEN_DEBUG``; :func:`dump_config` writes the loaded document to the
  diagnostic sink when the toggle is on.
* **Directory layout** -- XDG Base Directory compliant data directory on
  Linux/BSD, ``~/.specgen/`` on macOS and Windows. Used for crash logs.
"""

from __future__ import annotations

import os
import platform
from pathlib import Path
from typing import Any, Optional

import yaml

from specgen.exceptions import PathResolutionError
from specgen.output import DiagnosticSink

_APP_NAME = "specgen"

DEBUG_ENV_VARS = ("DEBUG", "SPECGEN_DEBUG")
"""Environment variables that enable the config-document dump."""


# --- Config file ---


def resolve_config_path(path: str, cwd: Optional[str | Path] = None) -> Path:
    """Resolve *path* to an absolute path relative to *cwd*.

    Args:
        path: The ``--config-file`` value as typed by the user.
        cwd: Working directory to resolve against. Defaults to the process
            working directory.

    Returns:
        The absolute, normalised path. The file is not required to exist;
        reading it is the engine's job.

    Raises:
        PathResolutionError: If the working directory cannot be determined
            or the path cannot be made absolute.
    """
    try:
        base = Path(cwd) if cwd is not None else Path.cwd()
        expanded = Path(path).expanduser()
        resolved = expanded if expanded.is_absolute() else base / expanded
        return Path(os.path.normpath(resolved))
    except (OSError, RuntimeError, ValueError) as exc:
        raise PathResolutionError(f"Cannot resolve config path {path!r}: {exc}") from exc


def debug_enabled() -> bool:
    """Return True when any of :data:`DEBUG_ENV_VARS` is set to a non-empty value."""
    return any(os.environ.get(var) for var in DEBUG_ENV_VARS)


def dump_config(document: Optional[dict[str, Any]], sink: DiagnosticSink) -> None:
    """Write *document* to the sink when the debug toggle is on.

    Does nothing when the toggle is off. With the toggle on and no document
    loaded, logs ``NO config read``.
    """
    if not debug_enabled():
        return
    if document is None:
        sink.notice("NO config read")
        return
    dumped = yaml.safe_dump(document, sort_keys=True, default_flow_style=False)
    sink.notice(f"config document:\n{dumped.rstrip()}")


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/specgen/`` (default ``~/.local/share/specgen/``).
    On macOS/Windows: ``~/.specgen/logs/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_DATA_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".local" / "share"
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}" / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path
