from __future__ import annotations

"""Centralized filesystem paths used across the Spark client."""

import os
from pathlib import Path


_PACKAGE_ROOT = Path(__file__).resolve().parent.parent
_REPO_ROOT = _PACKAGE_ROOT.parent

# Writable runtime artifacts. Prefer repo-level var/ unless overridden.
VAR_ROOT = Path(os.getenv("SPARK_VAR_ROOT") or (_REPO_ROOT / "var")).expanduser().resolve()
VAR_LOGS_DIR = VAR_ROOT / "logs"

DEFAULT_PREFERENCES_FILE = _PACKAGE_ROOT / "config" / "default_preferences.yaml"


def get_user_home() -> Path:
    """Return the global user home that hosts the ``Spark/`` namespace.

    ``SPARK_USER_HOME`` overrides the operating system home so portable
    installs and tests can relocate all per-user data.
    """

    override = os.getenv("SPARK_USER_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home()


def ensure_var_directories() -> None:
    """Create the writable directory structure if it does not exist."""

    for path in (VAR_ROOT, VAR_LOGS_DIR):
        path.mkdir(parents=True, exist_ok=True)


__all__ = [
    "VAR_ROOT",
    "VAR_LOGS_DIR",
    "DEFAULT_PREFERENCES_FILE",
    "get_user_home",
    "ensure_var_directories",
]
