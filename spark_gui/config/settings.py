from __future__ import annotations

"""Runtime configuration management for the Spark client."""

from dataclasses import dataclass
from functools import lru_cache
import os
from pathlib import Path

import yaml  # type: ignore[import-not-found]
from dotenv import load_dotenv

from spark_gui.config.paths import DEFAULT_PREFERENCES_FILE, get_user_home
from spark_gui.constants import PRODUCT_NAMESPACE

_PACKAGE_ROOT = Path(__file__).resolve().parent.parent
_PROJECT_ROOT = _PACKAGE_ROOT.parent
_ENV_FILE = _PROJECT_ROOT / ".env"

# Load environment variables from the project root if present. We do this once at
# import time so that any module importing settings has access to the values.
load_dotenv(_ENV_FILE, override=False)


def _normalize_bool(value: str | None, *, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class Settings:
    """Typed view over the environment configuration."""

    qt_api: str = "pyqt6"
    log_level: str = "INFO"
    log_to_file: bool = True
    user_home: Path | None = None
    product_namespace: str = PRODUCT_NAMESPACE
    sounds_enabled: bool = True

    @property
    def home(self) -> Path:
        """Return the configured user home, falling back to the OS home."""

        if self.user_home is None:
            return get_user_home()
        return self.user_home


def _resolve_user_home(raw_path: str | None) -> Path | None:
    if not raw_path:
        return None
    return Path(raw_path).expanduser()


_DEFAULT_SETTINGS = Settings()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables and cache the result."""

    defaults = _DEFAULT_SETTINGS

    qt_api = os.getenv("QT_API", defaults.qt_api)
    log_level = os.getenv("SPARK_LOG_LEVEL", os.getenv("LOG_LEVEL", defaults.log_level))
    log_to_file = _normalize_bool(os.getenv("SPARK_LOG_TO_FILE"), default=defaults.log_to_file)
    user_home = _resolve_user_home(os.getenv("SPARK_USER_HOME"))
    product_namespace = (os.getenv("SPARK_PRODUCT_NAMESPACE") or defaults.product_namespace).strip()
    sounds_enabled = _normalize_bool(os.getenv("SPARK_SOUNDS_ENABLED"), default=defaults.sounds_enabled)

    return Settings(
        qt_api=qt_api,
        log_level=log_level,
        log_to_file=log_to_file,
        user_home=user_home,
        product_namespace=product_namespace or defaults.product_namespace,
        sounds_enabled=sounds_enabled,
    )


def reload_settings() -> Settings:
    """Clear the settings cache and reload from the environment."""

    get_settings.cache_clear()
    load_dotenv(_ENV_FILE, override=True)
    return get_settings()


__all__ = ["Settings", "get_settings", "reload_settings"]


@lru_cache(maxsize=1)
def get_default_preferences_config() -> dict[str, dict[str, object]]:
    """Load the packaged preference defaults from YAML configuration."""

    if not DEFAULT_PREFERENCES_FILE.exists():
        return {}

    with DEFAULT_PREFERENCES_FILE.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    if not isinstance(data, dict):
        raise ValueError("default_preferences.yaml must define a mapping of namespaces")

    normalized: dict[str, dict[str, object]] = {}
    for namespace, raw in data.items():
        if isinstance(raw, dict):
            normalized[str(namespace)] = dict(raw)

    return normalized


__all__.append("get_default_preferences_config")
