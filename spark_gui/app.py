from __future__ import annotations

"""Application entry-point helpers for manual smoke-testing."""

# Set Qt API BEFORE any other imports that might use Qt
import os
os.environ.setdefault("QT_API", "pyqt6")

import json
import logging
import sys
from functools import partial
from typing import Any

from spark_gui.config.settings import Settings, get_settings
from spark_gui.logging_config.logger import configure_logging
from spark_gui.logging_config.helpers import log_constant
from spark_gui.logging_config.log_constants import (
    LOG_RUNTIME_APP_DEBUG,
    LOG_RUNTIME_APP_ERROR,
    LOG_RUNTIME_APP_INFO,
    LOG_RUNTIME_APP_WARNING,
)


LOGGER = logging.getLogger("spark_gui.app")
_log = partial(log_constant, LOGGER)


def _format_settings(settings: Settings) -> str:
    payload: dict[str, Any] = {
        "qt_api": settings.qt_api,
        "log_level": settings.log_level,
        "log_to_file": settings.log_to_file,
        "user_home": str(settings.home),
        "product_namespace": settings.product_namespace,
        "sounds_enabled": settings.sounds_enabled,
    }
    return json.dumps(payload, indent=2)


def _describe_key(key: Any) -> str:
    return key if isinstance(key, str) else getattr(key, "__name__", repr(key))


def main() -> int:
    """Print the loaded settings, bootstrap the registry and list its slots."""

    settings = get_settings()
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)
    configure_logging(level=log_level, stream=False, log_to_file=settings.log_to_file)
    _log(LOG_RUNTIME_APP_DEBUG, message="settings_loaded", extra={"qt_api": settings.qt_api})
    print("[spark_gui] Loaded settings:\n" + _format_settings(settings))

    app = None
    try:
        from qtpy.QtWidgets import QApplication
    except ImportError as exc:  # pragma: no cover - optional dependency
        _log(LOG_RUNTIME_APP_WARNING, message="qt_unavailable", extra={"error": str(exc)})
        print("[spark_gui] Qt bindings not available; clipboard access is disabled:", exc)
    else:
        app = QApplication.instance() or QApplication(sys.argv)
        app.setApplicationName("Spark")

    from spark_gui.services.spark_manager import get_spark_manager

    try:
        manager = get_spark_manager()
    except Exception as exc:
        _log(LOG_RUNTIME_APP_ERROR, message="registry_bootstrap_failed", exc_info=exc)
        return 1
    slots = [
        f"{_describe_key(key)}{'' if manager.locator.is_constructed(key) else ' (lazy)'}"
        for key in manager.locator.keys()
    ]
    _log(LOG_RUNTIME_APP_INFO, message="registry_ready", extra={"slots": len(slots)})
    print("[spark_gui] Registered services:\n  " + "\n  ".join(slots))
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI convenience
    raise SystemExit(main())
