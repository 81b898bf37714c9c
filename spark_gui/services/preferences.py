from __future__ import annotations

"""Namespaced user preferences backed by YAML files."""

import copy
import logging
from pathlib import Path
from threading import RLock
from typing import Any, Dict, Mapping, Optional

import yaml  # type: ignore[import-not-found]

from spark_gui.config.settings import get_default_preferences_config
from spark_gui.constants import PREFERENCES_FILENAME
from spark_gui.logging_config.helpers import LogConstantMixin
from spark_gui.logging_config.log_constants import (
    LOG_PREFERENCES_INVALID,
    LOG_PREFERENCES_LOADED,
    LOG_PREFERENCES_SAVED,
)
from spark_gui.services.listeners import ListenerSet


class PreferenceManager(LogConstantMixin):
    """Holds preference values grouped by namespace (``chat``, ``sound`` …).

    Defaults come from the packaged ``default_preferences.yaml``; values read
    from or written to a user's ``preferences.yaml`` override them. Listeners
    receive ``(namespace, key, value)`` whenever a value changes.
    """

    def __init__(self, defaults: Optional[Mapping[str, Mapping[str, Any]]] = None) -> None:
        self._logger = logging.getLogger(__name__)
        self._lock = RLock()
        source = get_default_preferences_config() if defaults is None else defaults
        self._defaults: Dict[str, Dict[str, Any]] = {ns: dict(values) for ns, values in source.items()}
        self._values: Dict[str, Dict[str, Any]] = {}
        self._listeners: ListenerSet = ListenerSet("preferences")

    # ------------------------------------------------------------------
    def namespaces(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(sorted(set(self._defaults) | set(self._values)))

    def register_namespace(self, namespace: str, defaults: Mapping[str, Any]) -> None:
        """Add defaults for a plugin-provided namespace without touching stored values."""

        with self._lock:
            merged = dict(defaults)
            merged.update(self._defaults.get(namespace, {}))
            self._defaults[namespace] = merged

    def get(self, namespace: str, key: str, default: Any = None) -> Any:
        with self._lock:
            if key in self._values.get(namespace, {}):
                return self._values[namespace][key]
            return self._defaults.get(namespace, {}).get(key, default)

    def set(self, namespace: str, key: str, value: Any) -> None:
        with self._lock:
            previous = self.get(namespace, key)
            self._values.setdefault(namespace, {})[key] = value
        if previous != value:
            self._listeners.emit(namespace, key, value)

    def reset(self, namespace: str, key: str) -> None:
        with self._lock:
            self._values.get(namespace, {}).pop(key, None)

    def snapshot(self) -> Dict[str, Dict[str, Any]]:
        """Return effective values (defaults overlaid with user values)."""

        with self._lock:
            merged = copy.deepcopy(self._defaults)
            for namespace, values in self._values.items():
                merged.setdefault(namespace, {}).update(copy.deepcopy(values))
            return merged

    def add_listener(self, listener) -> None:
        self._listeners.add(listener)

    def remove_listener(self, listener) -> None:
        self._listeners.remove(listener)

    # ------------------------------------------------------------------
    def load(self, directory: Path) -> None:
        """Replace user values with the content of ``directory/preferences.yaml``.

        A missing, corrupt or non-mapping file leaves only the defaults in
        effect, so values of a previously loaded user never carry over.
        """

        path = Path(directory) / PREFERENCES_FILENAME
        values: Dict[str, Dict[str, Any]] = {}
        if path.exists():
            try:
                with path.open("r", encoding="utf-8") as handle:
                    data = yaml.safe_load(handle) or {}
            except yaml.YAMLError as exc:
                self.log_constant(
                    LOG_PREFERENCES_INVALID,
                    message="unparseable YAML",
                    extra={"path": str(path)},
                    exc_info=exc,
                )
            else:
                if isinstance(data, dict):
                    values = {str(ns): dict(raw) for ns, raw in data.items() if isinstance(raw, dict)}
                    self.log_constant(LOG_PREFERENCES_LOADED, extra={"path": str(path)})
                else:
                    self.log_constant(LOG_PREFERENCES_INVALID, message="not a mapping", extra={"path": str(path)})
        with self._lock:
            self._values = values

    def save(self, directory: Path) -> Path:
        """Write user values (not defaults) to ``directory/preferences.yaml``."""

        path = Path(directory) / PREFERENCES_FILENAME
        with self._lock:
            payload = copy.deepcopy(self._values)
        with path.open("w", encoding="utf-8") as handle:
            yaml.safe_dump(payload, handle, sort_keys=True, default_flow_style=False)
        self.log_constant(LOG_PREFERENCES_SAVED, extra={"path": str(path)})
        return path


__all__ = ["PreferenceManager"]
