"""Central logging utilities for the Spark client."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from logging.config import dictConfig
from typing import Any, Dict, Iterable, Tuple

from spark_gui.config.paths import VAR_LOGS_DIR, ensure_var_directories

LOG_DIR = VAR_LOGS_DIR

_DEFAULT_FORMAT = (
    "%(asctime)s | %(levelname)-7s | %(name)s | "
    "[comp=%(component)s sub=%(subcomponent)s session=%(session_id)s code=%(log_code)s tags=%(tags)s] | %(message)s"
)


@dataclass(frozen=True)
class RegisteredLogger:
    name: str
    component: str
    description: str | None = None


class _ComponentRegistry:
    """Maps logger name prefixes to component labels."""

    def __init__(self) -> None:
        self._prefix_map: Dict[str, RegisteredLogger] = {}
        self._default_component = "Unknown"
        self._register_default_prefixes()

    def _register_default_prefixes(self) -> None:
        defaults = {
            "spark_gui.services": "Service",
            "spark_gui.services.service_locator": "Registry",
            "spark_gui.services.bootstrap": "Registry",
            "spark_gui.services.user_storage": "Storage",
            "spark_gui.services.clipboard": "Clipboard",
            "spark_gui.logging": "Logging",
            "spark_gui.app": "Runtime",
        }
        for prefix, component in defaults.items():
            self.register_prefix(prefix, component)

    def register_prefix(self, prefix: str, component: str, *, description: str | None = None) -> None:
        self._prefix_map[prefix] = RegisteredLogger(prefix, component, description)

    def resolve(self, logger_name: str) -> str:
        best_match_len = -1
        component = self._default_component
        for prefix, entry in self._prefix_map.items():
            if logger_name.startswith(prefix) and len(prefix) > best_match_len:
                component = entry.component
                best_match_len = len(prefix)
        return component


COMPONENT_REGISTRY = _ComponentRegistry()


class CustomFormatter(logging.Formatter):
    """Formatter that includes optional fields supplied via ``extra``."""

    def format(self, record: logging.LogRecord) -> str:
        line = getattr(record, "line", None)
        if line:
            record.msg = f"{record.msg} | line={line}"
        return super().format(record)


class CorrelationIdFilter(logging.Filter):
    """Ensure ``session_id`` and structured keys exist on every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "session_id"):
            record.session_id = "unknown"
        if not hasattr(record, "log_code"):
            record.log_code = None
        if not hasattr(record, "tags"):
            record.tags = "-"
        return True


class ComponentFilter(logging.Filter):
    """Annotate records with component/subcomponent metadata."""

    def filter(self, record: logging.LogRecord) -> bool:
        component = getattr(record, "component", None)
        if component is None:
            component = COMPONENT_REGISTRY.resolve(record.name)
            record.component = component
        else:
            COMPONENT_REGISTRY.register_prefix(record.name, component)

        subcomponent = getattr(record, "subcomponent", None)
        if subcomponent is None:
            record.subcomponent = "-"

        return True


class CorrelationIdAdapter(logging.LoggerAdapter):
    """LoggerAdapter that injects the active session id into all log records.

    Usage:
        logger = logging.getLogger(__name__)
        adapter = CorrelationIdAdapter(logger, {"session_id": "alice@example.com"})
        adapter.info("Roster loaded")
    """

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        extra = kwargs.get("extra", {})
        if not isinstance(extra, dict):
            extra = {}

        # Per-call extra takes precedence over adapter context
        merged_extra: dict[str, Any] = {}
        if isinstance(self.extra, dict):
            merged_extra.update(self.extra)
        merged_extra.update(extra)
        merged_extra.setdefault("session_id", "unknown")

        kwargs["extra"] = merged_extra
        return msg, kwargs


_ACTIVE_CONFIG: Tuple[bool, bool] | None = None


def _level_name(level: int) -> str:
    return logging.getLevelName(level) if isinstance(level, int) else str(level)


def _project_loggers() -> Iterable[str]:
    return ("spark_gui",)


def configure_logging(
    level: int = logging.INFO,
    *,
    stream: bool = True,
    log_to_file: bool = True,
    force: bool = False,
) -> None:
    """Configure logging once per process using dictConfig.

    ``level`` controls the verbosity of Spark packages while the root logger
    remains conservative (WARNING) unless ``level`` is DEBUG.
    """

    global _ACTIVE_CONFIG

    debug_enabled = level <= logging.DEBUG
    root_level = logging.DEBUG if debug_enabled else logging.WARNING
    project_level_name = _level_name(level)

    config_key = (stream, log_to_file)
    if _ACTIVE_CONFIG == config_key and not force:
        for name in _project_loggers():
            logging.getLogger(name).setLevel(level)
        return

    handlers: Dict[str, Dict[str, Any]] = {}
    root_handlers: list[str] = []

    if stream:
        handlers["console"] = {
            "class": "logging.StreamHandler",
            "level": project_level_name,
            "formatter": "structured",
            "filters": ["correlation", "component"],
        }
        root_handlers.append("console")

    if log_to_file:
        ensure_var_directories()
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": project_level_name,
            "formatter": "structured",
            "filters": ["correlation", "component"],
            "filename": str(LOG_DIR / "spark_gui.log"),
            "maxBytes": 10 * 1024 * 1024,
            "backupCount": 5,
            "encoding": "utf-8",
        }
        root_handlers.append("file")

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "structured": {
                "()": "spark_gui.logging_config.logger.CustomFormatter",
                "format": _DEFAULT_FORMAT,
            }
        },
        "filters": {
            "correlation": {
                "()": "spark_gui.logging_config.logger.CorrelationIdFilter",
            },
            "component": {
                "()": "spark_gui.logging_config.logger.ComponentFilter",
            },
        },
        "handlers": handlers,
        "root": {
            "level": _level_name(root_level),
            "handlers": root_handlers,
        },
    }

    dictConfig(config)

    for name in _project_loggers():
        logging.getLogger(name).setLevel(level)

    _ACTIVE_CONFIG = config_key


__all__ = [
    "configure_logging",
    "CorrelationIdAdapter",
    "CorrelationIdFilter",
    "ComponentFilter",
    "CustomFormatter",
    "COMPONENT_REGISTRY",
    "LOG_DIR",
]
