"""Shared structured log constants for the Spark client.

This module centralises the event identifiers used across the application so
that emitters can attach consistent metadata (component, subcomponent, tags)
alongside a stable log code and human readable message.

## Usage

    from spark_gui.logging_config.helpers import log_constant
    from spark_gui.logging_config.log_constants import LOG_STORAGE_ROOT_UNAVAILABLE

    try:
        root.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        log_constant(_LOGGER, LOG_STORAGE_ROOT_UNAVAILABLE, exc_info=exc)

## Lookup & Filtering

    const = get_constant_by_code("LOG141")  # → LOG_STORAGE_ROOT_UNAVAILABLE
    components = list_known_components()    # → ["Clipboard", "Registry", ...]
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple, Dict, Set
import logging


@dataclass(frozen=True, slots=True)
class LogConstant:
    """Container describing a structured log record template."""

    code: str
    level: int | str
    message: str
    component: str
    subcomponent: str
    tags: tuple[str, ...] = ()


def _tags(*values: str) -> tuple[str, ...]:
    return tuple(v for v in values if v)


def _constant(
    code: str,
    level: int | str,
    message: str,
    *,
    component: str,
    subcomponent: str,
    tags: Iterable[str] = (),
) -> LogConstant:
    return LogConstant(
        code=code,
        level=level,
        message=message,
        component=component,
        subcomponent=subcomponent,
        tags=tuple(tags),
    )


# ---------------------------------------------------------------------------
# Registry constants (LOG100–LOG119)
# ---------------------------------------------------------------------------
LOG_SERVICE_REGISTERED = _constant(
    "LOG100",
    "DEBUG",
    "Service registered",
    component="Registry",
    subcomponent="Locator",
    tags=_tags("registry", "register"),
)

LOG_SERVICE_FACTORY_REGISTERED = _constant(
    "LOG101",
    "DEBUG",
    "Lazy service factory registered",
    component="Registry",
    subcomponent="Locator",
    tags=_tags("registry", "register", "lazy"),
)

LOG_SERVICE_CONSTRUCTED = _constant(
    "LOG102",
    "DEBUG",
    "Service constructed on first access",
    component="Registry",
    subcomponent="Locator",
    tags=_tags("registry", "construct"),
)

LOG_SERVICE_CONSTRUCTION_FAILED = _constant(
    "LOG103",
    "ERROR",
    "Service construction failed; slot left unset",
    component="Registry",
    subcomponent="Locator",
    tags=_tags("registry", "construct", "error"),
)

LOG_SERVICE_DEPENDENCY_NOT_READY = _constant(
    "LOG104",
    "WARNING",
    "Service requested before its dependency was ready",
    component="Registry",
    subcomponent="Locator",
    tags=_tags("registry", "dependency", "warning"),
)

LOG_REGISTRY_BOOTSTRAPPED = _constant(
    "LOG105",
    "INFO",
    "Default Spark services registered",
    component="Registry",
    subcomponent="Bootstrap",
    tags=_tags("registry", "bootstrap"),
)


# ---------------------------------------------------------------------------
# Session constants (LOG120–LOG139)
# ---------------------------------------------------------------------------
LOG_SESSION_ESTABLISHED = _constant(
    "LOG120",
    "INFO",
    "Session established",
    component="Service",
    subcomponent="Session",
    tags=_tags("session", "login"),
)

LOG_SESSION_CLOSED = _constant(
    "LOG121",
    "INFO",
    "Session closed",
    component="Service",
    subcomponent="Session",
    tags=_tags("session", "logout"),
)


# ---------------------------------------------------------------------------
# Storage constants (LOG140–LOG159)
# ---------------------------------------------------------------------------
LOG_STORAGE_ROOT_CREATED = _constant(
    "LOG140",
    "INFO",
    "Per-user storage root created",
    component="Storage",
    subcomponent="UserDirectory",
    tags=_tags("storage", "mkdir"),
)

LOG_STORAGE_ROOT_UNAVAILABLE = _constant(
    "LOG141",
    "ERROR",
    "Per-user storage root could not be created",
    component="Storage",
    subcomponent="UserDirectory",
    tags=_tags("storage", "mkdir", "error"),
)

LOG_PREFERENCES_LOADED = _constant(
    "LOG142",
    "DEBUG",
    "User preferences loaded",
    component="Storage",
    subcomponent="Preferences",
    tags=_tags("storage", "preferences"),
)

LOG_PREFERENCES_SAVED = _constant(
    "LOG143",
    "DEBUG",
    "User preferences saved",
    component="Storage",
    subcomponent="Preferences",
    tags=_tags("storage", "preferences"),
)

LOG_PREFERENCES_INVALID = _constant(
    "LOG144",
    "WARNING",
    "User preferences file ignored; expected a mapping of namespaces",
    component="Storage",
    subcomponent="Preferences",
    tags=_tags("storage", "preferences", "warning"),
)


# ---------------------------------------------------------------------------
# Clipboard constants (LOG160–LOG169)
# ---------------------------------------------------------------------------
LOG_CLIPBOARD_READ_FAILED = _constant(
    "LOG160",
    "WARNING",
    "Could not retrieve text from clipboard",
    component="Clipboard",
    subcomponent="Bridge",
    tags=_tags("clipboard", "read", "warning"),
)

LOG_CLIPBOARD_WRITE_FAILED = _constant(
    "LOG161",
    "WARNING",
    "Could not place text on clipboard",
    component="Clipboard",
    subcomponent="Bridge",
    tags=_tags("clipboard", "write", "warning"),
)


# ---------------------------------------------------------------------------
# Component manager constants (LOG180–LOG199)
# ---------------------------------------------------------------------------
LOG_SOUND_PLAYBACK_SKIPPED = _constant(
    "LOG180",
    "DEBUG",
    "Sound playback skipped",
    component="Service",
    subcomponent="Sound",
    tags=_tags("sound", "skip"),
)

LOG_SOUND_PLAYBACK_FAILED = _constant(
    "LOG181",
    "WARNING",
    "Sound player raised while playing",
    component="Service",
    subcomponent="Sound",
    tags=_tags("sound", "warning"),
)

LOG_LISTENER_FAILED = _constant(
    "LOG182",
    "WARNING",
    "Component listener raised while handling an event",
    component="Service",
    subcomponent="Listener",
    tags=_tags("listener", "warning"),
)

LOG_MESSAGE_EVENT_SENT = _constant(
    "LOG183",
    "DEBUG",
    "Message event sent",
    component="Service",
    subcomponent="MessageEvent",
    tags=_tags("message_event", "send"),
)

LOG_TRANSFER_REJECTED = _constant(
    "LOG184",
    "INFO",
    "Incoming file transfer rejected by interceptor",
    component="Service",
    subcomponent="Transfer",
    tags=_tags("transfer", "reject"),
)

LOG_VCARD_LOAD_FAILED = _constant(
    "LOG185",
    "WARNING",
    "Profile loader failed; returning empty profile",
    component="Service",
    subcomponent="VCard",
    tags=_tags("vcard", "warning"),
)


# ---------------------------------------------------------------------------
# Runtime constants (LOG680–LOG683)
# ---------------------------------------------------------------------------
LOG_RUNTIME_APP_DEBUG = _constant(
    "LOG680",
    "DEBUG",
    "Application runtime debug",
    component="Runtime",
    subcomponent="App",
    tags=_tags("runtime", "app", "debug"),
)

LOG_RUNTIME_APP_INFO = _constant(
    "LOG681",
    "INFO",
    "Application runtime event",
    component="Runtime",
    subcomponent="App",
    tags=_tags("runtime", "app"),
)

LOG_RUNTIME_APP_WARNING = _constant(
    "LOG682",
    "WARNING",
    "Application runtime warning",
    component="Runtime",
    subcomponent="App",
    tags=_tags("runtime", "app", "warning"),
)

LOG_RUNTIME_APP_ERROR = _constant(
    "LOG683",
    "ERROR",
    "Application runtime error",
    component="Runtime",
    subcomponent="App",
    tags=_tags("runtime", "app", "error"),
)


def get_constant_by_code(code: str) -> LogConstant | None:
    """Retrieve a log constant by its code identifier.

    Args:
        code: The constant code (e.g., "LOG100", "LOG141").

    Returns:
        The LogConstant instance if found, else None.
    """
    for const in ALL_LOG_CONSTANTS:
        if const.code == code:
            return const
    return None


def list_known_components() -> list[str]:
    """Return a sorted list of all known component names."""
    return sorted(set(const.component for const in ALL_LOG_CONSTANTS))


def get_component_snapshot() -> Dict[str, Set[str]]:
    """Build a snapshot of component → subcomponents mapping.

    Example:
        >>> snapshot = get_component_snapshot()
        >>> snapshot["Registry"]
        {'Bootstrap', 'Locator'}
    """
    snapshot: Dict[str, Set[str]] = {}
    for const in ALL_LOG_CONSTANTS:
        snapshot.setdefault(const.component, set()).add(const.subcomponent)
    return snapshot


def validate_log_constants() -> list[str]:
    """Validate that all log constants conform to logging standards.

    Checks that:
    - Every constant has a valid logging level (matches logging._nameToLevel).
    - Every constant has non-empty code, message, component, subcomponent fields.
    - No duplicate codes exist.

    Returns:
        A list of error messages. Empty list if all constants are valid.
    """
    errors: list[str] = []
    seen_codes: set[str] = set()

    for const in ALL_LOG_CONSTANTS:
        if not const.code:
            errors.append(f"LogConstant has empty code: {const}")
        if not const.message:
            errors.append(f"LogConstant {const.code} has empty message")
        if not const.component:
            errors.append(f"LogConstant {const.code} has empty component")
        if not const.subcomponent:
            errors.append(f"LogConstant {const.code} has empty subcomponent")

        if isinstance(const.level, str):
            if const.level not in logging._nameToLevel:
                errors.append(
                    f"LogConstant {const.code} has invalid level: {const.level}. "
                    f"Must be one of {sorted(logging._nameToLevel.keys())}"
                )
        elif not isinstance(const.level, int):
            errors.append(
                f"LogConstant {const.code} has invalid level type: {type(const.level)}. "
                f"Must be str or int."
            )

        if const.code in seen_codes:
            errors.append(f"Duplicate constant code: {const.code}")
        seen_codes.add(const.code)

    return errors


# Aggregate tuple for quick iteration during tests or tooling.
ALL_LOG_CONSTANTS: Tuple[LogConstant, ...] = (
    LOG_SERVICE_REGISTERED,
    LOG_SERVICE_FACTORY_REGISTERED,
    LOG_SERVICE_CONSTRUCTED,
    LOG_SERVICE_CONSTRUCTION_FAILED,
    LOG_SERVICE_DEPENDENCY_NOT_READY,
    LOG_REGISTRY_BOOTSTRAPPED,
    LOG_SESSION_ESTABLISHED,
    LOG_SESSION_CLOSED,
    LOG_STORAGE_ROOT_CREATED,
    LOG_STORAGE_ROOT_UNAVAILABLE,
    LOG_PREFERENCES_LOADED,
    LOG_PREFERENCES_SAVED,
    LOG_PREFERENCES_INVALID,
    LOG_CLIPBOARD_READ_FAILED,
    LOG_CLIPBOARD_WRITE_FAILED,
    LOG_SOUND_PLAYBACK_SKIPPED,
    LOG_SOUND_PLAYBACK_FAILED,
    LOG_LISTENER_FAILED,
    LOG_MESSAGE_EVENT_SENT,
    LOG_TRANSFER_REJECTED,
    LOG_VCARD_LOAD_FAILED,
    LOG_RUNTIME_APP_DEBUG,
    LOG_RUNTIME_APP_INFO,
    LOG_RUNTIME_APP_WARNING,
    LOG_RUNTIME_APP_ERROR,
)


__all__ = (
    "LogConstant",
    "ALL_LOG_CONSTANTS",
    "get_constant_by_code",
    "list_known_components",
    "get_component_snapshot",
    "validate_log_constants",
    "LOG_SERVICE_REGISTERED",
    "LOG_SERVICE_FACTORY_REGISTERED",
    "LOG_SERVICE_CONSTRUCTED",
    "LOG_SERVICE_CONSTRUCTION_FAILED",
    "LOG_SERVICE_DEPENDENCY_NOT_READY",
    "LOG_REGISTRY_BOOTSTRAPPED",
    "LOG_SESSION_ESTABLISHED",
    "LOG_SESSION_CLOSED",
    "LOG_STORAGE_ROOT_CREATED",
    "LOG_STORAGE_ROOT_UNAVAILABLE",
    "LOG_PREFERENCES_LOADED",
    "LOG_PREFERENCES_SAVED",
    "LOG_PREFERENCES_INVALID",
    "LOG_CLIPBOARD_READ_FAILED",
    "LOG_CLIPBOARD_WRITE_FAILED",
    "LOG_SOUND_PLAYBACK_SKIPPED",
    "LOG_SOUND_PLAYBACK_FAILED",
    "LOG_LISTENER_FAILED",
    "LOG_MESSAGE_EVENT_SENT",
    "LOG_TRANSFER_REJECTED",
    "LOG_VCARD_LOAD_FAILED",
    "LOG_RUNTIME_APP_DEBUG",
    "LOG_RUNTIME_APP_INFO",
    "LOG_RUNTIME_APP_WARNING",
    "LOG_RUNTIME_APP_ERROR",
)
