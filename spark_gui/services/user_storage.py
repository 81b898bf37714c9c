from __future__ import annotations

"""Per-user storage roots isolating the data of each signed-in account."""

import logging
from pathlib import Path

from spark_gui.constants import PRODUCT_NAMESPACE, USER_DIRECTORY_NAME
from spark_gui.logging_config.helpers import log_constant
from spark_gui.logging_config.log_constants import (
    LOG_STORAGE_ROOT_CREATED,
    LOG_STORAGE_ROOT_UNAVAILABLE,
)

_LOGGER = logging.getLogger(__name__)


class StorageUnavailable(RuntimeError):
    """Raised when a per-user storage root cannot be created.

    Every filesystem failure maps to this single error; the originating
    ``OSError`` (when there is one) is available as ``__cause__``.
    """

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Storage root {path} is unavailable: {reason}")


def user_storage_path(home: Path, identity: str, *, namespace: str = PRODUCT_NAMESPACE) -> Path:
    """Return ``home/namespace/user/identity`` without touching the filesystem.

    ``identity`` must be a single path component (a bare address); anything
    that would resolve outside ``home/namespace/user`` raises ``ValueError``.
    """

    if not identity or identity in (".", "..") or "/" in identity or "\\" in identity:
        raise ValueError(f"Invalid storage identity: {identity!r}")
    return Path(home) / namespace / USER_DIRECTORY_NAME / identity


def resolve_user_storage_root(
    home: Path,
    identity: str,
    *,
    namespace: str = PRODUCT_NAMESPACE,
) -> Path:
    """Return the storage root for ``identity``, creating it when missing.

    The path is recomputed and checked on every call. Existing directories are
    returned untouched; anything else in the way (a plain file, a denied
    parent, a full disk) raises :class:`StorageUnavailable`.
    """

    root = user_storage_path(home, identity, namespace=namespace)
    if root.is_dir():
        return root
    if root.exists():
        log_constant(_LOGGER, LOG_STORAGE_ROOT_UNAVAILABLE, message="not a directory", extra={"path": str(root)})
        raise StorageUnavailable(root, "path exists and is not a directory")
    try:
        root.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        log_constant(
            _LOGGER,
            LOG_STORAGE_ROOT_UNAVAILABLE,
            message=exc.strerror or type(exc).__name__,
            extra={"path": str(root)},
            exc_info=exc,
        )
        raise StorageUnavailable(root, exc.strerror or str(exc)) from exc
    log_constant(_LOGGER, LOG_STORAGE_ROOT_CREATED, extra={"path": str(root), "session_id": identity})
    return root


__all__ = ["StorageUnavailable", "resolve_user_storage_root", "user_storage_path"]
