from __future__ import annotations

"""Thin bridge to the host clipboard through Qt."""

from typing import Any, Callable, Optional


class ClipboardUnavailable(RuntimeError):
    """Raised when the clipboard holds no text or the host refuses access."""


ClipboardProvider = Callable[[], Any]


def qt_clipboard() -> Any:
    """Return the ``QClipboard`` of the running Qt application."""

    try:
        from qtpy import QtWidgets  # type: ignore
    except ImportError as exc:
        raise ClipboardUnavailable("Qt bindings are not installed") from exc

    if QtWidgets.QApplication.instance() is None:
        raise ClipboardUnavailable("No Qt application is running")
    clipboard = QtWidgets.QApplication.clipboard()
    if clipboard is None:
        raise ClipboardUnavailable("Qt did not provide a clipboard")
    return clipboard


class ClipboardBridge:
    """Reads and writes plain text on the host clipboard.

    ``provider`` returns an object with the ``QClipboard`` surface used here
    (``mimeData()`` and ``setText()``); it defaults to the Qt application
    clipboard.
    """

    def __init__(self, provider: Optional[ClipboardProvider] = None) -> None:
        self._provider: ClipboardProvider = provider or qt_clipboard

    def read_text(self) -> str:
        try:
            clipboard = self._provider()
            mime = clipboard.mimeData()
            has_text = mime is not None and bool(mime.hasText())
            text = str(mime.text()) if has_text else None
        except ClipboardUnavailable:
            raise
        except Exception as exc:
            # Qt raises RuntimeError once the wrapped C++ object is deleted.
            raise ClipboardUnavailable(f"Clipboard read rejected: {exc}") from exc
        if text is None:
            raise ClipboardUnavailable("Clipboard does not contain text")
        return text

    def write_text(self, text: str) -> None:
        try:
            self._provider().setText(text)
        except ClipboardUnavailable:
            raise
        except Exception as exc:
            raise ClipboardUnavailable(f"Clipboard write rejected: {exc}") from exc


__all__ = ["ClipboardBridge", "ClipboardUnavailable", "qt_clipboard"]
