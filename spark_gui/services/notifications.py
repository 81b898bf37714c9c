from __future__ import annotations

"""Tray / toaster notifications and window alerting."""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from threading import RLock
from typing import Any, Callable, Deque, List, Optional

from spark_gui.services.listeners import ListenerSet


@dataclass(frozen=True, slots=True)
class Notification:
    title: str
    body: str
    source: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)


NotificationListener = Callable[[Notification], None]


class Notifications:
    """Fans notifications out to presenters (toaster popups, tray icon).

    The most recent ``history_size`` notifications are retained so a
    presenter attached late can catch up.
    """

    def __init__(self, history_size: int = 50) -> None:
        self._lock = RLock()
        self._history: Deque[Notification] = deque(maxlen=max(1, history_size))
        self._listeners: ListenerSet[NotificationListener] = ListenerSet("notifications")

    def notify(self, title: str, body: str, *, source: Optional[str] = None) -> Notification:
        notification = Notification(title=title, body=body, source=source)
        with self._lock:
            self._history.append(notification)
        self._listeners.emit(notification)
        return notification

    def history(self) -> tuple[Notification, ...]:
        with self._lock:
            return tuple(self._history)

    def clear(self) -> None:
        with self._lock:
            self._history.clear()

    def add_listener(self, listener: NotificationListener) -> None:
        self._listeners.add(listener)

    def remove_listener(self, listener: NotificationListener) -> None:
        self._listeners.remove(listener)


class Alerter:
    """Platform hook able to flash a window; subclasses override both methods."""

    def handles(self, window: Any) -> bool:
        return True

    def flash_window(self, window: Any) -> None:
        raise NotImplementedError

    def stop_flashing(self, window: Any) -> None:
        raise NotImplementedError


class AlertManager:
    """Routes flash requests to the first registered alerter handling the window."""

    def __init__(self) -> None:
        self._lock = RLock()
        self._alerters: List[Alerter] = []
        self._flashing: List[Any] = []

    def add_alerter(self, alerter: Alerter) -> None:
        with self._lock:
            if alerter not in self._alerters:
                self._alerters.append(alerter)

    def remove_alerter(self, alerter: Alerter) -> None:
        with self._lock:
            if alerter in self._alerters:
                self._alerters.remove(alerter)

    def _alerter_for(self, window: Any) -> Optional[Alerter]:
        with self._lock:
            for alerter in self._alerters:
                if alerter.handles(window):
                    return alerter
        return None

    def flash_window(self, window: Any) -> bool:
        alerter = self._alerter_for(window)
        if alerter is None:
            return False
        alerter.flash_window(window)
        with self._lock:
            if not any(existing is window for existing in self._flashing):
                self._flashing.append(window)
        return True

    def stop_flashing(self, window: Any) -> bool:
        alerter = self._alerter_for(window)
        with self._lock:
            self._flashing = [existing for existing in self._flashing if existing is not window]
        if alerter is None:
            return False
        alerter.stop_flashing(window)
        return True

    def is_flashing(self, window: Any) -> bool:
        with self._lock:
            return any(existing is window for existing in self._flashing)


__all__ = ["AlertManager", "Alerter", "Notification", "NotificationListener", "Notifications"]
