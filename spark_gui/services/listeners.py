from __future__ import annotations

"""Synchronous listener fan-out shared by the component managers."""

import logging
from threading import RLock
from typing import Any, Callable, Generic, List, TypeVar

from spark_gui.logging_config.helpers import log_constant
from spark_gui.logging_config.log_constants import LOG_LISTENER_FAILED

_LOGGER = logging.getLogger(__name__)

ListenerT = TypeVar("ListenerT", bound=Callable[..., Any])


class ListenerSet(Generic[ListenerT]):
    """Ordered, de-duplicated set of callables notified in registration order.

    A failing listener is logged and skipped so one plugin cannot stop the
    others from hearing about an event.
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._listeners: List[ListenerT] = []
        self._lock = RLock()

    def add(self, listener: ListenerT) -> None:
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def remove(self, listener: ListenerT) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def __len__(self) -> int:
        with self._lock:
            return len(self._listeners)

    def emit(self, *args: Any) -> int:
        """Invoke every listener with ``args``; return how many succeeded."""

        with self._lock:
            listeners = list(self._listeners)
        delivered = 0
        for listener in listeners:
            try:
                listener(*args)
            except Exception as exc:
                log_constant(
                    _LOGGER,
                    LOG_LISTENER_FAILED,
                    message=f"listeners={self._name}",
                    exc_info=exc,
                )
                continue
            delivered += 1
        return delivered


__all__ = ["ListenerSet"]
