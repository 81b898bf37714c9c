from __future__ import annotations

"""Session state: the live XMPP connection and the authenticated identity."""

import logging
from threading import RLock
from typing import Any, Callable, Optional, Protocol, runtime_checkable

from spark_gui.constants import SESSION_NOT_ESTABLISHED_ERROR
from spark_gui.logging_config.helpers import LogConstantMixin
from spark_gui.logging_config.log_constants import (
    LOG_SESSION_CLOSED,
    LOG_SESSION_ESTABLISHED,
)
from spark_gui.services.listeners import ListenerSet
from spark_gui.services.service_locator import DependencyNotReady


@runtime_checkable
class XmppConnection(Protocol):
    """Subset of a connection that services bound to a session rely on."""

    @property
    def user(self) -> str: ...

    def is_connected(self) -> bool: ...

    def send(self, packet: Any) -> None: ...


class SessionNotEstablishedError(DependencyNotReady):
    """Raised when session state is requested before login completed."""


SessionListener = Callable[[str, Optional[str]], None]


def bare_address(address: str) -> str:
    """Strip the resource part from a full address (``user@host/res`` → ``user@host``)."""

    return address.split("/", 1)[0]


class SessionManager(LogConstantMixin):
    """Holds the connection and identity of the signed-in user.

    Listeners are invoked with ``(event, bare_address)`` where ``event`` is
    ``"established"`` or ``"closed"``.
    """

    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        self._lock = RLock()
        self._connection: Optional[XmppConnection] = None
        self._bare_address: Optional[str] = None
        self._server_address: Optional[str] = None
        self._username: Optional[str] = None
        self._listeners: ListenerSet[SessionListener] = ListenerSet("session")

    # ------------------------------------------------------------------
    def initialize_session(self, connection: XmppConnection, address: str) -> None:
        """Record ``connection`` as the live connection for ``address``."""

        bare = bare_address(address).strip()
        if not bare:
            raise ValueError("Session identity must be a non-empty bare address")
        with self._lock:
            self._connection = connection
            self._bare_address = bare
            self._username, _, self._server_address = bare.partition("@")
        self.log_constant(LOG_SESSION_ESTABLISHED, extra={"session_id": bare})
        self._notify("established", bare)

    def close_session(self) -> None:
        with self._lock:
            bare = self._bare_address
            self._connection = None
            self._bare_address = None
            self._server_address = None
            self._username = None
        if bare is None:
            return
        self.log_constant(LOG_SESSION_CLOSED, extra={"session_id": bare})
        self._notify("closed", bare)

    # ------------------------------------------------------------------
    @property
    def is_established(self) -> bool:
        with self._lock:
            return self._connection is not None

    @property
    def connection(self) -> Optional[XmppConnection]:
        with self._lock:
            return self._connection

    @property
    def bare_address(self) -> Optional[str]:
        with self._lock:
            return self._bare_address

    @property
    def server_address(self) -> Optional[str]:
        with self._lock:
            return self._server_address or None

    @property
    def username(self) -> Optional[str]:
        with self._lock:
            return self._username

    def require_connection(self, consumer: str = "the connection") -> XmppConnection:
        connection = self.connection
        if connection is None:
            raise SessionNotEstablishedError(SESSION_NOT_ESTABLISHED_ERROR.format(consumer=consumer))
        return connection

    def require_bare_address(self, consumer: str = "the session identity") -> str:
        address = self.bare_address
        if not address:
            raise SessionNotEstablishedError(SESSION_NOT_ESTABLISHED_ERROR.format(consumer=consumer))
        return address

    # ------------------------------------------------------------------
    def add_listener(self, listener: SessionListener) -> None:
        self._listeners.add(listener)

    def remove_listener(self, listener: SessionListener) -> None:
        self._listeners.remove(listener)

    def _notify(self, event: str, address: Optional[str]) -> None:
        self._listeners.emit(event, address)


__all__ = [
    "SessionListener",
    "SessionManager",
    "SessionNotEstablishedError",
    "XmppConnection",
    "bare_address",
]
