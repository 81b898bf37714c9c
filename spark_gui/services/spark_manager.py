from __future__ import annotations

"""Facade giving the rest of the client one access point to its managers.

Some of the managers and components available from here:

* ``SessionManager`` - the live connection and the signed-in identity.
* ``PreferenceManager`` - namespaced preferences persisted per user.
* ``SoundManager`` - sounds played on chat events.
* ``ChatManager`` - opening, looking up and closing chat rooms.
* ``VCardManager`` - profile lookup by bare address.
* ``AlertManager`` / ``Notifications`` - window flashing and toaster popups.
* ``MessageEventManager`` - composing / delivered / displayed events.
* ``SearchManager`` / ``TransferManager`` - plugin search and file transfer.

Managers are built on first access and the same instance is returned for the
lifetime of the registry. Call order matters for exactly one dependency: the
session must be established before :meth:`SparkManager.get_connection`,
:meth:`SparkManager.get_message_event_manager` or
:meth:`SparkManager.get_user_directory` is used. Calling them earlier raises
:class:`~spark_gui.services.session.SessionNotEstablishedError`.
"""

from datetime import datetime
import logging
from pathlib import Path
from threading import RLock
from typing import Optional

from spark_gui.config.settings import Settings, get_settings
from spark_gui.constants import format_date_seconds
from spark_gui.logging_config.helpers import log_constant
from spark_gui.logging_config.logger import CorrelationIdAdapter
from spark_gui.logging_config.log_constants import (
    LOG_CLIPBOARD_READ_FAILED,
    LOG_CLIPBOARD_WRITE_FAILED,
)
from spark_gui.services.bootstrap import bootstrap_default_services
from spark_gui.services.chat import ChatManager
from spark_gui.services.clipboard import ClipboardBridge, ClipboardUnavailable
from spark_gui.services.message_events import MessageEventManager
from spark_gui.services.notifications import AlertManager, Notifications
from spark_gui.services.preferences import PreferenceManager
from spark_gui.services.search import SearchManager
from spark_gui.services.service_locator import ServiceLocator, get_service_locator
from spark_gui.services.session import SessionManager, XmppConnection
from spark_gui.services.sound import SoundManager, SoundPlayer
from spark_gui.services.transfer import TransferManager
from spark_gui.services import user_storage
from spark_gui.services.users import UserManager
from spark_gui.services.vcard import VCardManager

_LOGGER = logging.getLogger(__name__)


class SparkManager:
    """Typed accessors over a :class:`ServiceLocator` populated by bootstrap."""

    def __init__(self, locator: ServiceLocator, settings: Optional[Settings] = None) -> None:
        self._locator = locator
        self._settings = settings or get_settings()

    @classmethod
    def build(
        cls,
        settings: Optional[Settings] = None,
        *,
        locator: Optional[ServiceLocator] = None,
        sound_player: Optional[SoundPlayer] = None,
        clipboard: Optional[ClipboardBridge] = None,
    ) -> "SparkManager":
        """Create a manager over a freshly bootstrapped locator."""

        settings = settings or get_settings()
        locator = bootstrap_default_services(
            locator if locator is not None else ServiceLocator(),
            settings=settings,
            sound_player=sound_player,
            clipboard=clipboard,
        )
        return cls(locator, settings)

    @property
    def locator(self) -> ServiceLocator:
        return self._locator

    @property
    def settings(self) -> Settings:
        return self._settings

    # ------------------------------------------------------------------
    # Managers
    # ------------------------------------------------------------------
    def get_session_manager(self) -> SessionManager:
        return self._locator.require(SessionManager)

    def get_sound_manager(self) -> SoundManager:
        return self._locator.require(SoundManager)

    def get_preference_manager(self) -> PreferenceManager:
        return self._locator.require(PreferenceManager)

    def get_user_manager(self) -> UserManager:
        """Return the manager tracking participants of the current chats."""
        return self._locator.require(UserManager)

    def get_chat_manager(self) -> ChatManager:
        return self._locator.require(ChatManager)

    def get_notifications_engine(self) -> Notifications:
        return self._locator.require(Notifications)

    def get_vcard_manager(self) -> VCardManager:
        return self._locator.require(VCardManager)

    def get_alert_manager(self) -> AlertManager:
        return self._locator.require(AlertManager)

    def get_search_manager(self) -> SearchManager:
        return self._locator.require(SearchManager)

    def get_transfer_manager(self) -> TransferManager:
        return self._locator.require(TransferManager)

    def get_message_event_manager(self) -> MessageEventManager:
        """Return the message event manager bound to the live connection.

        Raises:
            SessionNotEstablishedError: If no session exists yet. The slot
                stays unset and can be built once the session is up.
        """
        return self._locator.require(MessageEventManager)

    # ------------------------------------------------------------------
    # Session-derived state
    # ------------------------------------------------------------------
    def get_connection(self) -> XmppConnection:
        """Return the session's live connection without caching it."""
        return self.get_session_manager().require_connection("get_connection()")

    def get_user_directory(self) -> Path:
        """Return ``<home>/Spark/user/<bare address>``, creating it if missing.

        Raises:
            SessionNotEstablishedError: If there is no signed-in identity.
            StorageUnavailable: If the directory cannot be created.
        """
        identity = self.get_session_manager().require_bare_address("get_user_directory()")
        return user_storage.resolve_user_storage_root(
            self._settings.home,
            identity,
            namespace=self._settings.product_namespace,
        )

    resolve_user_storage_root = get_user_directory

    def load_user_preferences(self) -> PreferenceManager:
        preferences = self.get_preference_manager()
        preferences.load(self.get_user_directory())
        return preferences

    def save_user_preferences(self) -> Path:
        return self.get_preference_manager().save(self.get_user_directory())

    # ------------------------------------------------------------------
    # Clipboard
    # ------------------------------------------------------------------
    def read_clipboard_text(self) -> Optional[str]:
        """Return clipboard text, or ``None`` when there is none or access fails."""

        try:
            return self._locator.require(ClipboardBridge).read_text()
        except ClipboardUnavailable as exc:
            log_constant(self._session_logger(), LOG_CLIPBOARD_READ_FAILED, message=str(exc))
            return None

    def write_clipboard_text(self, text: str) -> None:
        """Place ``text`` on the clipboard; failures are logged, not raised."""

        try:
            self._locator.require(ClipboardBridge).write_text(text)
        except ClipboardUnavailable as exc:
            log_constant(self._session_logger(), LOG_CLIPBOARD_WRITE_FAILED, message=str(exc))

    def _session_logger(self) -> CorrelationIdAdapter:
        identity = self.get_session_manager().bare_address
        return CorrelationIdAdapter(_LOGGER, {"session_id": identity or "unknown"})

    # ------------------------------------------------------------------
    @staticmethod
    def format_date(moment: datetime) -> str:
        return format_date_seconds(moment)


_SPARK_MANAGER: SparkManager | None = None
_SPARK_MANAGER_LOCK = RLock()


def get_spark_manager() -> SparkManager:
    """Return the process-wide manager, bootstrapping the shared locator once."""

    global _SPARK_MANAGER
    if _SPARK_MANAGER is None:
        with _SPARK_MANAGER_LOCK:
            if _SPARK_MANAGER is None:
                settings = get_settings()
                locator = bootstrap_default_services(get_service_locator(), settings=settings)
                _SPARK_MANAGER = SparkManager(locator, settings)
    return _SPARK_MANAGER


__all__ = ["SparkManager", "get_spark_manager"]
