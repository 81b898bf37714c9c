from __future__ import annotations

"""Helpers to bootstrap shared services for the application."""

import logging
from pathlib import Path
from typing import Optional

from spark_gui.config.settings import Settings, get_settings
from spark_gui.logging_config.helpers import log_constant
from spark_gui.logging_config.log_constants import LOG_REGISTRY_BOOTSTRAPPED
from spark_gui.services.chat import ChatManager
from spark_gui.services.clipboard import ClipboardBridge
from spark_gui.services.message_events import MessageEventManager
from spark_gui.services.notifications import AlertManager, Notifications
from spark_gui.services.preferences import PreferenceManager
from spark_gui.services.search import SearchManager
from spark_gui.services.service_locator import ServiceLocator, get_service_locator
from spark_gui.services.session import SessionManager
from spark_gui.services.sound import SoundManager, SoundPlayer
from spark_gui.services.transfer import TransferManager
from spark_gui.services.users import UserManager
from spark_gui.services.vcard import VCardManager

_LOGGER = logging.getLogger(__name__)

# Preference keys in the ``sound`` namespace that name a sound file
_SOUND_PREFERENCE_KEYS = ("incoming_message", "outgoing_message", "presence_change")


def _build_sound_manager(locator: ServiceLocator, settings: Settings, player: Optional[SoundPlayer]) -> SoundManager:
    preferences = locator.require(PreferenceManager)
    enabled = settings.sounds_enabled and bool(preferences.get("sound", "enabled", True))
    sounds = SoundManager(player, enabled=enabled)
    for name in _SOUND_PREFERENCE_KEYS:
        path = preferences.get("sound", name)
        if path:
            sounds.register_sound(name, path)
    return sounds


def _build_transfer_manager(locator: ServiceLocator) -> TransferManager:
    preferences = locator.require(PreferenceManager)
    directory = preferences.get("transfer", "download_directory")
    return TransferManager(Path(directory).expanduser() if directory else None)


def _build_message_event_manager(locator: ServiceLocator) -> MessageEventManager:
    session = locator.require(SessionManager)
    return MessageEventManager(session.require_connection("MessageEventManager"))


def bootstrap_default_services(
    locator: Optional[ServiceLocator] = None,
    *,
    settings: Optional[Settings] = None,
    sound_player: Optional[SoundPlayer] = None,
    clipboard: Optional[ClipboardBridge] = None,
) -> ServiceLocator:
    """Register the default service set into ``locator`` (the shared one by default).

    Slots are declared in dependency order and built lazily. Only the
    clipboard bridge is registered eagerly.
    """

    locator = locator if locator is not None else get_service_locator()
    settings = settings or get_settings()

    locator.register_factory(SessionManager, lambda _: SessionManager())
    locator.register_factory(PreferenceManager, lambda _: PreferenceManager())
    locator.register_factory(
        SoundManager,
        lambda loc: _build_sound_manager(loc, settings, sound_player),
        depends_on=(PreferenceManager,),
    )
    locator.register_factory(UserManager, lambda _: UserManager())
    locator.register_factory(ChatManager, lambda _: ChatManager())
    locator.register_factory(Notifications, lambda _: Notifications())
    locator.register_factory(VCardManager, lambda _: VCardManager())
    locator.register_factory(AlertManager, lambda _: AlertManager())
    locator.register_factory(SearchManager, lambda _: SearchManager())
    locator.register_factory(TransferManager, _build_transfer_manager, depends_on=(PreferenceManager,))
    locator.register_factory(
        MessageEventManager,
        _build_message_event_manager,
        depends_on=(SessionManager,),
    )
    locator.register(ClipboardBridge, clipboard or ClipboardBridge())

    log_constant(_LOGGER, LOG_REGISTRY_BOOTSTRAPPED, extra={"services": len(locator.keys())})
    return locator


__all__ = ["bootstrap_default_services"]
