"""Behaviour of the managers served by the registry."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable

import pytest

from spark_gui.logging_config.log_constants import (
    LOG_LISTENER_FAILED,
    LOG_PREFERENCES_INVALID,
    LOG_TRANSFER_REJECTED,
)
from spark_gui.services.chat import ChatManager
from spark_gui.services.message_events import MessageEvent, MessageEventKind, MessageEventManager
from spark_gui.services.notifications import AlertManager, Alerter, Notifications
from spark_gui.services.preferences import PreferenceManager
from spark_gui.services.search import SearchManager
from spark_gui.services.session import SessionManager, bare_address
from spark_gui.services.sound import SoundManager
from spark_gui.services.transfer import TransferManager, TransferRequest, TransferStatus
from spark_gui.services.users import UserManager
from spark_gui.services.vcard import VCard, VCardManager


def _collect_log_codes(caplog: pytest.LogCaptureFixture) -> set[str]:
    return {
        record.__dict__["log_code"]
        for record in caplog.records
        if "log_code" in record.__dict__
    }


class _Connection:
    user = "alice@example.com/Spark"

    def __init__(self) -> None:
        self.sent: list[Any] = []

    def is_connected(self) -> bool:
        return True

    def send(self, packet: Any) -> None:
        self.sent.append(packet)


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------
def test_bare_address_strips_resource() -> None:
    assert bare_address("alice@example.com/Spark") == "alice@example.com"
    assert bare_address("alice@example.com") == "alice@example.com"


def test_session_lifecycle_notifies_listeners() -> None:
    session = SessionManager()
    events: list[tuple[str, str | None]] = []
    session.add_listener(lambda event, address: events.append((event, address)))

    assert session.is_established is False
    session.initialize_session(_Connection(), "alice@example.com/Spark")

    assert session.is_established is True
    assert session.bare_address == "alice@example.com"
    assert session.username == "alice"
    assert session.server_address == "example.com"

    session.close_session()
    session.close_session()

    assert session.connection is None
    assert events == [("established", "alice@example.com"), ("closed", "alice@example.com")]


def test_session_rejects_empty_identity() -> None:
    with pytest.raises(ValueError):
        SessionManager().initialize_session(_Connection(), "  ")


def test_failing_listener_does_not_stop_others(caplog: pytest.LogCaptureFixture) -> None:
    session = SessionManager()
    seen: list[str] = []

    def broken(event: str, address: str | None) -> None:
        raise RuntimeError("plugin bug")

    session.add_listener(broken)
    session.add_listener(lambda event, address: seen.append(event))
    caplog.set_level(logging.WARNING, logger="spark_gui")

    session.initialize_session(_Connection(), "alice@example.com")

    assert seen == ["established"]
    assert LOG_LISTENER_FAILED.code in _collect_log_codes(caplog)


# ---------------------------------------------------------------------------
# Preferences
# ---------------------------------------------------------------------------
def test_preferences_overlay_defaults() -> None:
    preferences = PreferenceManager({"chat": {"show_timestamps": True}})
    changes: list[tuple[str, str, Any]] = []
    preferences.add_listener(lambda ns, key, value: changes.append((ns, key, value)))

    assert preferences.get("chat", "show_timestamps") is True
    preferences.set("chat", "show_timestamps", False)
    preferences.set("chat", "show_timestamps", False)

    assert preferences.get("chat", "show_timestamps") is False
    assert changes == [("chat", "show_timestamps", False)]

    preferences.reset("chat", "show_timestamps")
    assert preferences.get("chat", "show_timestamps") is True


def test_packaged_defaults_are_loaded() -> None:
    preferences = PreferenceManager()

    assert "chat" in preferences.namespaces()
    assert preferences.get("search", "default_service") == "users"


def test_plugin_namespace_defaults() -> None:
    preferences = PreferenceManager({})
    preferences.register_namespace("plugin.weather", {"units": "metric"})

    assert preferences.get("plugin.weather", "units") == "metric"
    assert preferences.snapshot() == {"plugin.weather": {"units": "metric"}}


def test_preferences_save_only_user_values(tmp_path: Path) -> None:
    preferences = PreferenceManager({"chat": {"spell_check": True}})
    preferences.set("sound", "enabled", False)

    path = preferences.save(tmp_path)

    assert "spell_check" not in path.read_text(encoding="utf-8")
    restored = PreferenceManager({"chat": {"spell_check": True}})
    restored.load(tmp_path)
    assert restored.get("sound", "enabled") is False
    assert restored.get("chat", "spell_check") is True


def test_invalid_preferences_file_falls_back_to_defaults(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    (tmp_path / "preferences.yaml").write_text("- not\n- a mapping\n", encoding="utf-8")
    preferences = PreferenceManager({"chat": {"spell_check": True}})
    preferences.set("chat", "spell_check", False)
    caplog.set_level(logging.WARNING, logger="spark_gui")

    preferences.load(tmp_path)

    assert preferences.get("chat", "spell_check") is True
    assert LOG_PREFERENCES_INVALID.code in _collect_log_codes(caplog)


def test_invalid_file_does_not_leak_previous_user_values(tmp_path: Path) -> None:
    alice = tmp_path / "alice"
    bob = tmp_path / "bob"
    alice.mkdir()
    bob.mkdir()
    (alice / "preferences.yaml").write_text("chat:\n  secret: alice\n", encoding="utf-8")
    (bob / "preferences.yaml").write_text("- just\n- a list\n", encoding="utf-8")
    preferences = PreferenceManager({"chat": {"spell_check": True}})

    preferences.load(alice)
    assert preferences.get("chat", "secret") == "alice"
    preferences.load(bob)

    assert preferences.get("chat", "secret") is None
    assert preferences.snapshot() == {"chat": {"spell_check": True}}


def test_corrupt_preferences_file_is_logged_not_raised(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    (tmp_path / "preferences.yaml").write_text("chat: {unclosed", encoding="utf-8")
    preferences = PreferenceManager({"chat": {"spell_check": True}})
    preferences.set("chat", "spell_check", False)
    caplog.set_level(logging.WARNING, logger="spark_gui")

    preferences.load(tmp_path)

    assert preferences.get("chat", "spell_check") is True
    invalid = [r for r in caplog.records if r.__dict__.get("log_code") == LOG_PREFERENCES_INVALID.code]
    assert invalid and invalid[-1].exc_info is not None


# ---------------------------------------------------------------------------
# Sound
# ---------------------------------------------------------------------------
def test_sound_manager_skips_unknown_and_muted() -> None:
    played: list[Path] = []
    sounds = SoundManager(played.append)
    sounds.register_sound("ring", "ring.wav")

    assert sounds.play("missing") is False
    sounds.set_enabled(False)
    assert sounds.play("ring") is False
    sounds.set_enabled(True)
    assert sounds.play("ring") is True
    assert played == [Path("ring.wav")]


def test_sound_player_failure_is_reported_as_false() -> None:
    def broken(_: Path) -> None:
        raise OSError("no audio device")

    sounds = SoundManager(broken)
    sounds.register_sound("ring", "ring.wav")

    assert sounds.play("ring") is False


# ---------------------------------------------------------------------------
# Users and chats
# ---------------------------------------------------------------------------
def test_user_manager_tracks_participants() -> None:
    users = UserManager()
    users.add_participant("room@conference", "bob@example.com/phone", "Bobby")
    users.add_participant("room@conference", "carol@example.com")

    assert users.participants("room@conference") == ("bob@example.com", "carol@example.com")
    assert users.nickname("bob@example.com/laptop") == "Bobby"
    assert users.nickname("carol@example.com") == "carol"
    assert users.rooms_with("bob@example.com") == ("room@conference",)

    users.remove_participant("room@conference", "bob@example.com")
    users.remove_participant("room@conference", "carol@example.com")
    assert users.participants("room@conference") == ()


def test_chat_manager_reuses_rooms() -> None:
    chats = ChatManager()
    events: list[tuple[str, str]] = []
    chats.add_room_listener(lambda event, room: events.append((event, room.room_id)))

    room = chats.create_chat_room("bob@example.com/phone")
    assert chats.create_chat_room("bob@example.com") is room
    assert room.title == "bob"

    room.append("bob@example.com", "hi")
    assert room.transcript[0][1:] == ("bob@example.com", "hi")

    group = chats.create_group_chat_room("team@conference.example.com", "Team")
    assert group.group is True
    assert len(chats.chat_rooms()) == 2

    assert chats.remove_chat_room("bob@example.com") is room
    assert chats.get_chat_room("bob@example.com") is None
    assert events == [
        ("opened", "bob@example.com"),
        ("opened", "team@conference.example.com"),
        ("closed", "bob@example.com"),
    ]


# ---------------------------------------------------------------------------
# Notifications and alerts
# ---------------------------------------------------------------------------
def test_notifications_keep_bounded_history() -> None:
    engine = Notifications(history_size=2)
    received: list[str] = []
    engine.add_listener(lambda n: received.append(n.title))

    for index in range(3):
        engine.notify(f"t{index}", "body")

    assert [n.title for n in engine.history()] == ["t1", "t2"]
    assert received == ["t0", "t1", "t2"]


class _RecordingAlerter(Alerter):
    def __init__(self) -> None:
        self.calls: list[tuple[str, object]] = []

    def flash_window(self, window: object) -> None:
        self.calls.append(("flash", window))

    def stop_flashing(self, window: object) -> None:
        self.calls.append(("stop", window))


def test_alert_manager_routes_to_alerter() -> None:
    alerts = AlertManager()
    window = object()
    assert alerts.flash_window(window) is False

    alerter = _RecordingAlerter()
    alerts.add_alerter(alerter)

    assert alerts.flash_window(window) is True
    assert alerts.is_flashing(window) is True
    assert alerts.stop_flashing(window) is True
    assert alerts.is_flashing(window) is False
    assert alerter.calls == [("flash", window), ("stop", window)]


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------
def test_vcard_manager_caches_loader_results() -> None:
    lookups: list[str] = []

    def loader(address: str) -> VCard:
        lookups.append(address)
        return VCard(address=address, nickname="Bob")

    cards = VCardManager(loader)

    first = cards.get_vcard("bob@example.com/phone")
    second = cards.get_vcard("bob@example.com")

    assert first is second
    assert first.nickname == "Bob"
    assert lookups == ["bob@example.com"]

    cards.get_vcard("bob@example.com", refresh=True)
    assert lookups == ["bob@example.com", "bob@example.com"]


def test_vcard_loader_failure_is_not_cached() -> None:
    attempts: list[str] = []

    def flaky(address: str) -> VCard:
        attempts.append(address)
        if len(attempts) == 1:
            raise TimeoutError("server slow")
        return VCard(address=address, full_name="Bob Smith")

    cards = VCardManager(flaky)

    assert cards.get_vcard("bob@example.com").empty is True
    assert cards.cached("bob@example.com") is None
    assert cards.get_vcard("bob@example.com").full_name == "Bob Smith"


# ---------------------------------------------------------------------------
# Message events
# ---------------------------------------------------------------------------
def test_message_events_dispatch_incoming_packets() -> None:
    events = MessageEventManager(_Connection())
    received: list[MessageEvent] = []
    events.add_listener(received.append)

    packet = {"type": "message_event", "from": "bob@example.com", "to": "alice@example.com", "event": "delivered", "id": "m7"}

    assert events.handle_packet({"type": "message", "body": "hi"}) is None
    event = events.handle_packet(packet)

    assert event is not None
    assert event.kind is MessageEventKind.DELIVERED
    assert received == [event]
    assert MessageEvent.from_packet(event.to_packet()) == event


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------
class _StaticSearch:
    def __init__(self, name: str, results: Iterable[str]) -> None:
        self.name = name
        self._results = list(results)

    def search(self, query: str) -> Iterable[str]:
        return [item for item in self._results if query in item]


def test_search_manager_default_selection() -> None:
    search = SearchManager()
    with pytest.raises(KeyError):
        search.search("bob")

    search.add_search_service(_StaticSearch("users", ["bob@example.com", "carol@example.com"]))
    search.add_search_service(_StaticSearch("rooms", ["bob-fans@conference"]))

    assert search.default_service is not None and search.default_service.name == "users"
    assert search.search("bob") == ["bob@example.com"]
    assert search.search("bob", service="rooms") == ["bob-fans@conference"]

    search.set_default_service("rooms")
    search.remove_search_service("rooms")
    assert search.default_service is not None and search.default_service.name == "users"
    with pytest.raises(KeyError):
        search.set_default_service("rooms")


# ---------------------------------------------------------------------------
# File transfer
# ---------------------------------------------------------------------------
def _request(stream_id: str = "s1", name: str = "report.pdf") -> TransferRequest:
    return TransferRequest(stream_id=stream_id, requestor="bob@example.com/phone", file_name=name, file_size=1024)


def test_transfer_interceptor_rejects(caplog: pytest.LogCaptureFixture) -> None:
    transfers = TransferManager()
    presented: list[TransferRequest] = []
    transfers.add_transfer_listener(presented.append)
    transfers.add_transfer_interceptor(lambda request: request.file_name.endswith(".exe"))
    caplog.set_level(logging.INFO, logger="spark_gui")

    blocked = _request("s1", "setup.exe")
    assert transfers.handle_incoming(blocked) is False
    assert blocked.status is TransferStatus.REJECTED
    assert LOG_TRANSFER_REJECTED.code in _collect_log_codes(caplog)

    allowed = _request("s2", "report.pdf")
    assert transfers.handle_incoming(allowed) is True
    assert presented == [allowed]
    assert transfers.pending() == (allowed,)


def test_transfer_accept_uses_download_directory(tmp_path: Path) -> None:
    transfers = TransferManager()
    transfers.handle_incoming(_request())

    with pytest.raises(ValueError):
        transfers.accept("s1")

    transfers.set_download_directory(tmp_path)
    accepted = transfers.accept("s1")

    assert accepted.status is TransferStatus.ACCEPTED
    assert accepted.destination == tmp_path / "report.pdf"
    assert transfers.pending() == ()
    with pytest.raises(KeyError):
        transfers.reject("unknown")
