from __future__ import annotations

"""Creation, lookup and removal of chat rooms."""

from dataclasses import dataclass, field
from datetime import datetime
from threading import RLock
from typing import Callable, Dict, Optional

from spark_gui.services.listeners import ListenerSet
from spark_gui.services.session import bare_address

RoomListener = Callable[[str, "ChatRoom"], None]


@dataclass(slots=True)
class ChatRoom:
    """A one-to-one or group conversation known to the client."""

    room_id: str
    title: str
    group: bool = False
    opened_at: datetime = field(default_factory=datetime.now)
    transcript: list[tuple[datetime, str, str]] = field(default_factory=list)

    def append(self, sender: str, body: str, *, at: Optional[datetime] = None) -> None:
        self.transcript.append((at or datetime.now(), sender, body))


class ChatManager:
    """Owns open chat rooms and tells listeners when they open or close.

    Listeners receive ``(event, room)`` with ``event`` one of ``"opened"``,
    ``"closed"``.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._rooms: Dict[str, ChatRoom] = {}
        self._listeners: ListenerSet[RoomListener] = ListenerSet("chat_rooms")

    def create_chat_room(self, address: str, title: Optional[str] = None) -> ChatRoom:
        """Return the room for ``address``, opening it if needed."""

        room_id = bare_address(address)
        with self._lock:
            room = self._rooms.get(room_id)
            if room is not None:
                return room
            room = ChatRoom(room_id=room_id, title=title or room_id.split("@", 1)[0])
            self._rooms[room_id] = room
        self._listeners.emit("opened", room)
        return room

    def create_group_chat_room(self, room_address: str, title: Optional[str] = None) -> ChatRoom:
        room_id = bare_address(room_address)
        with self._lock:
            room = self._rooms.get(room_id)
            if room is not None:
                return room
            room = ChatRoom(room_id=room_id, title=title or room_id, group=True)
            self._rooms[room_id] = room
        self._listeners.emit("opened", room)
        return room

    def get_chat_room(self, address: str) -> Optional[ChatRoom]:
        with self._lock:
            return self._rooms.get(bare_address(address))

    def remove_chat_room(self, address: str) -> Optional[ChatRoom]:
        with self._lock:
            room = self._rooms.pop(bare_address(address), None)
        if room is not None:
            self._listeners.emit("closed", room)
        return room

    def chat_rooms(self) -> tuple[ChatRoom, ...]:
        with self._lock:
            return tuple(self._rooms.values())

    def add_room_listener(self, listener: RoomListener) -> None:
        self._listeners.add(listener)

    def remove_room_listener(self, listener: RoomListener) -> None:
        self._listeners.remove(listener)


__all__ = ["ChatManager", "ChatRoom", "RoomListener"]
