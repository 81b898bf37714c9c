from __future__ import annotations

"""Tracks the participants of the chats that are currently open."""

from threading import RLock
from typing import Dict, Optional

from spark_gui.services.session import bare_address


class UserManager:
    """Room → participant address → nickname bookkeeping."""

    def __init__(self) -> None:
        self._lock = RLock()
        self._rooms: Dict[str, Dict[str, str]] = {}

    def add_participant(self, room: str, address: str, nickname: Optional[str] = None) -> None:
        bare = bare_address(address)
        with self._lock:
            self._rooms.setdefault(room, {})[bare] = nickname or bare.split("@", 1)[0]

    def remove_participant(self, room: str, address: str) -> None:
        bare = bare_address(address)
        with self._lock:
            participants = self._rooms.get(room)
            if participants is None:
                return
            participants.pop(bare, None)
            if not participants:
                del self._rooms[room]

    def remove_room(self, room: str) -> None:
        with self._lock:
            self._rooms.pop(room, None)

    def participants(self, room: str) -> tuple[str, ...]:
        with self._lock:
            return tuple(sorted(self._rooms.get(room, {})))

    def nickname(self, address: str) -> Optional[str]:
        bare = bare_address(address)
        with self._lock:
            for participants in self._rooms.values():
                if bare in participants:
                    return participants[bare]
        return None

    def rooms_with(self, address: str) -> tuple[str, ...]:
        bare = bare_address(address)
        with self._lock:
            return tuple(sorted(room for room, members in self._rooms.items() if bare in members))


__all__ = ["UserManager"]
