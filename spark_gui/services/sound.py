from __future__ import annotations

"""Named sound registry; playback is delegated to an injectable player."""

import logging
from pathlib import Path
from threading import RLock
from typing import Callable, Dict, Optional

from spark_gui.logging_config.helpers import LogConstantMixin
from spark_gui.logging_config.log_constants import (
    LOG_SOUND_PLAYBACK_FAILED,
    LOG_SOUND_PLAYBACK_SKIPPED,
)

SoundPlayer = Callable[[Path], None]


class SoundManager(LogConstantMixin):
    """Maps event names (``incoming_message`` …) to sound files."""

    def __init__(self, player: Optional[SoundPlayer] = None, *, enabled: bool = True) -> None:
        self._logger = logging.getLogger(__name__)
        self._lock = RLock()
        self._sounds: Dict[str, Path] = {}
        self._player = player
        self._enabled = enabled

    def register_sound(self, name: str, path: Path | str) -> None:
        with self._lock:
            self._sounds[name] = Path(path).expanduser()

    def unregister_sound(self, name: str) -> None:
        with self._lock:
            self._sounds.pop(name, None)

    def sound_path(self, name: str) -> Optional[Path]:
        with self._lock:
            return self._sounds.get(name)

    def set_player(self, player: Optional[SoundPlayer]) -> None:
        with self._lock:
            self._player = player

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = bool(enabled)

    def play(self, name: str) -> bool:
        """Play the sound registered under ``name``; return whether it was handed off."""

        with self._lock:
            path = self._sounds.get(name)
            player = self._player
        if not self._enabled or path is None or player is None:
            reason = "disabled" if not self._enabled else ("unknown" if path is None else "no_player")
            self.log_constant(LOG_SOUND_PLAYBACK_SKIPPED, message=f"sound={name} reason={reason}")
            return False
        try:
            player(path)
        except Exception as exc:
            self.log_constant(LOG_SOUND_PLAYBACK_FAILED, message=f"sound={name}", exc_info=exc)
            return False
        return True


__all__ = ["SoundManager", "SoundPlayer"]
