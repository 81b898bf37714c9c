from __future__ import annotations

"""Cached user profiles (vCards) keyed by bare address."""

from dataclasses import dataclass, field
import logging
from threading import RLock
from typing import Callable, Dict, Optional

from spark_gui.logging_config.helpers import LogConstantMixin
from spark_gui.logging_config.log_constants import LOG_VCARD_LOAD_FAILED
from spark_gui.services.session import bare_address


@dataclass(slots=True)
class VCard:
    address: str
    nickname: Optional[str] = None
    full_name: Optional[str] = None
    email: Optional[str] = None
    organization: Optional[str] = None
    extras: Dict[str, str] = field(default_factory=dict)

    @property
    def empty(self) -> bool:
        return not any((self.nickname, self.full_name, self.email, self.organization, self.extras))


VCardLoader = Callable[[str], Optional[VCard]]


class VCardManager(LogConstantMixin):
    """Looks profiles up through ``loader`` and caches the answers.

    A failing loader yields an empty profile that is *not* cached, so the next
    lookup retries.
    """

    def __init__(self, loader: Optional[VCardLoader] = None) -> None:
        self._logger = logging.getLogger(__name__)
        self._lock = RLock()
        self._loader = loader
        self._cache: Dict[str, VCard] = {}
        self._personal: Optional[VCard] = None

    def set_loader(self, loader: Optional[VCardLoader]) -> None:
        with self._lock:
            self._loader = loader

    def get_vcard(self, address: str, *, refresh: bool = False) -> VCard:
        bare = bare_address(address)
        with self._lock:
            cached = self._cache.get(bare)
            loader = self._loader
        if cached is not None and not refresh:
            return cached
        if loader is None:
            return VCard(address=bare)
        try:
            card = loader(bare)
        except Exception as exc:
            self.log_constant(LOG_VCARD_LOAD_FAILED, message=f"address={bare}", exc_info=exc)
            return VCard(address=bare)
        if card is None:
            card = VCard(address=bare)
        with self._lock:
            self._cache[bare] = card
        return card

    def cached(self, address: str) -> Optional[VCard]:
        with self._lock:
            return self._cache.get(bare_address(address))

    def add_vcard(self, card: VCard) -> None:
        with self._lock:
            self._cache[bare_address(card.address)] = card

    def invalidate(self, address: str) -> None:
        with self._lock:
            self._cache.pop(bare_address(address), None)

    @property
    def personal_vcard(self) -> Optional[VCard]:
        with self._lock:
            return self._personal

    def set_personal_vcard(self, card: VCard) -> None:
        with self._lock:
            self._personal = card
            self._cache[bare_address(card.address)] = card


__all__ = ["VCard", "VCardLoader", "VCardManager"]
