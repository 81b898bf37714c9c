from __future__ import annotations

"""Registry of pluggable search services."""

from threading import RLock
from typing import Dict, Iterable, List, Optional, Protocol, runtime_checkable


@runtime_checkable
class Searchable(Protocol):
    """A search provider contributed by the client or a plugin."""

    name: str

    def search(self, query: str) -> Iterable[str]: ...


class SearchManager:
    """Keeps search services in registration order and tracks the default one."""

    def __init__(self) -> None:
        self._lock = RLock()
        self._services: Dict[str, Searchable] = {}
        self._default: Optional[str] = None

    def add_search_service(self, service: Searchable, *, default: bool = False) -> None:
        with self._lock:
            self._services[service.name] = service
            if default or self._default is None:
                self._default = service.name

    def remove_search_service(self, name: str) -> None:
        with self._lock:
            self._services.pop(name, None)
            if self._default == name:
                self._default = next(iter(self._services), None)

    def search_services(self) -> tuple[Searchable, ...]:
        with self._lock:
            return tuple(self._services.values())

    def get_search_service(self, name: str) -> Optional[Searchable]:
        with self._lock:
            return self._services.get(name)

    @property
    def default_service(self) -> Optional[Searchable]:
        with self._lock:
            return self._services.get(self._default) if self._default else None

    def set_default_service(self, name: str) -> None:
        with self._lock:
            if name not in self._services:
                raise KeyError(f"Unknown search service '{name}'")
            self._default = name

    def search(self, query: str, *, service: Optional[str] = None) -> List[str]:
        """Run ``query`` against ``service`` (or the default) and collect results."""

        target = self.get_search_service(service) if service else self.default_service
        if target is None:
            raise KeyError(f"No search service available for '{service or 'default'}'")
        return list(target.search(query))


__all__ = ["SearchManager", "Searchable"]
