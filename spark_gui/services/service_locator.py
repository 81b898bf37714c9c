from __future__ import annotations

"""In-process registry of lazily constructed singleton services."""

from dataclasses import dataclass, field
import logging
from threading import RLock
from typing import Any, Callable, Dict, Optional, Type, TypeVar

from spark_gui.constants import (
    SERVICE_ALREADY_REGISTERED_ERROR,
    SERVICE_DEPENDENCY_UNKNOWN_ERROR,
    SERVICE_NOT_REGISTERED_ERROR,
)
from spark_gui.logging_config.helpers import log_constant
from spark_gui.logging_config.log_constants import (
    LOG_SERVICE_CONSTRUCTED,
    LOG_SERVICE_CONSTRUCTION_FAILED,
    LOG_SERVICE_DEPENDENCY_NOT_READY,
    LOG_SERVICE_FACTORY_REGISTERED,
    LOG_SERVICE_REGISTERED,
)

_LOGGER = logging.getLogger(__name__)

ServiceT = TypeVar("ServiceT")
ServiceKey = Type[Any] | str
ServiceFactory = Callable[["ServiceLocator"], Any]


class ServiceRegistrationError(RuntimeError):
    """Raised when a slot is registered twice or wired out of order."""


class ServiceNotRegisteredError(KeyError):
    """Raised by :meth:`ServiceLocator.require` for unknown keys."""


class DependencyNotReady(RuntimeError):
    """Raised when a service is built before the state it depends on exists.

    This is a programming error: callers must establish the dependency (for
    example log in through the session manager) before asking for services
    bound to it. The slot being constructed stays unset, so a later call made
    in the right order succeeds.
    """


def _describe(key: ServiceKey) -> str:
    return key if isinstance(key, str) else getattr(key, "__name__", repr(key))


@dataclass(slots=True)
class ServiceRegistration:
    """Record describing one singleton slot."""

    factory: Optional[ServiceFactory] = None
    depends_on: tuple[ServiceKey, ...] = ()
    instance: Any = None
    ready: bool = False
    lock: RLock = field(default_factory=RLock, repr=False)


class ServiceLocator:
    """In-process registry for shared services.

    Each key owns a single slot. A slot is either populated eagerly through
    :meth:`register` or declared with a factory through
    :meth:`register_factory`, in which case the factory runs on the first
    lookup. Once populated a slot never changes: every later lookup returns the
    same instance.

    Factories receive the locator and may resolve the keys they declared in
    ``depends_on``. Dependencies must be registered first, so the slot table is
    always in topological order and construction can never cycle.
    """

    def __init__(self) -> None:
        self._services: Dict[ServiceKey, ServiceRegistration] = {}
        self._lock = RLock()

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def register(self, key: Type[ServiceT] | str, instance: ServiceT) -> None:
        """Register ``instance`` under ``key``.

        Args:
            key: Either the service class or an arbitrary string identifier.
            instance: Concrete service implementation.

        Raises:
            ServiceRegistrationError: If ``key`` already owns a slot.
        """

        with self._lock:
            if key in self._services:
                raise ServiceRegistrationError(
                    SERVICE_ALREADY_REGISTERED_ERROR.format(key=_describe(key))
                )
            self._services[key] = ServiceRegistration(instance=instance, ready=True)
        log_constant(_LOGGER, LOG_SERVICE_REGISTERED, extra={"service": _describe(key)})

    def register_factory(
        self,
        key: Type[ServiceT] | str,
        factory: Callable[["ServiceLocator"], ServiceT],
        *,
        depends_on: tuple[ServiceKey, ...] = (),
    ) -> None:
        """Declare a lazily constructed slot for ``key``.

        Args:
            key: Either the service class or an arbitrary string identifier.
            factory: Called with this locator on first access.
            depends_on: Keys resolved before ``factory`` runs. Each must
                already be registered.
        """

        if not callable(factory):
            raise ServiceRegistrationError(f"Factory for {_describe(key)} is not callable")
        with self._lock:
            if key in self._services:
                raise ServiceRegistrationError(
                    SERVICE_ALREADY_REGISTERED_ERROR.format(key=_describe(key))
                )
            for dependency in depends_on:
                if dependency not in self._services:
                    raise ServiceRegistrationError(
                        SERVICE_DEPENDENCY_UNKNOWN_ERROR.format(
                            key=_describe(key), dependency=_describe(dependency)
                        )
                    )
            self._services[key] = ServiceRegistration(factory=factory, depends_on=tuple(depends_on))
        log_constant(
            _LOGGER,
            LOG_SERVICE_FACTORY_REGISTERED,
            extra={"service": _describe(key), "depends_on": [_describe(d) for d in depends_on]},
        )

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def resolve(self, key: Type[ServiceT] | str) -> Optional[ServiceT]:
        """Return the service for ``key``, constructing it on first access.

        Returns ``None`` if the key has not been registered."""

        with self._lock:
            registration = self._services.get(key)
        if registration is None:
            return None
        if registration.ready:
            return registration.instance  # type: ignore[return-value]
        return self._construct(key, registration)

    def require(self, key: Type[ServiceT] | str) -> ServiceT:
        """Resolve a service and raise ``ServiceNotRegisteredError`` if it is missing."""

        with self._lock:
            known = key in self._services
        if not known:
            raise ServiceNotRegisteredError(SERVICE_NOT_REGISTERED_ERROR.format(key=_describe(key)))
        return self.resolve(key)  # type: ignore[return-value]

    def is_constructed(self, key: ServiceKey) -> bool:
        with self._lock:
            registration = self._services.get(key)
        return registration is not None and registration.ready

    def keys(self) -> tuple[ServiceKey, ...]:
        with self._lock:
            return tuple(self._services.keys())

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._services

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    def _construct(self, key: ServiceKey, registration: ServiceRegistration) -> Any:
        # Per-slot lock: concurrent first calls build exactly one instance,
        # while unrelated slots construct in parallel.
        with registration.lock:
            if registration.ready:
                return registration.instance
            if registration.factory is None:
                raise ServiceRegistrationError(f"Slot {_describe(key)} has neither an instance nor a factory")
            for dependency in registration.depends_on:
                self.require(dependency)
            try:
                instance = registration.factory(self)
            except DependencyNotReady as exc:
                log_constant(
                    _LOGGER,
                    LOG_SERVICE_DEPENDENCY_NOT_READY,
                    message=str(exc),
                    extra={"service": _describe(key)},
                )
                raise
            except Exception as exc:
                log_constant(
                    _LOGGER,
                    LOG_SERVICE_CONSTRUCTION_FAILED,
                    extra={"service": _describe(key)},
                    exc_info=exc,
                )
                raise
            # Publish the instance before flipping ``ready`` so the unlocked
            # fast path in ``resolve`` never observes a half-set slot.
            registration.instance = instance
            registration.ready = True
            registration.factory = None
        log_constant(_LOGGER, LOG_SERVICE_CONSTRUCTED, extra={"service": _describe(key)})
        return instance


_GLOBAL_LOCATOR: ServiceLocator | None = None
_GLOBAL_LOCK = RLock()


def get_service_locator() -> ServiceLocator:
    """Return the process-wide service locator instance."""

    global _GLOBAL_LOCATOR
    if _GLOBAL_LOCATOR is None:
        with _GLOBAL_LOCK:
            if _GLOBAL_LOCATOR is None:
                _GLOBAL_LOCATOR = ServiceLocator()
    return _GLOBAL_LOCATOR


__all__ = [
    "DependencyNotReady",
    "ServiceLocator",
    "ServiceNotRegisteredError",
    "ServiceRegistration",
    "ServiceRegistrationError",
    "get_service_locator",
]
