"""Shared services: the component registry and the managers it serves."""

from .service_locator import (
	DependencyNotReady,
	ServiceLocator,
	ServiceNotRegisteredError,
	ServiceRegistrationError,
	get_service_locator,
)
from .session import SessionManager, SessionNotEstablishedError, XmppConnection
from .user_storage import StorageUnavailable, resolve_user_storage_root
from .clipboard import ClipboardBridge, ClipboardUnavailable
from .bootstrap import bootstrap_default_services
from .spark_manager import SparkManager, get_spark_manager

__all__ = [
	"ClipboardBridge",
	"ClipboardUnavailable",
	"DependencyNotReady",
	"ServiceLocator",
	"ServiceNotRegisteredError",
	"ServiceRegistrationError",
	"SessionManager",
	"SessionNotEstablishedError",
	"SparkManager",
	"StorageUnavailable",
	"XmppConnection",
	"bootstrap_default_services",
	"get_service_locator",
	"get_spark_manager",
	"resolve_user_storage_root",
]
