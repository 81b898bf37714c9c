from __future__ import annotations

"""Message events (composing, delivered, displayed) bound to a connection."""

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Any, Callable, Mapping, Optional

from spark_gui.logging_config.helpers import LogConstantMixin
from spark_gui.logging_config.log_constants import LOG_MESSAGE_EVENT_SENT
from spark_gui.services.listeners import ListenerSet
from spark_gui.services.session import XmppConnection


class MessageEventKind(str, Enum):
    COMPOSING = "composing"
    CANCELLED = "cancelled"
    DELIVERED = "delivered"
    DISPLAYED = "displayed"
    OFFLINE = "offline"


@dataclass(frozen=True, slots=True)
class MessageEvent:
    """Notification attached to a previously exchanged message."""

    sender: str
    recipient: str
    kind: MessageEventKind
    packet_id: Optional[str] = None

    def to_packet(self) -> dict[str, Any]:
        return {
            "type": "message_event",
            "from": self.sender,
            "to": self.recipient,
            "event": self.kind.value,
            "id": self.packet_id,
        }

    @classmethod
    def from_packet(cls, packet: Mapping[str, Any]) -> "MessageEvent":
        return cls(
            sender=str(packet["from"]),
            recipient=str(packet["to"]),
            kind=MessageEventKind(packet["event"]),
            packet_id=packet.get("id"),
        )


MessageEventListener = Callable[[MessageEvent], None]


class MessageEventManager(LogConstantMixin):
    """Sends and dispatches message events over one connection.

    The manager is bound to the connection it was built with for its whole
    lifetime; build it only after a session has been established.
    """

    def __init__(self, connection: XmppConnection) -> None:
        self._logger = logging.getLogger(__name__)
        self._connection = connection
        self._listeners: ListenerSet[MessageEventListener] = ListenerSet("message_events")

    @property
    def connection(self) -> XmppConnection:
        return self._connection

    def send_event(self, recipient: str, kind: MessageEventKind, packet_id: Optional[str] = None) -> MessageEvent:
        event = MessageEvent(
            sender=self._connection.user,
            recipient=recipient,
            kind=MessageEventKind(kind),
            packet_id=packet_id,
        )
        self._connection.send(event.to_packet())
        self.log_constant(
            LOG_MESSAGE_EVENT_SENT,
            message=f"event={event.kind.value} to={recipient}",
        )
        return event

    def send_composing(self, recipient: str, packet_id: Optional[str] = None) -> MessageEvent:
        return self.send_event(recipient, MessageEventKind.COMPOSING, packet_id)

    def send_cancelled(self, recipient: str, packet_id: Optional[str] = None) -> MessageEvent:
        return self.send_event(recipient, MessageEventKind.CANCELLED, packet_id)

    def send_delivered(self, recipient: str, packet_id: str) -> MessageEvent:
        return self.send_event(recipient, MessageEventKind.DELIVERED, packet_id)

    def send_displayed(self, recipient: str, packet_id: str) -> MessageEvent:
        return self.send_event(recipient, MessageEventKind.DISPLAYED, packet_id)

    def handle_packet(self, packet: Mapping[str, Any]) -> Optional[MessageEvent]:
        """Dispatch an incoming packet to listeners when it is a message event."""

        if packet.get("type") != "message_event":
            return None
        event = MessageEvent.from_packet(packet)
        self._listeners.emit(event)
        return event

    def add_listener(self, listener: MessageEventListener) -> None:
        self._listeners.add(listener)

    def remove_listener(self, listener: MessageEventListener) -> None:
        self._listeners.remove(listener)


__all__ = ["MessageEvent", "MessageEventKind", "MessageEventListener", "MessageEventManager"]
