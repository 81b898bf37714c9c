from __future__ import annotations

"""File transfer bookkeeping: interceptors and listeners for incoming offers."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
import logging
from pathlib import Path
from threading import RLock
from typing import Callable, Dict, List, Optional

from spark_gui.logging_config.helpers import LogConstantMixin
from spark_gui.logging_config.log_constants import LOG_TRANSFER_REJECTED
from spark_gui.services.listeners import ListenerSet


class TransferStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


@dataclass(slots=True)
class TransferRequest:
    """An incoming file offer."""

    stream_id: str
    requestor: str
    file_name: str
    file_size: int
    description: str = ""
    received_at: datetime = field(default_factory=datetime.now)
    status: TransferStatus = TransferStatus.PENDING
    destination: Optional[Path] = None


# An interceptor returns True when it has taken over (typically rejected) the request.
TransferInterceptor = Callable[[TransferRequest], bool]
TransferListener = Callable[[TransferRequest], None]


class TransferManager(LogConstantMixin):
    """Routes incoming file offers through interceptors before presenting them."""

    def __init__(self, download_directory: Optional[Path] = None) -> None:
        self._logger = logging.getLogger(__name__)
        self._lock = RLock()
        self._interceptors: List[TransferInterceptor] = []
        self._listeners: ListenerSet[TransferListener] = ListenerSet("transfers")
        self._requests: Dict[str, TransferRequest] = {}
        self._download_directory = download_directory

    @property
    def download_directory(self) -> Optional[Path]:
        return self._download_directory

    def set_download_directory(self, directory: Path) -> None:
        self._download_directory = Path(directory).expanduser()

    def add_transfer_interceptor(self, interceptor: TransferInterceptor) -> None:
        with self._lock:
            if interceptor not in self._interceptors:
                self._interceptors.append(interceptor)

    def remove_transfer_interceptor(self, interceptor: TransferInterceptor) -> None:
        with self._lock:
            if interceptor in self._interceptors:
                self._interceptors.remove(interceptor)

    def add_transfer_listener(self, listener: TransferListener) -> None:
        self._listeners.add(listener)

    def remove_transfer_listener(self, listener: TransferListener) -> None:
        self._listeners.remove(listener)

    def handle_incoming(self, request: TransferRequest) -> bool:
        """Offer ``request`` to interceptors, then listeners.

        Returns ``True`` when the request reached the listeners.
        """

        with self._lock:
            interceptors = list(self._interceptors)
            self._requests[request.stream_id] = request
        for interceptor in interceptors:
            if interceptor(request):
                if request.status is TransferStatus.PENDING:
                    request.status = TransferStatus.REJECTED
                self.log_constant(
                    LOG_TRANSFER_REJECTED,
                    message=f"file={request.file_name} from={request.requestor}",
                )
                return False
        self._listeners.emit(request)
        return True

    def accept(self, stream_id: str, destination: Optional[Path] = None) -> TransferRequest:
        request = self._get(stream_id)
        target_dir = destination or self._download_directory
        if target_dir is None:
            raise ValueError("No destination given and no download directory configured")
        request.destination = Path(target_dir).expanduser() / request.file_name
        request.status = TransferStatus.ACCEPTED
        return request

    def reject(self, stream_id: str) -> TransferRequest:
        request = self._get(stream_id)
        request.status = TransferStatus.REJECTED
        return request

    def pending(self) -> tuple[TransferRequest, ...]:
        with self._lock:
            return tuple(r for r in self._requests.values() if r.status is TransferStatus.PENDING)

    def _get(self, stream_id: str) -> TransferRequest:
        with self._lock:
            request = self._requests.get(stream_id)
        if request is None:
            raise KeyError(f"Unknown transfer '{stream_id}'")
        return request


__all__ = [
    "TransferInterceptor",
    "TransferListener",
    "TransferManager",
    "TransferRequest",
    "TransferStatus",
]
