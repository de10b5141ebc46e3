"""Events delivered to remote controller observers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Awaitable, Callable, Optional, Union

from .errors import RemoteError


class ConnectionState(str, Enum):
    """Current state of the control-channel connection."""

    DISCONNECTED = "disconnected"
    """No socket is open."""

    CONNECTING = "connecting"
    """The handshake has been issued but has not completed."""

    CONNECTED = "connected"
    """The handshake completed and commands can be sent."""


class MessageKind(str, Enum):
    """Classification of an inbound WebSocket frame."""

    TEXT = "text"
    BINARY = "binary"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True, slots=True)
class InboundMessage:
    kind: MessageKind
    text: Optional[str] = None
    size: int = 0

    def describe(self) -> str:
        if self.kind is MessageKind.TEXT:
            return f"Received: {self.text}"
        if self.kind is MessageKind.BINARY:
            return f"Received binary data ({self.size} bytes)"
        return "Unknown message received."


@dataclass(frozen=True, slots=True)
class StateChanged:
    state: ConnectionState
    url: Optional[str] = None

    def describe(self) -> str:
        if self.state is ConnectionState.CONNECTED:
            return "Connected to TV WebSocket."
        if self.state is ConnectionState.CONNECTING:
            return f"Connecting to {self.url}." if self.url else "Connecting."
        return "Disconnected from TV."


@dataclass(frozen=True, slots=True)
class CommandSent:
    key: str

    def describe(self) -> str:
        return f"Command sent: {self.key}"


@dataclass(frozen=True, slots=True)
class MessageReceived:
    message: InboundMessage

    def describe(self) -> str:
        return self.message.describe()


@dataclass(frozen=True, slots=True)
class ErrorOccurred:
    error: RemoteError
    key: Optional[str] = None

    def describe(self) -> str:
        return self.error.message


RemoteEvent = Union[StateChanged, CommandSent, MessageReceived, ErrorOccurred]

CallbackType = Callable[[RemoteEvent], Awaitable[None] | None]


@dataclass(slots=True)
class RemoteStatus:
    """Observable snapshot kept current by the controller."""

    state: ConnectionState = ConnectionState.DISCONNECTED
    last_response: str = ""
    last_error: Optional[RemoteError] = None
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_connected(self) -> bool:
        return self.state is ConnectionState.CONNECTED

    def apply(self, event: RemoteEvent) -> None:
        if isinstance(event, StateChanged):
            self.state = event.state
        elif isinstance(event, ErrorOccurred):
            self.last_error = event.error
        self.last_response = event.describe()
        self.updated_at = datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class SendResult:
    """Outcome of :meth:`RemoteController.send_key`."""

    key: str
    error: Optional[RemoteError] = None

    @property
    def ok(self) -> bool:
        return self.error is None
