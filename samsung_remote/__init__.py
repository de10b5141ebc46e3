"""Remote control for Samsung televisions over the local WebSocket channel."""

from .commands import RemoteCommand
from .controller import RemoteController, build_control_url
from .errors import ErrorKind, RemoteError
from .events import (
    CommandSent,
    ConnectionState,
    ErrorOccurred,
    InboundMessage,
    MessageKind,
    MessageReceived,
    RemoteStatus,
    SendResult,
    StateChanged,
)
from .keys import KNOWN_KEYS, RemoteKeys, resolve_key

__all__ = [
    "CommandSent",
    "ConnectionState",
    "ErrorKind",
    "ErrorOccurred",
    "InboundMessage",
    "KNOWN_KEYS",
    "MessageKind",
    "MessageReceived",
    "RemoteCommand",
    "RemoteController",
    "RemoteError",
    "RemoteKeys",
    "RemoteStatus",
    "SendResult",
    "StateChanged",
    "build_control_url",
    "resolve_key",
]
