"""Structured error type reported by the remote controller."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Discriminant for :class:`RemoteError`."""

    INVALID_ADDRESS = "invalid_address"
    """The address could not be composed into a control-channel URL."""

    NOT_CONNECTED = "not_connected"
    """A command was issued without an active session."""

    CONNECT_FAILED = "connect_failed"
    """The WebSocket handshake with the television failed."""

    SEND_FAILED = "send_failed"
    """The transport rejected an outbound frame."""

    RECEIVE_FAILED = "receive_failed"
    """The transport failed or closed while reading."""

    TIMEOUT = "timeout"
    """A connect or send did not complete within its configured timeout."""


class RemoteError(RuntimeError):
    """Raised or reported when a remote-control operation fails."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __repr__(self) -> str:
        return f"RemoteError(kind={self.kind.value!r}, message={self.message!r})"
