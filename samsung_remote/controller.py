"""WebSocket adapter for the television's remote-control channel."""

from __future__ import annotations

import asyncio
import contextlib
import ipaddress
import logging
import random
import re
from typing import Optional
from urllib.parse import urlsplit

import aiohttp

from .commands import RemoteCommand
from .config import RemoteConfig
from .constants import CONTROL_CHANNEL_PATH, DEFAULT_TV_PORT
from .errors import ErrorKind, RemoteError
from .events import (
    CallbackType,
    CommandSent,
    ConnectionState,
    ErrorOccurred,
    InboundMessage,
    MessageKind,
    MessageReceived,
    RemoteEvent,
    RemoteStatus,
    SendResult,
    StateChanged,
)

LOGGER = logging.getLogger(__name__)

_HOSTNAME_PATTERN = re.compile(
    r"^[A-Za-z0-9_](?:[A-Za-z0-9_-]*[A-Za-z0-9_])?"
    r"(?:\.[A-Za-z0-9_](?:[A-Za-z0-9_-]*[A-Za-z0-9_])?)*\.?$"
)
_IPV6_PATTERN = re.compile(r"^\[[0-9A-Fa-f:.]+\]$")


def build_control_url(address: str, port: int = DEFAULT_TV_PORT) -> str:
    """Compose the control-channel URL for ``address``.

    Raises:
        RemoteError: With kind ``INVALID_ADDRESS`` when the address is empty
            or is not usable as the host part of a URL.
    """

    host = (address or "").strip()
    if not host:
        raise RemoteError(ErrorKind.INVALID_ADDRESS, "Invalid WebSocket URL: no address given.")

    if not (_HOSTNAME_PATTERN.match(host) or _IPV6_PATTERN.match(host)):
        raise RemoteError(
            ErrorKind.INVALID_ADDRESS, f"Invalid WebSocket URL for address {address!r}."
        )

    if host.startswith("["):
        try:
            ipaddress.IPv6Address(host[1:-1])
        except ValueError as exc:
            raise RemoteError(
                ErrorKind.INVALID_ADDRESS, f"Invalid WebSocket URL for address {address!r}."
            ) from exc

    if not 0 < port < 65536:
        raise RemoteError(ErrorKind.INVALID_ADDRESS, f"Invalid WebSocket port {port}.")

    url = f"ws://{host}:{port}{CONTROL_CHANNEL_PATH}"
    try:
        parsed = urlsplit(url)
        parsed_port = parsed.port
    except ValueError as exc:
        raise RemoteError(
            ErrorKind.INVALID_ADDRESS, f"Invalid WebSocket URL for address {address!r}."
        ) from exc

    if parsed.hostname is None or parsed_port != port:
        raise RemoteError(
            ErrorKind.INVALID_ADDRESS, f"Invalid WebSocket URL for address {address!r}."
        )

    return url


def classify_frame(message: aiohttp.WSMessage) -> InboundMessage:
    """Map an aiohttp frame onto the inbound message union."""

    if message.type == aiohttp.WSMsgType.TEXT:
        text = message.data
        return InboundMessage(MessageKind.TEXT, text=text, size=len(text.encode("utf-8")))
    if message.type == aiohttp.WSMsgType.BINARY:
        return InboundMessage(MessageKind.BINARY, size=len(message.data))
    return InboundMessage(MessageKind.UNRECOGNIZED)


class RemoteController:
    """Owns one control-channel connection to a television.

    State changes, sent commands, inbound frames and errors are all reported
    through :meth:`subscribe` callbacks and mirrored in :attr:`status`.
    """

    def __init__(
        self,
        config: Optional[RemoteConfig] = None,
        *,
        port: int = DEFAULT_TV_PORT,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self.config = config or RemoteConfig()
        self.port = port

        self._session: Optional[aiohttp.ClientSession] = session
        self._owns_session = session is None
        self._callbacks: list[CallbackType] = []
        self._status = RemoteStatus()
        self._ws: Optional[aiohttp.ClientWebSocketResponse] = None
        self._listener_task: Optional[asyncio.Task[None]] = None
        self._attempt_done = asyncio.Event()
        self._generation = 0
        self._url: Optional[str] = None

    async def __aenter__(self) -> "RemoteController":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @property
    def status(self) -> RemoteStatus:
        return self._status

    @property
    def state(self) -> ConnectionState:
        return self._status.state

    @property
    def is_connected(self) -> bool:
        return self._status.is_connected

    @property
    def url(self) -> Optional[str]:
        return self._url

    def subscribe(self, callback: CallbackType) -> None:
        """Register an observer for controller events."""

        if callback in self._callbacks:
            raise ValueError("Callback already registered")
        self._callbacks.append(callback)

    def remove_callback(self, callback: CallbackType) -> None:
        """Remove a previously registered observer."""

        with contextlib.suppress(ValueError):
            self._callbacks.remove(callback)

    async def connect(self, address: str) -> str:
        """Open the control channel to ``address`` and return its URL.

        Returns as soon as the handshake has been issued; the state moves to
        ``CONNECTED`` once it completes. Any existing connection is closed
        first.

        Raises:
            RemoteError: With kind ``INVALID_ADDRESS``. No transport is opened.
        """

        try:
            url = build_control_url(address, self.port)
        except RemoteError as exc:
            LOGGER.warning("Rejected TV address %r: %s", address, exc.message)
            await self._emit(ErrorOccurred(exc))
            raise

        if self._listener_task is not None or self._ws is not None:
            LOGGER.info("Replacing existing TV connection to %s", self._url)
            await self.disconnect()

        self._generation += 1
        generation = self._generation
        self._url = url
        self._attempt_done.clear()
        await self._set_state(ConnectionState.CONNECTING, url=url)

        if not self._is_current(generation):
            LOGGER.debug("connect(%r) superseded before the handshake was issued", address)
            return url

        session = self._ensure_session()
        self._listener_task = asyncio.create_task(self._run(session, url, generation))
        await asyncio.sleep(0)
        return url

    async def wait_connected(self, timeout: Optional[float] = None) -> bool:
        """Wait for the current handshake attempt to complete or fail.

        Returns ``True`` when connected. Returns ``False`` when the attempt
        fails (even if ``auto_reconnect`` will retry later), when nothing is
        connecting, or when ``timeout`` elapses.
        """

        if self.is_connected:
            return True

        task = self._listener_task
        if task is None or task.done():
            return False

        waiter = asyncio.ensure_future(self._attempt_done.wait())
        try:
            await asyncio.wait(
                {waiter, task}, timeout=timeout, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            waiter.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await waiter
        return self.is_connected

    async def disconnect(self) -> None:
        """Close the control channel with a going-away close code.

        Safe to call at any time, repeatedly.
        """

        # Any running listener belongs to an older generation from here on.
        self._generation += 1
        task, self._listener_task = self._listener_task, None
        ws, self._ws = self._ws, None
        self._attempt_done.clear()

        if ws is None and task is None:
            LOGGER.debug("disconnect() called without an active TV connection")

        if ws is not None and not ws.closed:
            try:
                async with asyncio.timeout(self.config.send_timeout_seconds):
                    await ws.close(code=aiohttp.WSCloseCode.GOING_AWAY)
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                LOGGER.debug("Error while closing TV connection: %s", exc)

        if task is not None and task is not asyncio.current_task():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

        if self._status.state is ConnectionState.DISCONNECTED:
            self._status.apply(StateChanged(ConnectionState.DISCONNECTED))
        else:
            LOGGER.info("Disconnected from TV at %s", self._url)
            await self._set_state(ConnectionState.DISCONNECTED)

    async def send_key(self, key: str) -> SendResult:
        """Send one key press as a single text frame.

        Failures are reported as events and in the returned result; this
        method does not raise for transport errors.
        """

        ws = self._ws
        if ws is None or ws.closed:
            error = RemoteError(ErrorKind.NOT_CONNECTED, "WebSocket is not connected.")
            LOGGER.debug("Dropping %s: no active TV connection", key)
            await self._emit(ErrorOccurred(error, key=key))
            return SendResult(key=key, error=error)

        command = RemoteCommand(key)
        try:
            async with asyncio.timeout(self.config.send_timeout_seconds):
                await ws.send_str(command.to_json())
        except asyncio.TimeoutError:
            error = RemoteError(
                ErrorKind.TIMEOUT,
                f"Timed out sending {key} after {self.config.send_timeout_seconds:.1f}s.",
            )
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            error = RemoteError(ErrorKind.SEND_FAILED, f"Error sending command: {exc}")
        else:
            LOGGER.debug("Sent %s to %s", key, self._url)
            await self._emit(CommandSent(key))
            return SendResult(key=key)

        LOGGER.warning("Failed to send %s: %s", key, error.message)
        await self._emit(ErrorOccurred(error, key=key))
        return SendResult(key=key, error=error)

    async def aclose(self) -> None:
        """Disconnect and release the HTTP session if this controller owns it."""

        await self.disconnect()

        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            timeout = aiohttp.ClientTimeout(total=None)
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._owns_session = True
        return self._session

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    async def _run(
        self, session: aiohttp.ClientSession, url: str, generation: int
    ) -> None:
        backoff = self.config.reconnect_initial_seconds

        while True:
            ws = await self._open(session, url, generation)
            if ws is not None:
                backoff = self.config.reconnect_initial_seconds
                await self._listen(ws, generation)

            if not (self.config.auto_reconnect and self._is_current(generation)):
                return

            # Full jitter: sleep uniformly between 0 and the current backoff.
            delay = random.uniform(0, backoff)
            LOGGER.info("Reconnecting to %s in %.1fs", url, delay)
            await asyncio.sleep(delay)
            backoff = min(backoff * 2, self.config.reconnect_max_seconds)

            if not self._is_current(generation):
                return
            self._attempt_done.clear()
            await self._set_state(ConnectionState.CONNECTING, url=url)

    async def _open(
        self, session: aiohttp.ClientSession, url: str, generation: int
    ) -> Optional[aiohttp.ClientWebSocketResponse]:
        timeout = self.config.connect_timeout_seconds
        try:
            async with asyncio.timeout(timeout):
                ws = await session.ws_connect(url)
        except asyncio.TimeoutError:
            error = RemoteError(
                ErrorKind.TIMEOUT, f"Timed out connecting to {url} after {timeout:.1f}s."
            )
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            error = RemoteError(ErrorKind.CONNECT_FAILED, f"Error connecting to TV: {exc}")
        else:
            if not self._is_current(generation):
                await ws.close(code=aiohttp.WSCloseCode.GOING_AWAY)
                return None

            self._ws = ws
            LOGGER.info("Connected to TV control channel at %s", url)
            await self._set_state(ConnectionState.CONNECTED, url=url)
            self._attempt_done.set()
            return ws

        LOGGER.warning("TV handshake failed: %s", error.message)
        if self._is_current(generation):
            await self._emit(ErrorOccurred(error))
            await self._set_state(ConnectionState.DISCONNECTED)
            self._attempt_done.set()
        return None

    async def _listen(
        self, ws: aiohttp.ClientWebSocketResponse, generation: int
    ) -> None:
        error: Optional[RemoteError] = None
        try:
            # Iteration stops once the socket reports CLOSE, CLOSING or CLOSED.
            async for message in ws:
                if message.type == aiohttp.WSMsgType.ERROR:
                    raise ws.exception() or RuntimeError("WebSocket error")
                if not self._is_current(generation):
                    break
                await self._emit(MessageReceived(classify_frame(message)))
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            error = RemoteError(ErrorKind.RECEIVE_FAILED, f"Error receiving message: {exc}")
        finally:
            if self._ws is ws:
                self._ws = None

        if not self._is_current(generation):
            return

        if error is None:
            error = RemoteError(
                ErrorKind.RECEIVE_FAILED,
                f"Connection closed by TV (code {ws.close_code}).",
            )
        LOGGER.warning("TV connection lost: %s", error.message)
        self._attempt_done.clear()
        await self._emit(ErrorOccurred(error))
        await self._set_state(ConnectionState.DISCONNECTED)

    async def _set_state(self, state: ConnectionState, *, url: Optional[str] = None) -> None:
        if state is self._status.state:
            return
        await self._emit(StateChanged(state, url=url))

    async def _emit(self, event: RemoteEvent) -> None:
        self._status.apply(event)

        for callback in list(self._callbacks):
            try:
                result = callback(event)
                if asyncio.iscoroutine(result):
                    await result
            except Exception:
                LOGGER.exception("Remote controller callback failed")
