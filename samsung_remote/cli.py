"""Command-line interface for samsung-remote."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from . import constants
from .config import AppConfig, load_config
from .controller import RemoteController
from .errors import RemoteError
from .events import ConnectionState, RemoteEvent, StateChanged
from .keys import KNOWN_KEYS, resolve_key
from .logging import configure_logging

LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=constants.APP_NAME, description="Samsung TV remote over the local network"
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=constants.DEFAULT_CONFIG_PATH,
        help=f"Path to configuration file (default: {constants.DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument("--host", help="TV address, overrides [tv] host")
    parser.add_argument("--port", type=int, help="TV control port, overrides [tv] port")

    subparsers = parser.add_subparsers(dest="command", required=True)

    send_parser = subparsers.add_parser("send", help="Send one or more key presses")
    send_parser.add_argument(
        "keys", nargs="+", help="Key names, e.g. KEY_POWER, volup or ok"
    )
    send_parser.add_argument(
        "--delay",
        type=float,
        default=0.0,
        help="Seconds to wait between key presses (default: 0)",
    )

    subparsers.add_parser("listen", help="Connect and print everything the TV sends")
    subparsers.add_parser("keys", help="List the known key identifiers")
    subparsers.add_parser(
        "show-config", help="Print the resolved configuration and exit"
    )

    return parser


def _print_event(event: RemoteEvent) -> None:
    print(f"Response: {event.describe()}", flush=True)


async def run_send(
    config: AppConfig, keys: Sequence[str], *, delay: float = 0.0
) -> int:
    """Connect, press each key in order and disconnect."""

    async with RemoteController(config.remote, port=config.tv.port) as controller:
        controller.subscribe(_print_event)
        try:
            await controller.connect(config.tv.host)
        except RemoteError:
            return 1

        if not await controller.wait_connected(config.remote.connect_timeout_seconds):
            LOGGER.error("Could not connect to TV at %s", config.tv.host)
            return 1

        failures = 0
        for index, key in enumerate(keys):
            if index and delay > 0:
                await asyncio.sleep(delay)
            result = await controller.send_key(key)
            if not result.ok:
                failures += 1

    return 1 if failures else 0


async def run_listen(config: AppConfig) -> int:
    """Print every event until the TV closes the connection."""

    closed = asyncio.Event()

    def on_event(event: RemoteEvent) -> None:
        _print_event(event)
        if (
            isinstance(event, StateChanged)
            and event.state is ConnectionState.DISCONNECTED
            and not config.remote.auto_reconnect
        ):
            closed.set()

    async with RemoteController(config.remote, port=config.tv.port) as controller:
        controller.subscribe(on_event)
        try:
            await controller.connect(config.tv.host)
        except RemoteError:
            return 1
        await closed.wait()
        error = controller.status.last_error

    return 1 if error is not None else 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config)
    if args.host:
        config.tv.host = args.host
        config.raw.set("tv", "host", args.host)
    if args.port:
        config.tv.port = args.port
        config.raw.set("tv", "port", str(args.port))

    if args.command == "keys":
        for key in KNOWN_KEYS:
            print(key)
        return 0

    if args.command == "show-config":
        print(f"Configuration loaded from {config.path!s}\n")
        for section in config.raw.sections():
            print(f"[{section}]")
            for key, value in config.raw[section].items():
                print(f"{key} = {value}")
            print()
        return 0

    configure_logging(
        config.logging.level,
        log_path=config.logging.path,
        log_network=config.logging.log_network,
    )

    if args.command == "send":
        try:
            keys = [resolve_key(name) for name in args.keys]
        except ValueError as exc:
            LOGGER.error("%s", exc)
            return 2
        return asyncio.run(run_send(config, keys, delay=args.delay))

    if args.command == "listen":
        try:
            return asyncio.run(run_listen(config))
        except KeyboardInterrupt:
            LOGGER.info("%s received shutdown signal", constants.APP_NAME)
            return 0

    LOGGER.error("Unknown command: %s", args.command)
    return 1


if __name__ == "__main__":
    sys.exit(main())
