"""Console and file logging for the samsung-remote command line."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_NETWORK_LOGGERS = ("aiohttp.client", "aiohttp.websocket", "asyncio")


def configure_logging(
    level: str = "INFO", *, log_path: Optional[Path] = None, log_network: bool = False
) -> None:
    """Route remote-control logs to the console and optionally a file.

    Parameters
    ----------
    level:
        Level name from the ``[logging]`` section; unknown names mean INFO.
    log_path:
        Extra log file, created along with its directory. ``None`` keeps output on stderr only.
    log_network:
        Leave aiohttp's connection and frame loggers at ``level`` instead of WARNING,
        useful when a TV refuses the control-channel handshake.
    """

    root = logging.getLogger()
    logging.captureWarnings(True)

    # Repeated CLI invocations in one process must not stack handlers.
    for handler in list(root.handlers):
        root.removeHandler(handler)

    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)

    if log_path:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(file_handler)

    if not log_network:
        for name in _NETWORK_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
