"""Configuration loader for samsung-remote."""

from __future__ import annotations

from configparser import ConfigParser
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from . import constants


@dataclass(slots=True)
class TVConfig:
    host: str = constants.DEFAULT_TV_HOST
    port: int = constants.DEFAULT_TV_PORT


@dataclass(slots=True)
class RemoteConfig:
    connect_timeout_seconds: float = 5.0
    send_timeout_seconds: float = 5.0
    auto_reconnect: bool = False
    reconnect_initial_seconds: float = 1.0
    reconnect_max_seconds: float = 30.0


@dataclass(slots=True)
class LoggingConfig:
    level: str = "INFO"
    path: Optional[Path] = None
    log_network: bool = False


@dataclass(slots=True)
class AppConfig:
    tv: TVConfig
    remote: RemoteConfig
    logging: LoggingConfig
    raw: ConfigParser
    path: Path


def _get_float(parser: ConfigParser, section: str, option: str, default: float) -> float:
    try:
        return parser.getfloat(section, option, fallback=default)
    except ValueError:
        return default


def _get_int(parser: ConfigParser, section: str, option: str, default: int) -> int:
    try:
        return parser.getint(section, option, fallback=default)
    except ValueError:
        return default


def _positive(value: float, default: float) -> float:
    return value if value > 0 else default


def load_config(path: Optional[Path] = None) -> AppConfig:
    """Load configuration from disk, applying defaults where necessary."""

    config_path = path or constants.DEFAULT_CONFIG_PATH
    parser = ConfigParser()
    parser.read_dict(
        {
            "tv": {
                "host": constants.DEFAULT_TV_HOST,
                "port": str(constants.DEFAULT_TV_PORT),
            },
            "remote": {
                "connect_timeout_seconds": "5.0",
                "send_timeout_seconds": "5.0",
                "auto_reconnect": "false",
                "reconnect_initial_seconds": "1.0",
                "reconnect_max_seconds": "30.0",
            },
            "logging": {
                "level": "INFO",
                "path": "",
                "log_network": "false",
            },
        }
    )

    if config_path.exists():
        parser.read(config_path)

    defaults = RemoteConfig()

    tv = TVConfig(
        host=parser.get("tv", "host").strip(),
        port=_get_int(parser, "tv", "port", constants.DEFAULT_TV_PORT),
    )

    reconnect_initial = _positive(
        _get_float(
            parser, "remote", "reconnect_initial_seconds", defaults.reconnect_initial_seconds
        ),
        defaults.reconnect_initial_seconds,
    )

    remote = RemoteConfig(
        connect_timeout_seconds=_positive(
            _get_float(
                parser, "remote", "connect_timeout_seconds", defaults.connect_timeout_seconds
            ),
            defaults.connect_timeout_seconds,
        ),
        send_timeout_seconds=_positive(
            _get_float(
                parser, "remote", "send_timeout_seconds", defaults.send_timeout_seconds
            ),
            defaults.send_timeout_seconds,
        ),
        auto_reconnect=parser.getboolean("remote", "auto_reconnect", fallback=False),
        reconnect_initial_seconds=reconnect_initial,
        reconnect_max_seconds=max(
            reconnect_initial,
            _get_float(
                parser, "remote", "reconnect_max_seconds", defaults.reconnect_max_seconds
            ),
        ),
    )

    log_path_value = parser.get("logging", "path", fallback="").strip()
    logging_config = LoggingConfig(
        level=parser.get("logging", "level", fallback="INFO"),
        path=Path(log_path_value).expanduser() if log_path_value else None,
        log_network=parser.getboolean("logging", "log_network", fallback=False),
    )

    return AppConfig(
        tv=tv,
        remote=remote,
        logging=logging_config,
        raw=parser,
        path=config_path,
    )


def save_config(config: AppConfig) -> None:
    """Persist the current configuration to disk."""

    config_path = config.path
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with config_path.open("w", encoding="utf-8") as stream:
        config.raw.write(stream)
