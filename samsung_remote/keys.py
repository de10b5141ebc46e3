"""Remote key identifiers understood by the television's control service.

The vocabulary is defined by the television firmware. The names below are the
ones the handheld remote layout uses; any other ``KEY_*`` string is passed
through untouched.
"""

from __future__ import annotations


class RemoteKeys:
    """Key identifier constants sent as ``DataOfCmd``."""

    # -------------------------------------------------------------------------
    # Power & Volume
    # -------------------------------------------------------------------------

    POWER = "KEY_POWER"
    MUTE = "KEY_MUTE"
    VOLUME_UP = "KEY_VOLUP"
    VOLUME_DOWN = "KEY_VOLDOWN"

    # -------------------------------------------------------------------------
    # Channels
    # -------------------------------------------------------------------------

    CHANNEL_UP = "KEY_CHUP"
    CHANNEL_DOWN = "KEY_CHDOWN"

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    UP = "KEY_UP"
    DOWN = "KEY_DOWN"
    LEFT = "KEY_LEFT"
    RIGHT = "KEY_RIGHT"
    ENTER = "KEY_ENTER"
    """The OK button in the centre of the directional pad."""

    HOME = "KEY_HOME"
    RETURN = "KEY_RETURN"
    """Back."""

    MENU = "KEY_MENU"
    SOURCE = "KEY_SOURCE"
    NETFLIX = "KEY_NETFLIX"
    GUIDE = "KEY_GUIDE"
    EXIT = "KEY_EXIT"


KNOWN_KEYS: tuple[str, ...] = (
    RemoteKeys.POWER,
    RemoteKeys.MUTE,
    RemoteKeys.VOLUME_UP,
    RemoteKeys.VOLUME_DOWN,
    RemoteKeys.CHANNEL_UP,
    RemoteKeys.CHANNEL_DOWN,
    RemoteKeys.UP,
    RemoteKeys.DOWN,
    RemoteKeys.LEFT,
    RemoteKeys.RIGHT,
    RemoteKeys.ENTER,
    RemoteKeys.HOME,
    RemoteKeys.RETURN,
    RemoteKeys.MENU,
    RemoteKeys.SOURCE,
    RemoteKeys.NETFLIX,
    RemoteKeys.GUIDE,
    RemoteKeys.EXIT,
)

_KEY_PREFIX = "KEY_"


def resolve_key(name: str) -> str:
    """Turn a short name such as ``volup`` or ``ok`` into a key identifier.

    Full identifiers are returned unchanged apart from upper-casing. Unknown
    names still resolve to ``KEY_<NAME>`` since the firmware owns the
    vocabulary.
    """

    value = name.strip().upper()
    if not value:
        raise ValueError("Key name cannot be empty")
    if value == "OK":
        return RemoteKeys.ENTER
    if value == "BACK":
        return RemoteKeys.RETURN
    if value.startswith(_KEY_PREFIX):
        return value
    return _KEY_PREFIX + value
