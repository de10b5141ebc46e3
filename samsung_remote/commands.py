"""Command envelope sent over the control channel."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from .constants import CONTROL_METHOD


@dataclass(frozen=True, slots=True)
class RemoteCommand:
    """A single remote key press.

    Only ``key`` varies; the remaining fields are fixed by the control
    service for a plain button click.
    """

    key: str
    cmd: str = "Click"
    option: str = "false"
    type_of_remote: str = "SendRemoteKey"

    def as_dict(self) -> dict[str, Any]:
        return {
            "method": CONTROL_METHOD,
            "params": {
                "Cmd": self.cmd,
                "DataOfCmd": self.key,
                "Option": self.option,
                "TypeOfRemote": self.type_of_remote,
            },
        }

    def to_json(self) -> str:
        return json.dumps(self.as_dict())
