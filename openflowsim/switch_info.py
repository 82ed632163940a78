"""What a controller knows about one connected switch."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class SwitchInfo:
    """A switch connection as registered by the controller.

    The MAC address (datapath id) and port count stay unknown, as "" and -1,
    until the switch answers the features request.
    """

    conn_id: int
    connection: Any = None
    mac_address: str = ""
    num_ports: int = -1
    version: int = 0