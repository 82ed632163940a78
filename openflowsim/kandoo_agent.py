"""Kandoo agent: relays entries between local controllers and the root controller."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from openflowsim.messages import Connection, KandooPacket
from openflowsim.sim import SignalBus
from openflowsim.wrappers import KandooEntry

KANDOO_EVENT = "KandooEvent"


@dataclass
class SwitchControllerMapping:
    """Which local controller, over which connection, governs a switch."""

    switch_id: str
    controller_id: str
    connection: Optional[Connection]


class KandooAgent:
    """Sends and receives Kandoo entries and emits received ones on ``KandooEvent``.

    A local agent talks to the root over ``connection``; the root learns its
    connections from the messages arriving on them.
    """

    def __init__(
        self,
        is_root_controller: bool,
        connection: Optional[Connection],
        signals: SignalBus,
    ) -> None:
        self.is_root_controller = is_root_controller
        self.connection = connection
        self.signals = signals
        self.switch_controller_mappings: dict[str, SwitchControllerMapping] = {}
        self._connections: dict[int, Connection] = {}

    def process_message(self, message: Any) -> None:
        """Handle a message that has reached the agent."""
        if self.is_root_controller:
            self._process_as_root(message)
            return
        arrived_on = getattr(message, "connection", None)
        ours = (
            arrived_on is not None
            and self.connection is not None
            and arrived_on.conn_id == self.connection.conn_id
        )
        if ours and isinstance(message, KandooPacket):
            self.handle_kandoo_packet(message)

    def _process_as_root(self, message: Any) -> None:
        if isinstance(message, KandooPacket):
            entry = message.entry
            if entry.src_switch not in self.switch_controller_mappings:
                self.switch_controller_mappings[entry.src_switch] = SwitchControllerMapping(
                    switch_id=entry.src_switch,
                    controller_id=entry.src_controller,
                    connection=self._find_connection_for(message),
                )
            self.handle_kandoo_packet(message)
            return
        connection = getattr(message, "connection", None)
        if connection is None:
            raise ValueError("message carries no connection (not from TCP?)")
        self._connections.setdefault(connection.conn_id, connection)

    def _find_connection_for(self, message: Any) -> Optional[Connection]:
        connection = getattr(message, "connection", None)
        if connection is None:
            raise ValueError("message carries no connection (not from TCP?)")
        return self._connections.get(connection.conn_id)

    def send_request(self, entry: KandooEntry) -> None:
        """Send an entry to the root controller."""
        if self.connection is None:
            raise ValueError("agent has no connection to the root controller")
        self.connection.send(KandooPacket(entry, name="KN Req"))

    def send_reply(self, request: KandooPacket, entry: KandooEntry) -> None:
        """Answer ``request`` over the connection it arrived on."""
        connection = self._find_connection_for(request)
        if connection is None:
            raise LookupError("request did not arrive on a known connection")
        connection.send(KandooPacket(entry, name="KN Rep"))

    def send_reply_to_switch_authoritative(self, switch_id: str, entry: KandooEntry) -> None:
        """Send an entry to the controller governing ``switch_id``, if one is known."""
        mapping = self.switch_controller_mappings.get(switch_id)
        if mapping is not None and mapping.connection is not None:
            mapping.connection.send(KandooPacket(entry, name="KN Rep"))

    def handle_kandoo_packet(self, packet: KandooPacket) -> None:
        self.signals.emit(KANDOO_EVENT, packet)