"""OpenFlow controller: handshake with switches, packet-in dispatch, statistics."""

from __future__ import annotations

import logging
import math
from collections import Counter, defaultdict
from typing import Any, Optional

from openflowsim.messages import (
    Connection,
    FeaturesReply,
    FeaturesRequest,
    Hello,
    MessageType,
    OpenFlowMessage,
)
from openflowsim.sim import ServiceQueue, SignalBus, Simulation
from openflowsim.switch_info import SwitchInfo

log = logging.getLogger(__name__)

PACKET_IN = "PacketIn"
PACKET_OUT = "PacketOut"
PACKET_HELLO = "PacketHello"
PACKET_FEATURE_REQUEST = "PacketFeatureRequest"
PACKET_FEATURE_REPLY = "PacketFeatureReply"
BOOTED = "Booted"
QUEUE_SIZE = "queueSize"
WAITING_TIME = "waitingTime"


class Controller:
    """Processes messages from switches one at a time, each taking ``service_time``.

    Apps listen on ``signals``; the controller announces ``Booted`` at time 0.
    """

    def __init__(self, sim: Simulation, service_time: float) -> None:
        self.sim = sim
        self.service_time = service_time
        self.signals = SignalBus()
        self.switches: list[SwitchInfo] = []
        self.apps: list[Any] = []
        self.num_packet_in = 0
        self.packets_per_second: Counter[int] = Counter()
        self.avg_queue_size: defaultdict[int, float] = defaultdict(float)
        self._last_queue_size = 0
        self._last_change_time = 0.0
        self._queue = ServiceQueue(sim, service_time, self._serve)
        self._queue.on_served = lambda: self._update_queue_size(len(self._queue))
        sim.schedule(0, lambda: self.signals.emit(BOOTED, self))

    def receive(self, message: Any) -> None:
        """Accept a message arriving from the network."""
        self._queue.submit(message)
        self.packets_per_second[math.floor(self.sim.now)] += 1
        self._update_queue_size(len(self._queue))
        self.signals.emit(QUEUE_SIZE, len(self._queue))

    def _update_queue_size(self, size: int) -> None:
        if self._last_queue_size == size:
            return
        now = self.sim.now
        self.avg_queue_size[math.floor(now)] += self._last_queue_size * (
            now - self._last_change_time
        )
        self._last_change_time = now
        self._last_queue_size = size

    def _serve(self, message: Any) -> None:
        self.signals.emit(WAITING_TIME, self._queue.last_waiting_time)
        if not isinstance(message, OpenFlowMessage):
            return
        if message.type == MessageType.FEATURES_REPLY:
            self._handle_features_reply(message)
        elif message.type == MessageType.HELLO:
            self._register_connection(message)
            self._send_hello(message)
            self._send_feature_request(message)
        elif message.type == MessageType.PACKET_IN:
            log.debug("packet-in message from switch")
            self.num_packet_in += 1
            self.signals.emit(PACKET_IN, message)

    def _register_connection(self, message: OpenFlowMessage) -> None:
        if self.find_connection_for(message) is None:
            connection = message.connection
            self.switches.append(
                SwitchInfo(
                    conn_id=connection.conn_id,
                    connection=connection,
                    mac_address="",
                    num_ports=-1,
                    version=message.version,
                )
            )

    def _reply_connection(self, message: OpenFlowMessage) -> Connection:
        connection = self.find_connection_for(message)
        if connection is None:
            raise LookupError("message did not arrive on a registered switch connection")
        return connection

    def _send_hello(self, message: OpenFlowMessage) -> None:
        hello = Hello()
        self.signals.emit(PACKET_HELLO, hello)
        self._reply_connection(message).send(hello)

    def _send_feature_request(self, message: OpenFlowMessage) -> None:
        request = FeaturesRequest()
        self.signals.emit(PACKET_FEATURE_REQUEST, request)
        self._reply_connection(message).send(request)

    def _handle_features_reply(self, message: OpenFlowMessage) -> None:
        info = self.find_switch_info_for(message)
        if not isinstance(message, FeaturesReply):
            return
        if info is None:
            raise LookupError("features reply from an unregistered switch")
        info.mac_address = message.datapath_id
        info.num_ports = message.num_ports
        self.signals.emit(PACKET_FEATURE_REPLY, message)

    def send_packet_out(self, message: OpenFlowMessage, connection: Optional[Connection]) -> None:
        """Send a message to a switch over ``connection``."""
        if connection is None:
            raise ValueError("no connection to send the message on")
        self.signals.emit(PACKET_OUT, message)
        connection.send(message)

    def register_app(self, app: Any) -> None:
        self.apps.append(app)

    def find_connection_for(self, message: Any) -> Optional[Connection]:
        """The switch connection a message arrived on, or None if unregistered.

        Raises ValueError if the message did not come over a connection at all.
        """
        connection = getattr(message, "connection", None)
        if connection is None:
            raise ValueError("message carries no connection (not from TCP?)")
        info = self._info_by_conn_id(connection.conn_id)
        return info.connection if info is not None else None

    def find_switch_info_for(self, message: Any) -> Optional[SwitchInfo]:
        connection = getattr(message, "connection", None)
        if connection is None:
            return None
        return self._info_by_conn_id(connection.conn_id)

    def _info_by_conn_id(self, conn_id: int) -> Optional[SwitchInfo]:
        return next((info for info in self.switches if info.conn_id == conn_id), None)

    def find_connection_for_chassis_id(self, chassis_id: str) -> Optional[Connection]:
        return next(
            (info.connection for info in self.switches if info.mac_address == chassis_id),
            None,
        )

    def scalars(self) -> dict[str, float]:
        """Recorded statistics keyed by scalar name."""
        result: dict[str, float] = {"numPacketIn": self.num_packet_in}
        for second in sorted(self.packets_per_second):
            result[f"packetsPerSecondAt-{second}"] = self.packets_per_second[second]
        for second in sorted(self.avg_queue_size):
            result[f"avgQueueSizeAt-{second}"] = self.avg_queue_size[second]
        return result