"""OpenFlow switch: flow-table forwarding with packet-in, packet-out and flow-mod."""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Optional

from openflowsim.buffer import OFP_NO_BUFFER, PacketBuffer
from openflowsim.flow_table import FlowTable, FlowTableEntry, Match
from openflowsim.messages import (
    ETHERTYPE_ARP,
    OFPR_ACTION,
    OFPR_NO_MATCH,
    ArpPacket,
    Connection,
    EthernetFrame,
    FeaturesReply,
    FlowMod,
    Hello,
    MessageType,
    OpenFlowMessage,
    PacketIn,
    PacketOut,
    Port,
    ping_hash,
)
from openflowsim.sim import ServiceQueue, SignalBus, Simulation

log = logging.getLogger(__name__)

OFPPS_BLOCKED = 1 << 1

DP_PING_PACKET_HASH = "dpPingPacketHash"
CP_PING_PACKET_HASH = "cpPingPacketHash"
QUEUE_SIZE = "queueSize"
BUFFER_SIZE = "bufferSize"
WAITING_TIME = "waitingTime"


@dataclass
class SwitchPort:
    """State of one data-plane port."""

    port_no: int
    name: str
    hw_addr: str = ""
    config: int = 0
    state: int = 0
    curr: int = 0
    advertised: int = 0
    supported: int = 0
    peer: int = 0
    curr_speed: int = 0
    max_speed: int = 0

    @property
    def blocked(self) -> bool:
        return bool(self.state & OFPPS_BLOCKED)


@dataclass
class _FrameArrival:
    frame: EthernetFrame
    in_port: int


class OpenFlowSwitch:
    """Forwards frames by its flow table and asks the controller about misses.

    Frames and control messages share one service queue, each taking
    ``service_time``. Frames sent out of data ports are appended to
    ``transmitted`` as ``(port, frame)`` and passed to ``on_transmit`` if set.
    """

    def __init__(
        self,
        sim: Simulation,
        datapath_id: str,
        num_ports: int,
        service_time: float = 0.0,
        buffer_capacity: int = 10,
        send_complete_packet: bool = False,
    ) -> None:
        if num_ports < 0:
            raise ValueError(f"number of ports must not be negative: {num_ports}")
        self.sim = sim
        self.datapath_id = datapath_id
        self.send_complete_packet = send_complete_packet
        self.signals = SignalBus()
        self.ports = [SwitchPort(port_no=i + 1, name=f"Port: {i}") for i in range(num_ports)]
        self.buffer = PacketBuffer(buffer_capacity)
        self.flow_table = FlowTable()
        self.connection: Optional[Connection] = None
        self.transmitted: list[tuple[int, EthernetFrame]] = []
        self.on_transmit: Optional[Callable[[int, EthernetFrame], Any]] = None
        self.data_plane_packets = 0
        self.control_plane_packets = 0
        self.flow_table_hits = 0
        self.flow_table_misses = 0
        self._queue = ServiceQueue(sim, service_time, self._serve)

    @property
    def num_ports(self) -> int:
        return len(self.ports)

    @property
    def is_connected(self) -> bool:
        return self.connection is not None and self.connection.connected

    def connect(self, connection: Connection) -> None:
        """Open the control connection and greet the controller with a Hello."""
        self.connection = connection
        log.debug("Sending Hello over connection %d", connection.conn_id)
        connection.send(Hello())

    def receive_frame(self, frame: EthernetFrame, in_port: int) -> None:
        """Accept a frame arriving on data port ``in_port``."""
        self._submit(_FrameArrival(frame, in_port))

    def receive_control(self, message: Any) -> None:
        """Accept a message arriving from the controller."""
        self._submit(message)

    def _submit(self, message: Any) -> None:
        self._queue.submit(message)
        self.signals.emit(QUEUE_SIZE, len(self._queue))
        self.signals.emit(BUFFER_SIZE, len(self.buffer))

    def _serve(self, message: Any) -> None:
        self.signals.emit(WAITING_TIME, self._queue.last_waiting_time)
        if isinstance(message, _FrameArrival):
            self.data_plane_packets += 1
            if not self.is_connected:
                return
            self._process_frame(copy.deepcopy(message.frame), message.in_port)
            return
        self.control_plane_packets += 1
        if not isinstance(message, OpenFlowMessage):
            return
        if message.type == MessageType.FEATURES_REQUEST:
            self._handle_features_request()
        elif message.type == MessageType.FLOW_MOD:
            self._handle_flow_mod(message)
        elif message.type == MessageType.PACKET_OUT:
            self._handle_packet_out(message)

    def _send_control(self, message: Any) -> None:
        if self.connection is None:
            raise ConnectionError("switch is not connected to a controller")
        self.connection.send(message)

    @staticmethod
    def _extract_match(frame: EthernetFrame, in_port: int) -> Match:
        fields: dict[str, Any] = {
            "in_port": in_port,
            "eth_src": frame.src,
            "eth_dst": frame.dest,
            "eth_type": frame.ether_type,
        }
        if frame.ether_type == ETHERTYPE_ARP:
            arp = frame.payload
            if not isinstance(arp, ArpPacket):
                raise TypeError("ARP frame does not carry an ARP packet")
            fields.update(
                arp_op=arp.opcode,
                arp_sha=arp.src_mac,
                arp_tha=arp.dest_mac,
                arp_spa=arp.src_ip,
                arp_tpa=arp.dest_ip,
            )
        return Match(**fields)

    def _process_frame(self, frame: EthernetFrame, in_port: int) -> None:
        match = self._extract_match(frame, in_port)
        packet_hash = ping_hash(frame)
        entry = self.flow_table.lookup(match, self.sim.now)
        if entry is None:
            if packet_hash:
                self.signals.emit(CP_PING_PACKET_HASH, packet_hash)
            self.flow_table_misses += 1
            log.debug("No entry found, contacting controller")
            self._handle_mismatched(frame, in_port)
            return

        self.flow_table_hits += 1
        log.debug("Found entry in flow table")
        if entry.out_port == Port.CONTROLLER:
            self._send_control(
                PacketIn(reason=OFPR_ACTION, buffer_id=OFP_NO_BUFFER, frame=frame)
            )
            if packet_hash:
                self.signals.emit(CP_PING_PACKET_HASH, packet_hash)
        else:
            if packet_hash:
                self.signals.emit(DP_PING_PACKET_HASH, packet_hash)
            self._transmit(entry.out_port, frame)

    def _handle_mismatched(self, frame: EthernetFrame, in_port: int) -> None:
        if self.send_complete_packet or self.buffer.is_full():
            packet_in = PacketIn(reason=OFPR_NO_MATCH, buffer_id=OFP_NO_BUFFER, frame=frame)
        else:
            match = self._extract_match(frame, in_port)
            packet_in = PacketIn(
                reason=OFPR_NO_MATCH, match=match, buffer_id=self.buffer.store(frame)
            )
        self._send_control(packet_in)

    def _handle_features_request(self) -> None:
        log.debug("SwitchID: %s", self.datapath_id)
        self._send_control(
            FeaturesReply(
                datapath_id=self.datapath_id,
                n_buffers=self.buffer.capacity,
                n_tables=1,
                num_ports=self.num_ports,
            )
        )

    def _handle_flow_mod(self, message: OpenFlowMessage) -> None:
        if not isinstance(message, FlowMod):
            raise TypeError("flow-mod message has the wrong class")
        self.flow_table.add_entry(
            FlowTableEntry.create(
                message.match,
                message.out_port,
                message.priority,
                message.idle_timeout,
                message.hard_timeout,
                self.sim.now,
            )
        )

    def _handle_packet_out(self, message: OpenFlowMessage) -> None:
        if not isinstance(message, PacketOut):
            raise TypeError("packet-out message has the wrong class")
        if message.buffer_id != OFP_NO_BUFFER:
            frame = self.buffer.pop(message.buffer_id)
        else:
            if message.frame is None:
                raise ValueError("packet-out carries neither a buffer id nor a frame")
            frame = copy.deepcopy(message.frame)
        for out_port in message.actions:
            self._execute_output(out_port, frame, message.in_port)

    def _execute_output(self, out_port: int, frame: EthernetFrame, in_port: int) -> None:
        if out_port == Port.ANY:
            log.debug("Dropping packet")
        elif out_port == Port.FLOOD:
            log.debug("Flooding packet")
            for index, port in enumerate(self.ports):
                if index != in_port and not port.blocked:
                    self._transmit(index, copy.deepcopy(frame))
        else:
            log.debug("Sending packet")
            self._transmit(out_port, copy.deepcopy(frame))

    def _transmit(self, port: int, frame: EthernetFrame) -> None:
        if not 0 <= port < self.num_ports:
            raise IndexError(f"no data port {port} on switch {self.datapath_id}")
        self.transmitted.append((port, frame))
        if self.on_transmit is not None:
            self.on_transmit(port, frame)

    def disable_ports(self, ports: list[int]) -> None:
        """Block the given ports for flooding."""
        for index in ports:
            if not 0 <= index < self.num_ports:
                raise IndexError(f"no data port {index} on switch {self.datapath_id}")
            self.ports[index].state |= OFPPS_BLOCKED
        for index, port in enumerate(self.ports):
            log.debug("Port: %d Value: %d", index, port.state)

    def scalars(self) -> dict[str, int]:
        """Recorded statistics keyed by scalar name."""
        return {
            "packetsDataPlane": self.data_plane_packets,
            "packetsControlPlane": self.control_plane_packets,
            "flowTableHit": self.flow_table_hits,
            "flowTableMiss": self.flow_table_misses,
        }