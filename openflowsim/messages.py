"""Frames, OpenFlow messages, Kandoo packets and the connections carrying them."""

from __future__ import annotations

import hashlib
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Optional

from openflowsim.buffer import OFP_NO_BUFFER
from openflowsim.flow_table import Match
from openflowsim.wrappers import KandooEntry

OFP_VERSION = 0x04

ETHERTYPE_ARP = 0x0806
ETHERTYPE_LLDP = 0x88CC

ARP_REQUEST = 1
ARP_REPLY = 2

OFPR_NO_MATCH = 0
OFPR_ACTION = 1

OFPFC_ADD = 0


class MessageType(IntEnum):
    """OpenFlow message types used by switch and controller."""

    HELLO = 0
    FEATURES_REQUEST = 5
    FEATURES_REPLY = 6
    PACKET_IN = 10
    PACKET_OUT = 13
    FLOW_MOD = 14


class Port(IntEnum):
    """Reserved OpenFlow port numbers."""

    MAX = 0xFFFFFF00
    IN_PORT = 0xFFFFFFF8
    TABLE = 0xFFFFFFF9
    NORMAL = 0xFFFFFFFA
    FLOOD = 0xFFFFFFFB
    ALL = 0xFFFFFFFC
    CONTROLLER = 0xFFFFFFFD
    LOCAL = 0xFFFFFFFE
    ANY = 0xFFFFFFFF


@dataclass
class ArpPacket:
    opcode: int
    src_mac: str
    dest_mac: str
    src_ip: str
    dest_ip: str


@dataclass
class PingPayload:
    seq_no: int
    originator_id: int


@dataclass
class EthernetFrame:
    """An Ethernet II frame; ``payload`` may be an ARP packet, a ping or anything else."""

    src: str
    dest: str
    ether_type: int
    payload: Any = None


def ping_hash(frame: Optional[EthernetFrame]) -> int:
    """A stable 64-bit identifier of the ping carried by ``frame``, or 0 if none."""
    if frame is None or not isinstance(frame.payload, PingPayload):
        return 0
    ping = frame.payload
    text = f"SeqNo-{ping.seq_no}-Pid-{ping.originator_id}"
    digest = hashlib.blake2b(text.encode(), digest_size=8).digest()
    return int.from_bytes(digest, "big")


@dataclass(eq=False)
class Connection:
    """One end of a TCP connection.

    Everything sent is kept in ``sent`` and handed to ``deliver`` if set.
    """

    conn_id: int
    deliver: Optional[Callable[[Any], Any]] = None
    connected: bool = True
    sent: list[Any] = field(default_factory=list)

    def send(self, message: Any) -> None:
        if not self.connected:
            raise ConnectionError(f"connection {self.conn_id} is not established")
        self.sent.append(message)
        if self.deliver is not None:
            self.deliver(message)


@dataclass
class OpenFlowMessage:
    """Common header of OpenFlow messages.

    ``connection`` is the connection the message arrived on, if any.
    """

    name: str = ""
    version: int = OFP_VERSION
    type: MessageType = MessageType.HELLO
    byte_length: int = 8
    connection: Optional[Connection] = None


@dataclass
class Hello(OpenFlowMessage):
    name: str = "Hello"
    type: MessageType = MessageType.HELLO


@dataclass
class FeaturesRequest(OpenFlowMessage):
    name: str = "FeaturesRequest"
    type: MessageType = MessageType.FEATURES_REQUEST


@dataclass
class FeaturesReply(OpenFlowMessage):
    name: str = "FeaturesReply"
    type: MessageType = MessageType.FEATURES_REPLY
    byte_length: int = 32
    datapath_id: str = ""
    n_buffers: int = 0
    n_tables: int = 1
    num_ports: int = 0


@dataclass
class PacketIn(OpenFlowMessage):
    name: str = "packetIn"
    type: MessageType = MessageType.PACKET_IN
    byte_length: int = 32
    reason: int = OFPR_NO_MATCH
    buffer_id: int = OFP_NO_BUFFER
    match: Match = field(default_factory=Match)
    frame: Optional[EthernetFrame] = None


@dataclass
class PacketOut(OpenFlowMessage):
    name: str = "packetOut"
    type: MessageType = MessageType.PACKET_OUT
    byte_length: int = 24
    buffer_id: int = OFP_NO_BUFFER
    in_port: int = -1
    actions: list[int] = field(default_factory=list)
    frame: Optional[EthernetFrame] = None


@dataclass
class FlowMod(OpenFlowMessage):
    name: str = "flowMod"
    type: MessageType = MessageType.FLOW_MOD
    byte_length: int = 56
    command: int = OFPFC_ADD
    match: Match = field(default_factory=Match)
    out_port: int = 0
    priority: int = 0
    idle_timeout: float = 0.0
    hard_timeout: float = 0.0


@dataclass
class KandooPacket:
    """A Kandoo entry travelling between local and root controllers."""

    entry: KandooEntry
    name: str = "KN Packet"
    byte_length: int = 1
    connection: Optional[Connection] = None