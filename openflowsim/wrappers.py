"""Payload wrappers and the entry record exchanged between Kandoo agents."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any


@dataclass
class ArpWrapper:
    """An IP-to-MAC binding learned by a local controller."""

    src_ip: str
    src_mac: str


@dataclass
class LldpWrapper:
    """A link discovered by LLDP, from ``src_id:src_port`` to ``dst_id:dst_port``.

    A source port of -1 marks an end device rather than a switch.
    """

    dst_id: str
    dst_port: int
    src_id: str
    src_port: int


class EntryType(IntEnum):
    """Kind of a Kandoo entry."""

    INFORM = 0
    REQUEST = 1
    REPLY = 2


@dataclass
class KandooEntry:
    """A message exchanged between local controllers and the root controller."""

    src_controller: str = ""
    trg_controller: str = ""
    trg_app: str = ""
    src_app: str = ""
    trg_switch: str = ""
    src_switch: str = ""
    payload: Any = None
    type: EntryType = EntryType.INFORM

    def reply_to(self, src_app: str, payload: Any) -> KandooEntry:
        """Build a reply to this entry, addressed back to the switch it came from."""
        return KandooEntry(
            src_controller=self.trg_controller,
            trg_controller=self.src_controller,
            trg_app=src_app,
            src_app=src_app,
            trg_switch=self.src_switch,
            src_switch="",
            payload=payload,
            type=EntryType.REPLY,
        )