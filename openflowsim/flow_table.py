"""Flow table of an OpenFlow switch with wildcard matching and timeouts."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import IntFlag
from typing import Optional


class Wildcard(IntFlag):
    """Match fields that are ignored when comparing."""

    NONE = 0
    IN_PORT = 1 << 0
    DL_VLAN = 1 << 1
    DL_SRC = 1 << 2
    DL_DST = 1 << 3
    DL_TYPE = 1 << 4


@dataclass(frozen=True)
class Match:
    """Header fields of a frame, or the pattern of a flow entry."""

    in_port: int = 0
    eth_src: str = ""
    eth_dst: str = ""
    eth_type: int = 0
    arp_op: int = 0
    arp_sha: str = ""
    arp_tha: str = ""
    arp_spa: str = ""
    arp_tpa: str = ""
    wildcards: Wildcard = Wildcard.NONE

    def matches(self, other: Match, wildcards: Wildcard) -> bool:
        """Compare port, ethertype and MAC addresses, skipping wildcarded fields."""
        return (
            (bool(wildcards & Wildcard.IN_PORT) or self.in_port == other.in_port)
            and (bool(wildcards & Wildcard.DL_TYPE) or self.eth_type == other.eth_type)
            and (bool(wildcards & Wildcard.DL_SRC) or self.eth_src == other.eth_src)
            and (bool(wildcards & Wildcard.DL_DST) or self.eth_dst == other.eth_dst)
        )


@dataclass
class FlowTableEntry:
    """A flow: a match pattern, an output port and its expiry time."""

    match: Match
    out_port: int
    priority: int = 0
    idle_timeout: float = 0.0
    hard_timeout: float = 0.0
    expires_at: float = 0.0

    @classmethod
    def create(
        cls,
        match: Match,
        out_port: int,
        priority: int,
        idle_timeout: float,
        hard_timeout: float,
        now: float,
    ) -> FlowTableEntry:
        """Build an entry as installed by a flow-mod arriving at time ``now``."""
        timeout = idle_timeout if idle_timeout != 0 else hard_timeout
        return cls(
            match=match,
            out_port=out_port,
            priority=priority,
            idle_timeout=idle_timeout,
            hard_timeout=hard_timeout,
            expires_at=now + timeout,
        )


class FlowTable:
    """Ordered flow entries; the most recently added is consulted first."""

    def __init__(self) -> None:
        self._entries: deque[FlowTableEntry] = deque()

    def add_entry(self, entry: FlowTableEntry) -> None:
        self._entries.appendleft(entry)

    def lookup(self, match: Match, now: float) -> Optional[FlowTableEntry]:
        """Return the first live entry matching ``match``, or None.

        Expired entries passed over during the search are removed, and an
        entry with an idle timeout has its expiry pushed back on a hit.
        """
        kept: deque[FlowTableEntry] = deque()
        found: Optional[FlowTableEntry] = None
        entries = iter(self._entries)
        for entry in entries:
            if entry.expires_at < now:
                continue
            kept.append(entry)
            if match.matches(entry.match, entry.match.wildcards):
                if entry.idle_timeout != 0:
                    entry.expires_at = now + entry.idle_timeout
                found = entry
                kept.extend(entries)
                break
        self._entries = kept
        return found

    def __len__(self) -> int:
        return len(self._entries)