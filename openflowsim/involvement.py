"""Counts how often the controller was involved in forwarding each ping."""

from __future__ import annotations

from collections import Counter

_UINT64 = 1 << 64
_INT64_LIMIT = 1 << 63


def _to_signed64(value: int) -> int:
    value %= _UINT64
    return value - _UINT64 if value >= _INT64_LIMIT else value


class ControllerInvolvementFilter:
    """Tallies control-plane ping hashes as signed 64-bit keys."""

    def __init__(self) -> None:
        self._counts: Counter[int] = Counter()

    def record(self, packet_hash: int) -> None:
        """Count one controller involvement for the ping with this hash."""
        self._counts[_to_signed64(packet_hash)] += 1

    def scalars(self) -> dict[str, int]:
        """Involvement counts by scalar name, in ascending hash order."""
        return {
            f"controllerInvolvementsFor-{key}": count
            for key, count in sorted(self._counts.items())
        }