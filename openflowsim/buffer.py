"""Switch-side buffer holding frames while the controller decides on them."""

from __future__ import annotations

from typing import Any

OFP_NO_BUFFER = 0xFFFFFFFF


class PacketBuffer:
    """Stores frames under numeric buffer ids."""

    def __init__(self, capacity: int) -> None:
        self.capacity = capacity
        self._pending: dict[int, Any] = {}
        self._next_id = 1

    def is_full(self) -> bool:
        return len(self._pending) >= self.capacity

    def store(self, frame: Any) -> int:
        """Store a frame and return the buffer id it can be fetched with."""
        if self._next_id == OFP_NO_BUFFER:
            self._next_id = 0
        buffer_id = self._next_id
        self._pending[buffer_id] = frame
        self._next_id += 1
        return buffer_id

    def pop(self, buffer_id: int) -> Any:
        """Remove and return the frame stored under ``buffer_id``.

        Raises KeyError if nothing is stored there.
        """
        try:
            return self._pending.pop(buffer_id)
        except KeyError:
            raise KeyError(f"no frame buffered under id {buffer_id}") from None

    def __len__(self) -> int:
        return len(self._pending)