"""A small discrete-event kernel: scheduler, signal bus and service-time queue."""

from __future__ import annotations

import heapq
import itertools
from collections import defaultdict, deque
from collections.abc import Callable
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Optional


@dataclass(order=True)
class _Event:
    time: float
    seq: int
    callback: Callable[[], Any] = field(compare=False)


class Simulation:
    """Runs scheduled callbacks in time order; equal times run in scheduling order."""

    def __init__(self) -> None:
        self.now = 0.0
        self._events: list[_Event] = []
        self._seq = itertools.count()

    @property
    def pending(self) -> int:
        """Number of events still waiting to run."""
        return len(self._events)

    def schedule(self, delay: float, callback: Callable[[], Any]) -> None:
        """Run ``callback`` at ``now + delay``."""
        if delay < 0:
            raise ValueError(f"cannot schedule into the past: delay {delay}")
        heapq.heappush(self._events, _Event(self.now + delay, next(self._seq), callback))

    def run(self, until: Optional[float] = None) -> float:
        """Process events up to and including time ``until``; return the final time."""
        while self._events:
            if until is not None and self._events[0].time > until:
                break
            event = heapq.heappop(self._events)
            self.now = event.time
            event.callback()
        if until is not None and until > self.now:
            self.now = until
        return self.now


class SignalBus:
    """Delivers emitted values to the listeners subscribed to a signal name."""

    def __init__(self) -> None:
        self._listeners: defaultdict[str, list[Callable[[Any], Any]]] = defaultdict(list)

    def subscribe(self, signal: str, listener: Callable[[Any], Any]) -> None:
        self._listeners[signal].append(listener)

    def emit(self, signal: str, value: Any) -> None:
        for listener in list(self._listeners.get(signal, ())):
            listener(value)


class ServiceQueue:
    """Serves one message at a time, each taking ``service_time``.

    Messages arriving while busy wait in FIFO order. Before the handler runs,
    ``last_waiting_time`` holds how long the message waited beyond its own
    service time. ``on_served``, if set, is called after each message once the
    next one (if any) has been taken from the queue.
    """

    def __init__(
        self, sim: Simulation, service_time: float, handler: Callable[[Any], Any]
    ) -> None:
        self.sim = sim
        self.service_time = service_time
        self.handler = handler
        self.busy = False
        self.last_waiting_time = 0.0
        self.on_served: Optional[Callable[[], Any]] = None
        self._waiting: deque[tuple[Any, float]] = deque()

    def submit(self, message: Any) -> None:
        """Hand a message to the queue at the current simulation time."""
        arrival = self.sim.now
        if self.busy:
            self._waiting.append((message, arrival))
        else:
            self.busy = True
            self._start(message, arrival)

    def _start(self, message: Any, arrival: float) -> None:
        self.sim.schedule(self.service_time, partial(self._serve, message, arrival))

    def _serve(self, message: Any, arrival: float) -> None:
        self.last_waiting_time = self.sim.now - arrival - self.service_time
        self.handler(message)
        if self._waiting:
            self._start(*self._waiting.popleft())
        else:
            self.busy = False
        if self.on_served is not None:
            self.on_served()

    def __len__(self) -> int:
        return len(self._waiting)