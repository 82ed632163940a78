"""Shortest-path statistics between the end hosts of a topology."""

from __future__ import annotations

import heapq
import itertools
import logging
import math
from collections import Counter, deque
from typing import Union

from openflowsim.topology import Node, Topology

log = logging.getLogger(__name__)


class GraphAnalyzer:
    """Computes hop-count shortest paths between all pairs of hosts.

    Control-plane links are ignored. Pairs with no route still count as
    paths, but are left out of the path length statistics.
    """

    def __init__(self, topology: Topology) -> None:
        self.topology = topology
        self.computed_paths: deque[list[Node]] = deque()
        self.switch_counts: Counter[str] = Counter()
        self.client_counts: Counter[str] = Counter()
        self.min_path_length = 0
        self.max_path_length = 0
        self.avg_path_length = 0.0
        self.avg_num_switch_links = 0.0
        self._analyzed = False

    def _resolve(self, ref: Union[Node, str]) -> Node:
        return ref if isinstance(ref, Node) else self.topology.node(ref)

    def shortest_path(self, src: Union[Node, str], trg: Union[Node, str]) -> list[Node]:
        """Return the nodes from ``trg`` back to ``src``, or [] if unreachable."""
        source = self._resolve(src)
        target = self._resolve(trg)
        dist: dict[Node, float] = {node: math.inf for node in self.topology}
        dist[source] = 0
        prev: dict[Node, Node] = {}
        visited: set[Node] = set()
        order = itertools.count()
        heap = [(0, next(order), source)]

        while heap:
            _, _, u = heapq.heappop(heap)
            if u in visited:
                continue
            for link in u.data_links():
                v = link.remote
                if v in visited:
                    continue
                alt = dist[u] + 1
                if alt < dist.get(v, math.inf):
                    dist[v] = alt
                    prev[v] = u
                    heapq.heappush(heap, (alt, next(order), v))
            visited.add(u)

        path = [target]
        node = target
        while node in prev:
            node = prev[node]
            path.append(node)
        return path if node is source else []

    def analyze(self) -> None:
        """Compute paths between every ordered pair of hosts and their statistics."""
        hosts = [node for node in self.topology if not node.is_switch]
        paths: deque[list[Node]] = deque()
        for a in hosts:
            for b in hosts:
                if a is not b:
                    paths.appendleft(self.shortest_path(a, b))

        switch_counts: Counter[str] = Counter()
        client_counts: Counter[str] = Counter()
        for number, path in enumerate(paths, start=1):
            for node in path:
                if "switch" in node.name or "Switch" in node.name:
                    switch_counts[node.path] += 1
                else:
                    client_counts[node.path] += 1
                log.debug("Path%d %s", number, node.path)

        if not switch_counts:
            raise ValueError("no switch lies on any computed path")

        lengths = [len(path) - 1 for path in paths if path]
        num_links = sum(
            1 for node in self.topology if node.is_switch for _ in node.data_links()
        )

        self.computed_paths = paths
        self.switch_counts = switch_counts
        self.client_counts = client_counts
        self.min_path_length = min(lengths)
        self.max_path_length = max(lengths)
        self.avg_path_length = sum(lengths) / len(lengths)
        self.avg_num_switch_links = float(num_links // len(switch_counts))
        self._analyzed = True

        log.info("Min Path Length: %d", self.min_path_length)
        log.info("Max Path Length: %d", self.max_path_length)
        log.info("Avg Path Length: %s", self.avg_path_length)
        log.info("Num Clients: %d", len(client_counts))
        log.info("Num Switches: %d", len(switch_counts))
        log.info("Avg Switch Links: %s", self.avg_num_switch_links)

    def scalars(self) -> dict[str, float]:
        """The recorded statistics, keyed by scalar name."""
        if not self._analyzed:
            raise RuntimeError("analyze() has not been run")
        result: dict[str, float] = {
            "minPathLength": self.min_path_length,
            "maxPathLength": self.max_path_length,
            "avgPathLength": self.avg_path_length,
            "avgNumSwitchLinks": self.avg_num_switch_links,
            "numClients": len(self.client_counts),
            "numSwitches": len(self.switch_counts),
            "numPaths": len(self.computed_paths),
        }
        for counts in (self.switch_counts, self.client_counts):
            for path in sorted(counts):
                result[f"nodeInNumPaths-{path}"] = counts[path]
        return result