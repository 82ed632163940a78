"""Static spanning tree: which switch ports to block to break loops."""

from __future__ import annotations

import logging
import random
from collections import defaultdict
from typing import Optional

from openflowsim.topology import Topology

log = logging.getLogger(__name__)


def compute_blocked_ports(
    topology: Topology, start_node: int = 0, rng: Optional[random.Random] = None
) -> dict[str, list[int]]:
    """Grow a tree from a start node and return the gate indices to block.

    If ``start_node`` is not a valid node index, the start is chosen with
    ``rng``. The result maps every node path to the gate indices it must
    disable. Raises ValueError for an empty or disconnected topology.
    """
    nodes = list(topology)
    if not nodes:
        raise ValueError("topology has no nodes")
    if start_node < 0:
        raise ValueError(f"start node index must not be negative: {start_node}")
    if start_node >= len(nodes):
        start_node = (rng or random.Random()).randrange(len(nodes))
    log.debug("Starting at node %s", nodes[start_node].path)

    by_module: defaultdict[int, list[int]] = defaultdict(list)
    for index, node in enumerate(nodes):
        by_module[node.module_id].append(index)

    in_tree = [False] * len(nodes)
    processed = [False] * len(nodes)
    parents: list[set[int]] = [set() for _ in nodes]
    blocked: list[list[int]] = [[] for _ in nodes]
    in_tree[start_node] = True

    while not all(processed):
        progressed = False
        for i, node in enumerate(nodes):
            if not in_tree[i] or processed[i]:
                continue
            processed[i] = True
            progressed = True
            for link in node.data_links():
                for x in by_module.get(link.remote.module_id, ()):
                    if not in_tree[x]:
                        in_tree[x] = True
                        parents[x].add(i)
                    elif x not in parents[i]:
                        blocked[i].append(link.gate_index)
                        log.debug(
                            "Disable link with index %d at node %d to node %d",
                            link.gate_index,
                            i,
                            x,
                        )
        if not progressed:
            raise ValueError("topology is not connected")

    return {node.path: blocked[i] for i, node in enumerate(nodes)}