"""A network topology of named nodes joined by gate-labelled directed links."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Optional, Union

CONTROL_PLANE_GATE = "gateCPlane"


def is_switch_path(path: str) -> bool:
    """Tell whether a module path names a switch."""
    return "switch" in path or "Switch" in path


@dataclass(eq=False)
class Link:
    """A directed link leaving a node through a local gate."""

    gate_name: str
    gate_index: int
    remote: Node

    @property
    def is_control_plane(self) -> bool:
        return CONTROL_PLANE_GATE in self.gate_name


@dataclass(eq=False)
class Node:
    """A module in the topology; compared by identity."""

    path: str
    module_id: int
    out_links: list[Link] = field(default_factory=list, repr=False)

    @property
    def name(self) -> str:
        """The last component of the module path."""
        return self.path.rsplit(".", 1)[-1]

    @property
    def is_switch(self) -> bool:
        return is_switch_path(self.path)

    def data_links(self) -> Iterator[Link]:
        """Outgoing links that do not belong to the control plane."""
        return (link for link in self.out_links if not link.is_control_plane)


NodeRef = Union[Node, str]


class Topology:
    """Nodes in insertion order, addressed by their module path."""

    def __init__(self) -> None:
        self._nodes: dict[str, Node] = {}

    def add_node(self, path: str, module_id: Optional[int] = None) -> Node:
        """Add a node; the module id defaults to its position."""
        if path in self._nodes:
            raise ValueError(f"node {path!r} already exists")
        if module_id is None:
            module_id = len(self._nodes)
        node = Node(path, module_id)
        self._nodes[path] = node
        return node

    def connect(
        self,
        src: NodeRef,
        dst: NodeRef,
        gate_name: str = "ethg",
        gate_index: Optional[int] = None,
    ) -> Link:
        """Add a directed link from ``src`` to ``dst``.

        The gate index defaults to the number of links ``src`` already has.
        """
        source = self._resolve(src)
        target = self._resolve(dst)
        if gate_index is None:
            gate_index = len(source.out_links)
        link = Link(gate_name, gate_index, target)
        source.out_links.append(link)
        return link

    def node(self, path: str) -> Node:
        """Return the node with this path; raise KeyError if absent."""
        try:
            return self._nodes[path]
        except KeyError:
            raise KeyError(f"no node {path!r} in topology") from None

    def _resolve(self, ref: NodeRef) -> Node:
        if isinstance(ref, Node):
            if self._nodes.get(ref.path) is not ref:
                raise KeyError(f"node {ref.path!r} is not part of this topology")
            return ref
        return self.node(ref)

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes.values())