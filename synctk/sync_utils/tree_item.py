# !/usr/bin/python
# coding=utf-8
"""Captured snapshot of a source hierarchy."""
from dataclasses import dataclass, field
from typing import Any, Iterator, List


@dataclass
class TreeItem:
    """One captured node: its name and type tag, the live source node, the
    components selected on it, and its captured children in source order.
    """

    name: str
    type: str
    node: Any = None
    components: List[Any] = field(default_factory=list)
    children: List["TreeItem"] = field(default_factory=list)

    @classmethod
    def from_node(cls, host, node) -> "TreeItem":
        return cls(name=host.node_name(node), type=host.node_type(node), node=node)

    def iter_items(self) -> Iterator["TreeItem"]:
        """Depth-first over this item and every captured descendant."""
        yield self
        for child in self.children:
            yield from child.iter_items()

    def contains_component(self, component) -> bool:
        """Whether ``component`` was captured anywhere in this subtree."""
        return any(
            any(c is component for c in item.components) for item in self.iter_items()
        )

    def component_types(self, host) -> List[str]:
        """Distinct qualified types of this item's own components, first seen first."""
        types = []
        for component in self.components:
            component_type = host.component_type(component)
            if component_type not in types:
                types.append(component_type)
        return types

    def component_count(self) -> int:
        return sum(len(item.components) for item in self.iter_items())


@dataclass(frozen=True)
class RouteHop:
    """One (name, type) step of a route from a root to a node."""

    name: str
    type: str
