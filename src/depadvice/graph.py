"""Per-variant dependency graph views."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from depadvice.model import Coordinates, Variant


@dataclass(frozen=True)
class DependencyGraphView:
    """The resolved dependency graph of one variant, rooted at the project node.

    ``graph`` maps each node to its direct dependencies.  Every node appears as
    a key, even leaves.
    """

    variant: Variant
    configuration_name: str
    graph: Mapping[Coordinates, tuple[Coordinates, ...]] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return f"{self.variant.name},{self.configuration_name}"

    @property
    def nodes(self) -> frozenset[Coordinates]:
        return frozenset(self.graph)

    def has_node(self, node: Coordinates) -> bool:
        return node in self.graph

    def children(self, node: Coordinates) -> tuple[Coordinates, ...]:
        return tuple(self.graph.get(node, ()))

    def reachable_nodes(self, node: Coordinates) -> frozenset[Coordinates]:
        """Return every node reachable from *node*, not counting *node* itself
        unless a cycle leads back to it."""
        visited: set[Coordinates] = set()
        stack = list(self.children(node))
        while stack:
            current = stack.pop()
            if current in visited:
                continue
            visited.add(current)
            stack.extend(self.graph.get(current, ()))
        return frozenset(visited)

    @classmethod
    def from_edges(
        cls,
        variant: Variant,
        configuration_name: str,
        root: Coordinates,
        edges: Iterable[tuple[Coordinates, Coordinates]],
        nodes: Iterable[Coordinates] = (),
    ) -> DependencyGraphView:
        adjacency: dict[Coordinates, list[Coordinates]] = {root: []}
        for node in nodes:
            adjacency.setdefault(node, [])
        for source, target in edges:
            children = adjacency.setdefault(source, [])
            if target not in children:
                children.append(target)
            adjacency.setdefault(target, [])
        return cls(
            variant=variant,
            configuration_name=configuration_name,
            graph={k: tuple(v) for k, v in adjacency.items()},
        )
