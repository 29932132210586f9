"""Directed graph over node ids, with the traversal a digest is ordered by.

Edges are stored as insertion-ordered successor sets so traversal order is
deterministic. Nothing is ever removed.
"""

from __future__ import annotations

from typing import Hashable, Iterable, TypeVar

N = TypeVar("N", bound=Hashable)


class Graph:
    """Append-only directed graph."""

    __slots__ = ("_edges",)

    def __init__(self) -> None:
        # node -> successors (dict used as an ordered set)
        self._edges: dict = {}

    def add_node(self, node) -> None:
        self._edges.setdefault(node, {})

    def add_edge(self, u, v) -> None:
        """Insert u -> v ("v depends on u"). Duplicate edges are no-ops."""
        self._edges.setdefault(u, {})[v] = None
        self.add_node(v)

    def adjacent(self, node) -> tuple:
        """Successors of node, in the order their edges were added."""
        return tuple(self._edges.get(node, ()))

    def has_edge(self, u, v) -> bool:
        return v in self._edges.get(u, ())

    def nodes(self) -> tuple:
        return tuple(self._edges)

    def traverse(self, sources: Iterable[N]) -> list[N]:
        """Depth-first post-order traversal from each source in turn.

        Each node is visited at most once across the whole call and is
        recorded when everything reachable from it has been recorded, so the
        reversed result is a topological order of the reachable subgraph
        (provided that subgraph is acyclic). Sources are included.

        Iterative, so long dependency chains do not hit the recursion limit.
        """
        visited: set = set()
        order: list = []
        for source in sources:
            if source in visited:
                continue
            visited.add(source)
            stack = [(source, iter(self.adjacent(source)))]
            while stack:
                node, successors = stack[-1]
                for successor in successors:
                    if successor not in visited:
                        visited.add(successor)
                        stack.append((successor, iter(self.adjacent(successor))))
                        break
                else:
                    stack.pop()
                    order.append(node)
        return order

    def __len__(self) -> int:
        return len(self._edges)

    def __repr__(self) -> str:
        edge_count = sum(len(s) for s in self._edges.values())
        return f"Graph({len(self._edges)} nodes, {edge_count} edges)"
