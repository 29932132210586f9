"""Runtime — the dependency graph, node arena and dirty set behind digest().

Every property and function node lives in a Runtime. Models register their
properties into one, bindings connect them, and a single digest() propagates
every pending change across all models sharing the runtime.

Propagation is push-on-demand: writes only mark properties dirty. digest()
orders everything reachable from the dirty properties topologically and
evaluates each reachable function exactly once, even under diamond
dependencies.

The graph must be acyclic. There is no cycle detection; with a cycle the
pass still terminates but the evaluation order inside the cycle is undefined.
"""

from __future__ import annotations

import itertools
import logging

from digestflow._nodes import Accessor, FunctionNode, Node, NodeKind, PropertyNode
from digestflow.binding import Binding
from digestflow.errors import UnboundFunctionError
from digestflow.graph import Graph

logger = logging.getLogger("digestflow.runtime")


class Runtime:
    """Shared dataflow state: id counter, graph, node arena, dirty set."""

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self._graph = Graph()
        self._nodes: dict[int, Node] = {}
        # Ordered set of dirty property ids.
        self._dirty: dict[int, None] = {}
        self._batch_depth = 0

    @property
    def graph(self) -> Graph:
        return self._graph

    # --- Registration ---

    def register_property(self, accessor: Accessor) -> int:
        """Allocate a property node backed by accessor. Returns its id."""
        node_id = next(self._ids)
        self._nodes[node_id] = PropertyNode(node_id, accessor)
        self._graph.add_node(node_id)
        return node_id

    def register_function(self, binding: Binding) -> int:
        """Allocate a function node for an already-resolved binding."""
        if not binding.resolved:
            raise UnboundFunctionError(
                f"{binding!r} must have its input and output nodes resolved before registration"
            )
        node_id = next(self._ids)
        self._nodes[node_id] = FunctionNode(node_id, binding)
        binding.node = node_id
        return node_id

    def bind(self, binding: Binding) -> None:
        """Connect each input to the function node, and the function node to the output."""
        if binding.node is None or not binding.resolved:
            raise UnboundFunctionError(f"{binding!r} must be registered before it is bound")
        for in_node in binding.in_nodes:
            self._graph.add_edge(in_node, binding.node)
        self._graph.add_edge(binding.node, binding.out_node)

    def mark_dirty(self, node_id: int) -> None:
        self._dirty[node_id] = None

    # --- Arena lookups ---

    def node(self, node_id: int) -> Node:
        return self._nodes[node_id]

    def accessor(self, node_id: int) -> Accessor:
        node = self._nodes[node_id]
        if node.kind is not NodeKind.PROPERTY:
            raise KeyError(f"node {node_id} is not a property node")
        return node.accessor

    def binding(self, node_id: int) -> Binding:
        node = self._nodes[node_id]
        if node.kind is not NodeKind.FUNCTION:
            raise KeyError(f"node {node_id} is not a function node")
        return node.binding

    # --- Propagation ---

    def digest(self) -> None:
        """Propagate every pending change through the graph once.

        If a callback raises, the exception propagates unchanged: writes made
        by functions already evaluated stay in place, the rest of the pass is
        skipped and nothing is removed from the dirty set.
        """
        sources = list(self._dirty)
        if not sources:
            return

        order = self._graph.traverse(sources)
        order.reverse()

        evaluated = 0
        for node_id in order:
            node = self._nodes.get(node_id)
            if node is not None and node.kind is NodeKind.FUNCTION:
                self._evaluate(node.binding)
                evaluated += 1

        # Anything marked during the pass but not reached by it stays dirty.
        for node_id in order:
            self._dirty.pop(node_id, None)

        logger.debug(
            "Digested %d source(s): %d function(s) evaluated, %d still dirty",
            len(sources), evaluated, len(self._dirty),
        )

    def _evaluate(self, binding: Binding) -> None:
        values = [self._nodes[n].accessor.get() for n in binding.in_nodes]
        result = binding.callback(*values)
        self._nodes[binding.out_node].accessor.set(result)

    # --- Batching (see digestflow.action) ---

    def begin_batch(self) -> None:
        self._batch_depth += 1

    def end_batch(self) -> None:
        """Leave a batch scope. The outermost exit digests."""
        self._batch_depth -= 1
        if self._batch_depth == 0:
            self.digest()

    @property
    def in_batch(self) -> bool:
        return self._batch_depth > 0

    # --- Inspection (testing aids) ---

    @property
    def dirty(self) -> tuple[int, ...]:
        """Dirty property ids, in the order they were first marked."""
        return tuple(self._dirty)

    @property
    def pending_count(self) -> int:
        return len(self._dirty)

    def __repr__(self) -> str:
        return f"Runtime({len(self._nodes)} nodes, {len(self._dirty)} dirty)"


_default_runtime: Runtime | None = None


def get_runtime() -> Runtime:
    """The process-wide default runtime, created on first use."""
    global _default_runtime
    if _default_runtime is None:
        _default_runtime = Runtime()
    return _default_runtime


def set_runtime(runtime: Runtime | None) -> Runtime | None:
    """Replace the default runtime. Returns the previous one.

    Passing None makes the next get_runtime() create a fresh runtime.
    """
    global _default_runtime
    previous, _default_runtime = _default_runtime, runtime
    return previous


def digest() -> None:
    """Digest the default runtime."""
    get_runtime().digest()


def get_pending_count() -> int:
    """Number of dirty properties in the default runtime. Useful for testing."""
    return get_runtime().pending_count
