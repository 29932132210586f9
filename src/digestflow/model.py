"""Model — named properties wired into a runtime's dependency graph.

A Model owns the value cells for its properties and hands the runtime one
accessor per property. Public properties have defaults and take part in
get_state()/set_state(); react() adds derived properties computed from
other properties.

Usage:
    model = Model()
    model.add_public_property("a", 2).finalize()
    model.react({
        "b": ("a", lambda a: a * 2),
        "c": ("b", lambda b: b + 1),
    })
    model.digest()     # b == 4, c == 5
    model.set("a", 5)
    model.digest()     # b == 10, c == 11
"""

from __future__ import annotations

import logging
from typing import Mapping

from digestflow import binding as _binding
from digestflow.action import transaction
from digestflow.errors import (
    DuplicateFinalizationError,
    FinalizedModelError,
    UnknownPropertyError,
)
from digestflow.runtime import Runtime, get_runtime

logger = logging.getLogger("digestflow.model")


class _PropertyAccessor:
    """Accessor over one model property. Writes mark the property dirty."""

    __slots__ = ("_model", "_name")

    def __init__(self, model: Model, name: str) -> None:
        self._model = model
        self._name = name

    def get(self) -> object:
        return self._model._values[self._name]

    def set(self, value: object) -> None:
        model = self._model
        model._values[self._name] = value
        node_id = model._nodes.get(self._name)
        if node_id is not None:
            model._runtime.mark_dirty(node_id)

    def __repr__(self) -> str:
        return f"_PropertyAccessor({self._name!r})"


class Model:
    """Property store backed by a Runtime."""

    def __init__(self, runtime: Runtime | None = None) -> None:
        self._runtime = runtime if runtime is not None else get_runtime()
        self._defaults: dict[str, object] = {}  # public property -> default
        self._values: dict[str, object] = {}
        self._accessors: dict[str, _PropertyAccessor] = {}
        self._nodes: dict[str, int] = {}  # property -> node id
        self._finalized = False

    @property
    def runtime(self) -> Runtime:
        return self._runtime

    @property
    def properties(self) -> tuple[str, ...]:
        """Names that can currently be read and written."""
        return tuple(self._accessors)

    # --- Public properties ---

    def add_public_property(self, name: str, default: object) -> Model:
        if self._finalized:
            raise FinalizedModelError(
                f"cannot add public property {name!r}: public properties may only be "
                "added before the model is finalized"
            )
        self._defaults[name] = default
        self._values[name] = default
        return self

    def finalize(self) -> Model:
        if self._finalized:
            raise DuplicateFinalizationError("finalize() may only be called once per model")
        self._finalized = True
        for name in self._defaults:
            self._accessor_for(name)
        logger.debug("Finalized model with %d public properties", len(self._defaults))
        return self

    # --- Access ---

    def get(self, name: str) -> object:
        return self._lookup(name).get()

    def set(self, name: str, value: object) -> Model:
        self._lookup(name).set(value)
        return self

    def update(self, values: Mapping[str, object]) -> Model:
        """Set several properties, then digest once."""
        for name in values:
            self._lookup(name)
        with transaction(self._runtime):
            for name, value in values.items():
                self.set(name, value)
        return self

    def digest(self) -> None:
        self._runtime.digest()

    # --- Snapshot / restore ---

    def get_state(self) -> dict[str, object]:
        """Current values of the public properties."""
        return {name: self._values[name] for name in self._defaults}

    def set_state(self, state: Mapping[str, object]) -> Model:
        """Reset public properties to their defaults, then apply state."""
        unknown = [
            name for name in state
            if name not in self._accessors and name not in self._defaults
        ]
        if unknown:
            raise UnknownPropertyError(f"unknown properties in state: {', '.join(map(repr, unknown))}")
        for name, default in self._defaults.items():
            self._accessor_for(name).set(default)
        for name, value in state.items():
            self._accessor_for(name).set(value)
        return self

    # --- Reactive bindings ---

    def react(self, options: Mapping[str, object]) -> Model:
        """Bind derived properties. See digestflow.binding for the options format.

        Inputs of every new binding are marked dirty, so the next digest runs
        it once and seeds the output.
        """
        runtime = self._runtime
        for b in _binding.parse(options):
            b.in_nodes = tuple(self._node_for(name) for name in b.inputs)
            b.out_node = self._node_for(b.output)
            runtime.register_function(b)
            runtime.bind(b)
            for node_id in b.in_nodes:
                runtime.mark_dirty(node_id)
            logger.debug("Bound %r as function node %d", b, b.node)
        return self

    # --- Internals ---

    def _lookup(self, name: str) -> _PropertyAccessor:
        accessor = self._accessors.get(name)
        if accessor is None:
            raise UnknownPropertyError(name)
        return accessor

    def _accessor_for(self, name: str) -> _PropertyAccessor:
        accessor = self._accessors.get(name)
        if accessor is None:
            self._values.setdefault(name, None)
            accessor = self._accessors[name] = _PropertyAccessor(self, name)
        return accessor

    def _node_for(self, name: str) -> int:
        node_id = self._nodes.get(name)
        if node_id is None:
            node_id = self._runtime.register_property(self._accessor_for(name))
            self._nodes[name] = node_id
        return node_id

    def __repr__(self) -> str:
        state = "finalized" if self._finalized else "open"
        return f"Model({', '.join(self._accessors) or '-'}, {state})"
