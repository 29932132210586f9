"""Binding records and the declarative parser that produces them.

A binding ties an ordered list of input properties to one output property
through a callback. Bindings start out naming properties; the model resolves
the names to node ids before handing the binding to the runtime.

Declarative form accepted by parse() (and Model.react()):

    {
        "full_name": ("first, last", lambda first, last: f"{first} {last}"),
        "total": (["price", "quantity"], operator.mul),
        "doubled": lambda count: count * 2,   # inputs taken from parameter names
    }
"""

from __future__ import annotations

import inspect
from typing import Callable, Mapping, Sequence

from digestflow.errors import BindingParseError


class Binding:
    """One function bound from ordered inputs to a single output."""

    __slots__ = ("inputs", "output", "callback", "in_nodes", "out_node", "node")

    def __init__(self, inputs: Sequence[str], output: str, callback: Callable) -> None:
        self.inputs: tuple[str, ...] = tuple(inputs)
        self.output = output
        self.callback = callback
        # Resolved ids, filled in by the model / runtime.
        self.in_nodes: tuple[int, ...] | None = None
        self.out_node: int | None = None
        self.node: int | None = None

    @property
    def resolved(self) -> bool:
        return bool(self.in_nodes) and self.out_node is not None

    def __repr__(self) -> str:
        name = getattr(self.callback, "__name__", repr(self.callback))
        return f"Binding({', '.join(self.inputs)} -> {self.output}, {name})"


def parse(options: Mapping[str, object]) -> list[Binding]:
    """Turn {output: (inputs, callback) | callback} into Binding records.

    Bindings come back in the mapping's order. Raises BindingParseError on
    anything malformed; nothing is registered anywhere by parsing.
    """
    bindings = []
    for output, entry in options.items():
        output = _clean_name(output, "output")
        if callable(entry):
            callback = entry
            inputs = _parameter_names(callback, output)
        elif isinstance(entry, (tuple, list)) and len(entry) == 2:
            raw_inputs, callback = entry
            if not callable(callback):
                raise BindingParseError(f"callback for {output!r} is not callable: {callback!r}")
            inputs = _split_inputs(raw_inputs, output)
        else:
            raise BindingParseError(
                f"binding for {output!r} must be a callable or an (inputs, callback) pair, "
                f"got {entry!r}"
            )
        _check_arity(callback, len(inputs), output)
        bindings.append(Binding(inputs, output, callback))
    return bindings


def _clean_name(name: object, role: str) -> str:
    if not isinstance(name, str) or not name.strip():
        raise BindingParseError(f"{role} property name must be a non-empty string, got {name!r}")
    return name.strip()


def _split_inputs(raw: object, output: str) -> list[str]:
    if isinstance(raw, str):
        parts = raw.split(",")
    elif isinstance(raw, (tuple, list)):
        parts = list(raw)
    else:
        raise BindingParseError(f"inputs for {output!r} must be a string or a sequence, got {raw!r}")
    if not parts or parts == [""]:
        raise BindingParseError(f"binding for {output!r} has no inputs")
    return [_clean_name(part, "input") for part in parts]


def _parameter_names(callback: Callable, output: str) -> list[str]:
    try:
        params = inspect.signature(callback).parameters.values()
    except (TypeError, ValueError) as exc:
        raise BindingParseError(f"cannot infer inputs for {output!r} from {callback!r}") from exc
    names = [
        p.name
        for p in params
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
    ]
    if not names:
        raise BindingParseError(f"binding for {output!r} has no inputs")
    return names


def _check_arity(callback: Callable, count: int, output: str) -> None:
    try:
        signature = inspect.signature(callback)
    except (TypeError, ValueError):
        return  # builtins without introspectable signatures
    try:
        signature.bind(*range(count))
    except TypeError as exc:
        raise BindingParseError(
            f"callback for {output!r} cannot take {count} positional argument(s)"
        ) from exc
