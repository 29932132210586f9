"""Node arena entries — one tagged variant per node id.

A runtime keeps every node in a single dict keyed by id. The entry's kind
says whether the id is a property (backed by an accessor) or a function
(backed by a binding).
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Protocol, Union

if TYPE_CHECKING:
    from digestflow.binding import Binding


class Accessor(Protocol):
    """Read/write capability over one property's value cell.

    set() is expected to store the value and mark the property dirty.
    """

    def get(self) -> object: ...

    def set(self, value: object) -> None: ...


class NodeKind(enum.Enum):
    PROPERTY = "property"
    FUNCTION = "function"


class PropertyNode:
    __slots__ = ("id", "accessor")

    kind = NodeKind.PROPERTY

    def __init__(self, node_id: int, accessor: Accessor) -> None:
        self.id = node_id
        self.accessor = accessor

    def __repr__(self) -> str:
        return f"PropertyNode({self.id})"


class FunctionNode:
    __slots__ = ("id", "binding")

    kind = NodeKind.FUNCTION

    def __init__(self, node_id: int, binding: Binding) -> None:
        self.id = node_id
        self.binding = binding

    def __repr__(self) -> str:
        return f"FunctionNode({self.id}, {self.binding!r})"


Node = Union[PropertyNode, FunctionNode]
