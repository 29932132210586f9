"""digestflow: an incremental dataflow runtime with explicit digest passes."""

from importlib.metadata import version as _version

__version__ = _version("digestflow")

from digestflow.errors import (
    DigestflowError,
    UnboundFunctionError,
    BindingParseError,
    FinalizedModelError,
    DuplicateFinalizationError,
    UnknownPropertyError,
)
from digestflow.graph import Graph
from digestflow.binding import Binding, parse
from digestflow.runtime import Runtime, get_runtime, set_runtime, digest, get_pending_count
from digestflow.action import action, transaction
from digestflow.model import Model
# textual NOT auto-imported — opt-in only

__all__ = [
    "DigestflowError",
    "UnboundFunctionError",
    "BindingParseError",
    "FinalizedModelError",
    "DuplicateFinalizationError",
    "UnknownPropertyError",
    "Graph",
    "Binding",
    "parse",
    "Runtime",
    "get_runtime",
    "set_runtime",
    "digest",
    "get_pending_count",
    "action",
    "transaction",
    "Model",
]
