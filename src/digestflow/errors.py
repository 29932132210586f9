"""Exception hierarchy.

Misuse of the registration API fails fast, before the graph is touched.
Exceptions raised by binding callbacks are never wrapped: they propagate
out of Runtime.digest() exactly as the callback raised them.
"""


class DigestflowError(Exception):
    """Base class for all digestflow errors."""


class UnboundFunctionError(DigestflowError):
    """A binding was registered or bound before its nodes were resolved."""


class BindingParseError(DigestflowError, ValueError):
    """Declarative binding options could not be parsed."""


class FinalizedModelError(DigestflowError):
    """A model was modified in a way only allowed before finalize()."""


class DuplicateFinalizationError(FinalizedModelError):
    """Model.finalize() was called more than once."""


class UnknownPropertyError(DigestflowError, KeyError):
    """A model was asked about a property it does not know."""
