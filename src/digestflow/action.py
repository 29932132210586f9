"""Actions and transactions — batched mutations with one digest at the end.

Wrapping mutations in an @action or `with transaction()` runs a single
digest when the outermost scope exits, so dependents see all of the changes
at once instead of one pass per write.
"""

from __future__ import annotations

import functools
from contextlib import contextmanager
from typing import Callable, Iterator, ParamSpec, TypeVar, overload

from digestflow.runtime import Runtime, get_runtime

P = ParamSpec("P")
R = TypeVar("R")


@contextmanager
def transaction(runtime: Runtime | None = None) -> Iterator[Runtime]:
    """Context manager for batching mutations.

    Usage:
        with transaction():
            model.set("width", 4)
            model.set("height", 5)
            # area is recomputed here, once
    """
    runtime = runtime if runtime is not None else get_runtime()
    runtime.begin_batch()
    try:
        yield runtime
    finally:
        runtime.end_batch()


@overload
def action(fn: Callable[P, R]) -> Callable[P, R]: ...


@overload
def action(*, runtime: Runtime) -> Callable[[Callable[P, R]], Callable[P, R]]: ...


def action(fn=None, *, runtime=None):
    """Decorator: run fn inside a transaction.

    Usage:
        @action
        def resize(w, h):
            model.set("width", w)
            model.set("height", h)

        @action(runtime=my_runtime)
        def reset():
            ...
    """

    def decorate(fn: Callable[P, R]) -> Callable[P, R]:
        @functools.wraps(fn)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            with transaction(runtime):
                return fn(*args, **kwargs)

        return wrapper

    if fn is None:
        return decorate
    return decorate(fn)
