"""Textual integration for digestflow. Opt-in — requires textual.

Drives digests from a Textual app's event loop so callbacks that push values
into widgets always run on the app's thread, and never while the widget tree
is being rebuilt.

Usage:
    class Dashboard(App):
        def on_mount(self):
            self.model.react({"label": ("count", self.render_count)})
            digestflow.textual.auto_digest(self, self.model.runtime)

        def rebuild(self):
            with digestflow.textual.pause(self):
                ...  # replace widgets; digests wait until this exits
"""

from __future__ import annotations

import logging
from contextlib import contextmanager

from textual.css.query import NoMatches

from digestflow.runtime import Runtime, get_runtime

logger = logging.getLogger("digestflow.textual")

# Module-owned pause state, keyed by id(app) so multiple apps work in tests.
_paused_apps: set[int] = set()


@contextmanager
def pause(app):
    """Suspend guarded digests during widget replacement."""
    key = id(app)
    _paused_apps.add(key)
    try:
        yield
    finally:
        _paused_apps.discard(key)


def is_safe(app) -> bool:
    """Is the widget tree in a queryable state?"""
    return app.is_running and id(app) not in _paused_apps


def digest(app, runtime: Runtime | None = None) -> bool:
    """Digest runtime if app can take widget updates. Returns True if a pass completed.

    Skipped while paused, while the app is not running and while a
    transaction is open. NoMatches raised by a callback querying a widget
    that is not mounted yet leaves the pending changes dirty for the next
    attempt; any other exception propagates.
    """
    runtime = runtime if runtime is not None else get_runtime()
    if not is_safe(app) or runtime.in_batch:
        return False
    try:
        runtime.digest()
    except NoMatches as exc:
        logger.debug("Digest deferred, widget not mounted: %s", exc)
        return False
    return True


def auto_digest(app, runtime: Runtime | None = None, interval: float = 1 / 30):
    """Digest runtime on an app timer whenever changes are pending.

    Returns the Textual timer (call .stop() to end it).
    """
    runtime = runtime if runtime is not None else get_runtime()

    def _tick() -> None:
        if runtime.pending_count:
            digest(app, runtime)

    return app.set_interval(interval, _tick)
