"""Textual host binding for vmstate. Opt-in — requires textual.

A running Textual App plays the owning context: use_app() routes
background publication through app.call_from_thread, and bind() attaches
widget-updating callbacks that stay quiet while the widget tree is being
swapped (pause) or the app is not running.

// [LAW:locality-or-seam] Textual coupling lives here; counter and lookup never import it.
// [LAW:no-shared-mutable-globals] _paused_apps is owned by this module (id present ↔ inside pause).
"""

import threading
from contextlib import contextmanager

from textual.css.query import NoMatches
from vmstate.scheduler import set_scheduler

# Module-owned pause state — keyed by id(app) so multiple apps work in tests.
_paused_apps: set[int] = set()


def use_app(app) -> None:
    """Make app the owning context. Call from the app's thread, e.g. in on_mount."""
    set_scheduler(app.call_from_thread)


@contextmanager
def pause(app):
    """Suspend bound callbacks during widget replacement."""
    key = id(app)
    _paused_apps.add(key)
    try:
        yield
    finally:
        _paused_apps.discard(key)


def is_safe(app) -> bool:
    """Is the widget tree in a queryable state?"""
    return app.is_running and id(app) not in _paused_apps


def bind(app, source, callback):
    """source.subscribe() that safely bridges to Textual widgets.

    source is an ObservableCounter or KeyedLookup. Guards against firing
    during pause/not-running, catches NoMatches from widget queries, and
    marshals cross-thread calls via call_from_thread. Returns the disposer.
    """
    _main = threading.get_ident()

    def _guarded(value):
        if not is_safe(app):
            return
        if threading.get_ident() != _main:
            app.call_from_thread(_safe, value)
        else:
            _safe(value)

    def _safe(value):
        try:
            callback(value)
        except NoMatches:
            pass

    return source.subscribe(_guarded)
