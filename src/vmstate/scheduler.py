"""Owning context — the one thread allowed to publish state changes.

Call set_scheduler() once from the main/UI thread. After that, marshal()
hands work arriving from any other thread to the scheduler, while work on
the owning thread stays synchronous. With no scheduler set, marshal() runs
everything in place.
"""

from __future__ import annotations

import threading
from typing import Callable

_scheduler: Callable[[Callable[[], None]], object] | None = None
_scheduler_thread: threading.Thread | None = None


def set_scheduler(scheduler) -> None:
    """Set the global thread scheduler for cross-thread publication.

    Call once from the main/UI thread:
        vmstate.set_scheduler(app.call_from_thread)
    """
    global _scheduler, _scheduler_thread
    _scheduler = scheduler
    _scheduler_thread = threading.current_thread()


def clear_scheduler() -> None:
    global _scheduler, _scheduler_thread
    _scheduler = None
    _scheduler_thread = None


def on_owner_thread() -> bool:
    return _scheduler is None or threading.current_thread() == _scheduler_thread


def marshal(fn: Callable[[], None]) -> None:
    """Run fn on the owning context. Synchronous when already there."""
    if not on_owner_thread():
        _scheduler(fn)
    else:
        fn()
