"""CounterViewModel — a counter and a user lookup behind one host lifecycle.

The host (an app screen, a session) creates the view-model with the count
it wants to restore and disposes it on teardown. After dispose() no
subscriber of either component is called again.
"""

from __future__ import annotations

from typing import Callable

from vmstate.counter import ObservableCounter
from vmstate.lookup import DEFAULT_RESOLVE_TIMEOUT, KeyedLookup


class CounterViewModel:
    """View state for a counter screen that also shows a looked-up user."""

    def __init__(
        self,
        count_reserved: int,
        resolver: Callable[[str], object],
        *,
        timeout: float | None = DEFAULT_RESOLVE_TIMEOUT,
        executor=None,
    ) -> None:
        self.counter = ObservableCounter(count_reserved)
        self.user: KeyedLookup[str, object] = KeyedLookup(
            resolver, timeout=timeout, executor=executor
        )

    def plus_one(self) -> None:
        self.counter.increment()

    def clear(self) -> None:
        self.counter.reset()

    def get_user(self, user_id: str) -> None:
        self.user.set_key(user_id)

    def dispose(self) -> None:
        self.counter.dispose()
        self.user.dispose()

    def __enter__(self) -> CounterViewModel:
        return self

    def __exit__(self, *exc) -> None:
        self.dispose()
