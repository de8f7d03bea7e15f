"""Push-based notification channel shared by the counter and the lookup.

Subscribers are plain callables kept in insertion order. emit() walks a
snapshot, so a callback may unsubscribe itself while being notified.
dispose() drops every subscriber and silences the stream for good.
"""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

T = TypeVar("T")

Disposer = Callable[[], None]


def _noop() -> None:
    pass


class EventStream(Generic[T]):
    """Ordered list of subscribers with disposable registrations."""

    __slots__ = ("_subscribers", "_disposed")

    def __init__(self) -> None:
        self._subscribers: list[Callable[[T], None]] = []
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def emit(self, value: T, *, stale: Callable[[], bool] | None = None) -> None:
        """Push a value to all subscribers.

        If stale is given, delivery stops as soon as it returns True, so a
        value superseded mid-emit does not reach the remaining subscribers.
        """
        if self._disposed:
            return
        for cb in list(self._subscribers):
            if stale is not None and stale():
                return
            if cb in self._subscribers:
                cb(value)

    def subscribe(self, callback: Callable[[T], None]) -> Disposer:
        """Register a callback. Returns a function that removes it.

        A disposed stream takes no new subscribers and hands back a no-op.
        """
        if self._disposed:
            return _noop
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            try:
                self._subscribers.remove(callback)
            except ValueError:
                pass  # already removed

        return _unsubscribe

    def dispose(self) -> None:
        """Drop all subscribers. Later emits are ignored."""
        self._disposed = True
        self._subscribers.clear()
