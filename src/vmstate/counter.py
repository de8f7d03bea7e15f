"""Observable counter — an integer cell that pushes every change.

The value is owned by the counter; subscribers get it immediately on
subscribe and again after each increment/reset, in subscription order.
There is no deduplication: resetting an already-zero counter still
notifies.

Mutations from a background thread are marshaled to the owning context
(see vmstate.scheduler). Owning-thread mutations notify synchronously.
"""

from __future__ import annotations

from typing import Callable

from vmstate.errors import DisposedError
from vmstate.scheduler import marshal
from vmstate.stream import Disposer, EventStream


class ObservableCounter:
    """An integer value with subscribers, increment and reset."""

    __slots__ = ("_value", "_changes")

    def __init__(self, initial: int | None = None) -> None:
        self._value: int | None = None
        self._changes: EventStream[int] = EventStream()
        if initial is not None:
            self.initialize(initial)

    @property
    def disposed(self) -> bool:
        return self._changes.disposed

    def get(self) -> int | None:
        """Current value; None only before initialize()."""
        return self._value

    def initialize(self, value: int) -> None:
        """Set the starting value.

        Meant to be called once, before any read; the constructor does it when
        given an initial value. Calling it again is allowed and behaves like a
        plain set: the value is replaced and subscribers are notified.
        """
        self._mutate(lambda: value)

    def increment(self) -> None:
        """value + 1, treating an unset value as 0."""
        self._mutate(lambda: (self._value or 0) + 1)

    def reset(self) -> None:
        self._mutate(lambda: 0)

    def subscribe(self, callback: Callable[[int], None]) -> Disposer:
        """Register callback; it is called right away with the current value."""
        unsubscribe = self._changes.subscribe(callback)
        if self._value is not None and not self.disposed:
            callback(self._value)
        return unsubscribe

    def dispose(self) -> None:
        """Unregister all subscribers. The counter becomes inert."""
        self._changes.dispose()

    def _mutate(self, next_value: Callable[[], int]) -> None:
        if self.disposed:
            raise DisposedError("counter used after dispose()")
        # next_value is evaluated on the owning context, not the caller's thread
        marshal(lambda: self._write(next_value()))

    def _write(self, value: int) -> None:
        if self.disposed:
            return
        self._value = value
        self._changes.emit(value)

    def __repr__(self) -> str:
        state = "disposed" if self.disposed else f"{self._value!r}"
        return f"ObservableCounter({state})"
