"""Keyed lookup — re-resolve a record every time the key changes.

set_key() starts a resolution off the owning context and forgets about
every earlier one. Each call bumps a generation counter; a finished
resolution carries the generation it was started under and is dropped
unless that generation is still current (last-key-wins).

The resolver is an external collaborator: resolve(key) -> record, either
a plain callable or a coroutine function. It runs on an executor, guarded
by a threading.Timer so a hung resolver turns into a ResolverTimeout.
Outcomes are marshaled back onto the owning context before subscribers
see them.

    lookup = KeyedLookup(repository.get_user)
    lookup.subscribe(render)
    lookup.set_key("42")   # render(user) or render(ResolutionFailed(...))
"""

from __future__ import annotations

import asyncio
import enum
import functools
import inspect
import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Callable, Generic, TypeVar

from vmstate.errors import DisposedError, ResolutionFailed, ResolverTimeout
from vmstate.scheduler import marshal
from vmstate.stream import Disposer, EventStream

logger = logging.getLogger("vmstate.lookup")

K = TypeVar("K")
R = TypeVar("R")

DEFAULT_RESOLVE_TIMEOUT = 10.0


class LookupState(enum.Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    RESOLVED = "resolved"
    FAILED = "failed"


async def _await(awaitable):
    return await awaitable


class KeyedLookup(Generic[K, R]):
    """Resolve the record for the latest key; publish only that outcome."""

    def __init__(
        self,
        resolver: Callable[[K], R],
        *,
        timeout: float | None = DEFAULT_RESOLVE_TIMEOUT,
        executor: Executor | None = None,
    ) -> None:
        self._resolver = resolver
        self._timeout = timeout
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(thread_name_prefix="vmstate-lookup")
        self._outcomes: EventStream[R | ResolutionFailed] = EventStream()
        self._lock = threading.Lock()
        # held from the staleness check through emit(); reentrant for nested settles
        self._publish_lock = threading.RLock()
        self._state = LookupState.IDLE
        self._key: K | None = None
        self._record: R | None = None
        self._generation = 0
        self._settled = 0
        self._pending: Future | None = None
        self._timer: threading.Timer | None = None

    @property
    def state(self) -> LookupState:
        return self._state

    @property
    def key(self) -> K | None:
        return self._key

    @property
    def record(self) -> R | None:
        """Last successfully resolved record. Failures leave it untouched."""
        return self._record

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def disposed(self) -> bool:
        return self._outcomes.disposed

    def set_key(self, key: K) -> None:
        """Start resolving key. Any earlier resolution is abandoned."""
        if self.disposed:
            raise DisposedError("lookup used after dispose()")

        with self._lock:
            self._generation += 1
            generation = self._generation
            self._key = key
            self._state = LookupState.RESOLVING
            self._cancel_timer()
            previous, self._pending = self._pending, None

        if previous is not None:
            previous.cancel()  # only succeeds if it never started
        logger.debug("resolving %r (generation %d)", key, generation)

        try:
            future = self._executor.submit(self._call_resolver, key)
        except Exception as exc:
            logger.exception("could not start resolving %r", key)
            self._settle(generation, key, error=exc)
            return

        with self._lock:
            # another set_key may have superseded this one already
            if generation == self._generation:
                self._pending = future
                if self._timeout is not None:
                    timer = threading.Timer(self._timeout, self._expire, args=(generation, key))
                    timer.daemon = True
                    self._timer = timer
                    timer.start()

        future.add_done_callback(functools.partial(self._complete, generation, key))

    def subscribe(self, callback: Callable[[R | ResolutionFailed], None]) -> Disposer:
        """Register callback for outcomes of the current and future keys.

        A subscriber added after a successful resolution is handed that
        record right away. Failures are delivered once, to the subscribers
        present when they happen.
        """
        unsubscribe = self._outcomes.subscribe(callback)
        if self._state is LookupState.RESOLVED and not self.disposed:
            callback(self._record)
        return unsubscribe

    def dispose(self) -> None:
        """Unsubscribe everyone and drop whatever is still in flight."""
        self._outcomes.dispose()
        with self._lock:
            self._cancel_timer()
            pending, self._pending = self._pending, None
        if pending is not None:
            pending.cancel()
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)

    # --- Resolution plumbing ---

    def _call_resolver(self, key: K) -> R:
        """Runs on the executor."""
        result = self._resolver(key)
        if inspect.isawaitable(result):
            result = asyncio.run(_await(result))
        return result

    def _complete(self, generation: int, key: K, future: Future) -> None:
        """Done-callback: runs on whichever thread finished the future."""
        if future.cancelled():
            return
        error = future.exception()
        if error is None:
            record = future.result()
            marshal(lambda: self._settle(generation, key, record=record))
        else:
            marshal(lambda: self._settle(generation, key, error=error))

    def _expire(self, generation: int, key: K) -> None:
        error = ResolverTimeout(key, self._timeout)
        marshal(lambda: self._settle(generation, key, error=error))

    def _settle(self, generation: int, key: K, record=None, error: BaseException | None = None) -> None:
        """Publish one outcome, unless it is stale or a sibling already won.

        Settles are serialised end to end: an outcome is checked and emitted
        under the publish lock, so a superseded result can never reach a
        subscriber after the result that replaced it.
        """
        with self._publish_lock:
            with self._lock:
                if self.disposed or generation != self._generation or self._settled == generation:
                    logger.debug(
                        "dropping outcome for %r (generation %d, current %d)",
                        key, generation, self._generation,
                    )
                    return
                self._settled = generation
                self._cancel_timer()
                self._pending = None
                if error is None:
                    self._state = LookupState.RESOLVED
                    self._record = record
                    outcome = record
                else:
                    self._state = LookupState.FAILED
                    outcome = ResolutionFailed(key, error)

            if error is not None:
                logger.warning("resolving %r failed: %s", key, outcome.reason)
            self._outcomes.emit(outcome, stale=lambda: self._generation != generation)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def __repr__(self) -> str:
        state = "disposed" if self.disposed else self._state.value
        return f"KeyedLookup(key={self._key!r}, {state})"
