"""Fire-and-forget background work.

enqueue() runs a Worker's do_work() once in a daemon thread and reports
the WorkResult through the returned WorkHandle. Workers do not touch the
counter or the lookup.
"""

from __future__ import annotations

import enum
import logging
from threading import Event, Thread

logger = logging.getLogger("vmstate.worker")


class WorkResult(enum.Enum):
    SUCCESS = "success"
    FAILURE = "failure"


class Worker:
    """One unit of background work."""

    def do_work(self) -> WorkResult:
        raise NotImplementedError


class SimpleWorker(Worker):
    def do_work(self) -> WorkResult:
        logger.debug("do work in SimpleWorker")
        return WorkResult.SUCCESS


class WorkHandle:
    """Completion handle for an enqueued worker."""

    __slots__ = ("_done", "_result")

    def __init__(self) -> None:
        self._done = Event()
        self._result: WorkResult | None = None

    @property
    def result(self) -> WorkResult | None:
        """None until the worker has finished."""
        return self._result

    def wait(self, timeout: float | None = None) -> WorkResult | None:
        self._done.wait(timeout)
        return self._result

    def _finish(self, result: WorkResult) -> None:
        self._result = result
        self._done.set()


def enqueue(worker: Worker) -> WorkHandle:
    """Run worker.do_work() in a daemon thread. Returns WorkHandle.

    Usage:
        handle = enqueue(SimpleWorker())
        handle.wait(1) is WorkResult.SUCCESS
    """
    handle = WorkHandle()
    name = type(worker).__name__

    def _run() -> None:
        try:
            result = worker.do_work()
        except Exception:
            logger.exception("%s failed", name)
            result = WorkResult.FAILURE
        if not isinstance(result, WorkResult):
            logger.warning("%s returned %r, treating as failure", name, result)
            result = WorkResult.FAILURE
        handle._finish(result)

    Thread(target=_run, name=f"vmstate-{name}", daemon=True).start()
    return handle
