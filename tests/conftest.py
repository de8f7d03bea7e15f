"""Shared fixtures: a hand-driven executor and a clean owning context."""

from concurrent.futures import Executor, Future

import pytest

from vmstate import scheduler


@pytest.fixture(autouse=True)
def _no_scheduler():
    """Every test starts (and ends) without a global scheduler."""
    scheduler.clear_scheduler()
    yield
    scheduler.clear_scheduler()


class ManualExecutor(Executor):
    """Executor whose jobs only run when the test says so.

    start(i) marks job i as running (so it can no longer be cancelled);
    finish(i) runs it and settles its future on the calling thread.
    """

    def __init__(self):
        self.jobs: list[tuple[Future, object, tuple]] = []

    def submit(self, fn, /, *args, **kwargs):
        future = Future()
        self.jobs.append((future, fn, args))
        return future

    def start(self, index):
        future = self.jobs[index][0]
        return future.set_running_or_notify_cancel()

    def finish(self, index):
        future, fn, args = self.jobs[index]
        if not future.running() and not self.start(index):
            return  # cancelled before it ever ran
        try:
            future.set_result(fn(*args))
        except Exception as exc:
            future.set_exception(exc)


@pytest.fixture
def manual_executor():
    return ManualExecutor()
