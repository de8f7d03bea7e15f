"""vmstate: observable view-model state — counters and keyed lookups."""

from importlib.metadata import version as _version

__version__ = _version("vmstate")

from vmstate.stream import EventStream
from vmstate.scheduler import set_scheduler, clear_scheduler
from vmstate.errors import ResolutionFailed, ResolverTimeout, DisposedError
from vmstate.counter import ObservableCounter
from vmstate.lookup import KeyedLookup, LookupState, DEFAULT_RESOLVE_TIMEOUT
from vmstate.viewmodel import CounterViewModel
from vmstate.worker import Worker, SimpleWorker, WorkResult, WorkHandle, enqueue
# textual NOT auto-imported — opt-in only

__all__ = [
    "EventStream",
    "set_scheduler",
    "clear_scheduler",
    "ResolutionFailed",
    "ResolverTimeout",
    "DisposedError",
    "ObservableCounter",
    "KeyedLookup",
    "LookupState",
    "DEFAULT_RESOLVE_TIMEOUT",
    "CounterViewModel",
    "Worker",
    "SimpleWorker",
    "WorkResult",
    "WorkHandle",
    "enqueue",
]
