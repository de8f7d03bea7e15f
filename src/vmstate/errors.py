"""Error taxonomy.

Resolver failures never raise out of a lookup: they travel down the same
channel as records, wrapped in ResolutionFailed. The exception classes
below are what a ResolutionFailed may carry, plus the guard raised when a
torn-down component is used again.
"""

from __future__ import annotations

from dataclasses import dataclass


class ResolverTimeout(TimeoutError):
    """The resolver did not answer within the lookup's timeout."""

    def __init__(self, key: object, timeout: float) -> None:
        super().__init__(f"resolving {key!r} timed out after {timeout:g}s")
        self.key = key
        self.timeout = timeout


class DisposedError(RuntimeError):
    """A component was used after its host disposed it."""


@dataclass(frozen=True)
class ResolutionFailed:
    """Failure state delivered to lookup subscribers in place of a record."""

    key: object
    error: BaseException

    @property
    def reason(self) -> str:
        return str(self.error) or type(self.error).__name__
