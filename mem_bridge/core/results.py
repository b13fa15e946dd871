"""Discriminated results for worker calls.

Every boundary call returns ``Success`` or ``Failure`` instead of raising,
so handlers can be tested without patching loggers.  Swallow-and-log is
applied only at the outermost hook registration point in ``plugin.py``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from mem_bridge.core.errors import WorkerError

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """A call that completed.  ``value`` is ``None`` for skipped no-ops."""

    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """A call that failed, with the typed reason."""

    error: WorkerError

    @property
    def ok(self) -> bool:
        return False

    @property
    def reason(self) -> str:
        return self.error.reason

    @property
    def message(self) -> str:
        return str(self.error)


WorkerResult = Union[Success[Any], Failure]
