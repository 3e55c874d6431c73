"""Step Result — failure shapes returned by ``Runner.finish()``.

A finished run is either ``Ok(changes)`` or ``Err(RunFailure(...))``:

::

    RunFailure(step, reason, changes)
      step     name of the failing step
      reason   whatever the step returned in Err(reason), or one of:
                 TaskExit     the async task raised (infrastructure crash)
                 TaskTimeout  the async task missed the batch deadline
      changes  values committed strictly before the failing step / batch

``TaskExit`` and ``TaskTimeout`` let callers tell infrastructure problems
apart from business-logic failures.

Example::

    match runner.finish():
        case Ok(changes):
            ...
        case Err(RunFailure(step, TaskTimeout(), _)):
            log.warning("runner.timeout", step=step)
        case Err(RunFailure(step, reason, changes)):
            compensate(step, reason, changes)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class TaskExit:
    """An async step raised instead of returning ``Ok``/``Err``."""

    exception: BaseException

    @property
    def message(self) -> str:
        return f"{type(self.exception).__name__}: {self.exception}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TaskExit):
            return NotImplemented
        return (
            type(self.exception) is type(other.exception)
            and self.exception.args == other.exception.args
        )

    def __hash__(self) -> int:
        return hash((type(self.exception), self.exception.args))


@dataclass(frozen=True)
class TaskTimeout:
    """An async step did not complete within the batch timeout."""

    timeout_ms: int = 0


@dataclass(frozen=True)
class RunFailure:
    """The failure triple: failing step, its reason, and the changes before it."""

    step: str
    reason: Any
    changes: dict[str, Any] = field(default_factory=dict)

    @property
    def is_task_exit(self) -> bool:
        return isinstance(self.reason, TaskExit)

    @property
    def is_timeout(self) -> bool:
        return isinstance(self.reason, TaskTimeout)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logging."""
        if isinstance(self.reason, TaskExit):
            reason: Any = self.reason.message
        else:
            reason = repr(self.reason)
        return {
            "step": self.step,
            "reason": reason,
            "committed": sorted(self.changes),
        }
