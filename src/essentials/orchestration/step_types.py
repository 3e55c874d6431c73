"""Step Types — the tagged variants a runner plan is made of.

A ``Runner`` accumulates ``Step`` values during the build phase; the
``StepEngine`` interprets them during ``finish()``. Steps are frozen and hold
their functions by reference, so a plan can be built once and inspected
without running anything.

ARCHITECTURE
────────────
::

    Step (frozen dataclass, tagged by StepType)
      ├── Step.put(name, value)                 → PUT     seed a value
      ├── Step.sync(name, fn)                   → SYNC    run in plan order
      ├── Step.async_(name, fn)                 → ASYNC   run in a concurrent batch
      ├── Step.branch(predicate, continuation)  → BRANCH  splice when predicate holds
      ├── Step.switch(selector)                 → SWITCH  splice selected continuation
      └── Step.halt(name, reason)               → HALT    fail the run here

Step functions receive a read-only snapshot of ``changes`` and return
``Ok(value)`` or ``Err(reason)``.

Related modules:
    runner.py   — builder API producing Steps
    engine.py   — executes Steps
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from essentials.core.result import Result
    from essentials.orchestration.runner import Runner


Changes = Mapping[str, Any]
PredicateFn = Callable[[Changes], bool]
ContinuationFn = Callable[["Runner"], "Runner"]
SelectorFn = Callable[[Changes], ContinuationFn]


@runtime_checkable
class StepFunction(Protocol):
    """
    Protocol for step functions.

    Plain functions and callable objects both qualify:
    - ``def charge(changes) -> Result``
    - ``class Charge: def __call__(self, changes) -> Result``
    """

    def __call__(self, changes: Changes) -> Result[Any, Any]:
        """Compute the step value from the current changes."""
        ...


class StepType(str, Enum):
    """Type of runner step."""

    PUT = "put"
    SYNC = "sync"
    ASYNC = "async"
    BRANCH = "branch"
    SWITCH = "switch"
    HALT = "halt"


# Step types that claim a name in ``changes`` (or, for HALT, in the failure triple)
NAMED_STEP_TYPES = frozenset({StepType.PUT, StepType.SYNC, StepType.ASYNC, StepType.HALT})


@dataclass(frozen=True)
class Step:
    """
    A single registered step.

    Use the factory methods rather than the constructor. Only the fields
    relevant to ``step_type`` are set.
    """

    step_type: StepType
    name: str | None = None

    value: Any = None  # Put
    function: StepFunction | None = None  # Sync / Async
    predicate: PredicateFn | None = None  # Branch
    continuation: ContinuationFn | None = None  # Branch
    selector: SelectorFn | None = None  # Switch
    reason: Any = None  # Halt

    # =========================================================================
    # Factory Methods
    # =========================================================================

    @classmethod
    def put(cls, name: str, value: Any) -> Step:
        """Create a step that seeds ``value`` under ``name``."""
        return cls(step_type=StepType.PUT, name=name, value=value)

    @classmethod
    def sync(cls, name: str, function: StepFunction) -> Step:
        """Create a step executed in plan order."""
        return cls(step_type=StepType.SYNC, name=name, function=function)

    @classmethod
    def async_(cls, name: str, function: StepFunction) -> Step:
        """Create a step executed concurrently with its batch siblings."""
        return cls(step_type=StepType.ASYNC, name=name, function=function)

    @classmethod
    def branch(cls, predicate: PredicateFn, continuation: ContinuationFn) -> Step:
        """Create a conditional splice point."""
        return cls(step_type=StepType.BRANCH, predicate=predicate, continuation=continuation)

    @classmethod
    def switch(cls, selector: SelectorFn) -> Step:
        """Create an unconditional splice point resolved by ``selector``."""
        return cls(step_type=StepType.SWITCH, selector=selector)

    @classmethod
    def halt(cls, name: str, reason: Any) -> Step:
        """Create a step that fails the run with ``reason``."""
        return cls(step_type=StepType.HALT, name=name, reason=reason)

    # =========================================================================
    # Introspection
    # =========================================================================

    @property
    def is_named(self) -> bool:
        return self.step_type in NAMED_STEP_TYPES

    @property
    def is_barrier(self) -> bool:
        """Whether pending async work must be flushed before this step runs."""
        return self.step_type is not StepType.ASYNC

    def to_dict(self) -> dict[str, Any]:
        """Describe the step for logging (functions are not serialized)."""
        d: dict[str, Any] = {"type": self.step_type.value}
        if self.name is not None:
            d["name"] = self.name
        if self.step_type is StepType.HALT:
            d["reason"] = repr(self.reason)
        return d

    def __repr__(self) -> str:
        if self.name is None:
            return f"Step({self.step_type.value})"
        return f"Step({self.step_type.value}, {self.name!r})"


def step_names(steps: Any) -> list[str]:
    """Names claimed by ``steps``, in order (branch/switch steps claim none)."""
    return [step.name for step in steps if step.is_named]
