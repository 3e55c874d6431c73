"""Runner — build a flow of named steps, then execute it once.

WHY
───
Business flows are often "do A, then B and C concurrently, then D with all of
their results, and compensate if something went wrong". ``Runner`` models
such a flow as a plan of **named steps**, each contributing one value to a
shared mapping called ``changes``.

The runner is **built first** and **executed later**:

- ``put``, ``run``, ``run_async``, ``branch``, ``switch`` and ``halt`` only
  register steps (``put`` also records its value for preview)
- nothing runs until ``finish()``

ARCHITECTURE
────────────
::

    Runner (frozen; every call returns a new Runner)
      ├── .new(timeout=None)              ─ empty plan
      ├── .put(name, value)               ─ seed a value
      ├── .run(name, fn)                  ─ sync step
      ├── .run_async(name, fn)            ─ async step (concurrent batch)
      ├── .branch(predicate, continuation)─ conditional splice at runtime
      ├── .switch(selector)               ─ selected splice at runtime
      ├── .then(continuation)             ─ composition helper
      ├── .halt(name, reason)             ─ fail the flow at this point
      └── .finish(transform=None)         ─ execute via StepEngine

    finish() → Ok(changes) | Err(RunFailure(step, reason, changes_before))

Execution is fail-fast: the first failing step stops the flow, and the error
carries the failing step name plus the ``changes`` accumulated before it.

Example::

    from essentials.core.result import Ok
    from essentials.orchestration import Runner

    result = (
        Runner.new(timeout=5_000)
        .put("value", 1)
        .run("sync_step", lambda _: Ok(2))
        .run_async("async_step", lambda _: Ok(3))
        .run("sum", lambda c: Ok(c["value"] + c["sync_step"] + c["async_step"]))
        .finish()
    )
    # Ok({'value': 1, 'sync_step': 2, 'async_step': 3, 'sum': 6})
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, TypeVar

from essentials.core.errors import InvalidConfigError
from essentials.core.result import Result
from essentials.core.settings import DEFAULT_RUNNER_TIMEOUT_MS, get_settings
from essentials.orchestration.exceptions import DuplicateStepNameError
from essentials.orchestration.step_result import RunFailure
from essentials.orchestration.step_types import (
    ContinuationFn,
    PredicateFn,
    SelectorFn,
    Step,
    StepFunction,
    StepType,
)

T = TypeVar("T")

FinishResult = Result[dict[str, Any], RunFailure]


class RunnerState(str, Enum):
    """Build-time state of a runner."""

    BUILDING = "building"
    FAILED = "failed"


def _require_name(name: Any) -> None:
    if not isinstance(name, str):
        raise TypeError(f"Step name must be a str, got {type(name).__name__}")


def _require_callable(fn: Any, what: str) -> None:
    if not callable(fn):
        raise TypeError(f"{what} must be callable, got {type(fn).__name__}")


@dataclass(frozen=True, eq=False)
class Runner:
    """
    An immutable step plan.

    Runners compare and hash by identity.

    Attributes:
        steps: Registered steps, in execution order
        timeout: Milliseconds to wait for each batch of async steps
        state: BUILDING, or FAILED once ``halt`` was called
        failed_step: Name passed to ``halt``
        error_reason: Reason passed to ``halt``
        seed: The changes execution starts from
        reserved: Names claimed outside this plan (set on continuation runners)
    """

    steps: tuple[Step, ...] = ()
    timeout: int = DEFAULT_RUNNER_TIMEOUT_MS
    state: RunnerState = RunnerState.BUILDING
    failed_step: str | None = None
    error_reason: Any = None
    seed: dict[str, Any] = field(default_factory=dict)
    reserved: frozenset[str] = frozenset()

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def new(cls, timeout: int | None = None) -> Runner:
        """
        Create an empty runner.

        Args:
            timeout: Milliseconds to wait for a batch of async steps. Defaults
                to ``ESSENTIALS_RUNNER_TIMEOUT_MS`` (5000).

        Raises:
            InvalidConfigError: If ``timeout`` is not a positive number.
        """
        if timeout is None:
            timeout = get_settings().runner_timeout_ms
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise InvalidConfigError(
                f"timeout must be a positive number of milliseconds, got {timeout!r}",
                key="timeout",
            )
        return cls(timeout=timeout)

    @classmethod
    def continuation_of(
        cls, changes: dict[str, Any], timeout: int, reserved: frozenset[str]
    ) -> Runner:
        """Runner handed to a branch/switch continuation during execution."""
        return cls(
            seed=dict(changes),
            timeout=timeout,
            reserved=reserved,
        )

    # =========================================================================
    # State
    # =========================================================================

    @property
    def failed(self) -> bool:
        return self.state is RunnerState.FAILED

    @property
    def changes(self) -> dict[str, Any]:
        """Build-time preview: ``seed`` plus every ``put`` value registered so far.

        Execution always starts from ``seed``; values produced by steps only
        appear in the result of ``finish()``.
        """
        preview = dict(self.seed)
        for step in self.steps:
            if step.step_type is StepType.PUT:
                preview[step.name] = step.value
        return preview

    @property
    def names(self) -> list[str]:
        """Names claimed by this plan, in registration order."""
        return [step.name for step in self.steps if step.is_named]

    def _assert_unique(self, name: str) -> None:
        if name in self.reserved or name in self.names:
            raise DuplicateStepNameError(name)

    def _append(self, step: Step, **overrides: Any) -> Runner:
        return replace(self, steps=self.steps + (step,), **overrides)

    # =========================================================================
    # Plan Builders
    # =========================================================================

    def put(self, name: str, value: Any) -> Runner:
        """
        Seed ``value`` under ``name`` and register a put step.

        The value is visible in ``runner.changes`` right away.

        Raises:
            DuplicateStepNameError: If ``name`` was already used.
        """
        if self.failed:
            return self
        _require_name(name)
        self._assert_unique(name)
        return self._append(Step.put(name, value))

    def run(self, name: str, function: StepFunction) -> Runner:
        """
        Register a synchronous step.

        ``function`` receives the current changes during ``finish()`` and
        returns ``Ok(result)`` (stored under ``name``) or ``Err(reason)``
        (stops the flow).
        """
        if self.failed:
            return self
        _require_name(name)
        _require_callable(function, "Step function")
        self._assert_unique(name)
        return self._append(Step.sync(name, function))

    def run_async(self, name: str, function: StepFunction) -> Runner:
        """
        Register an asynchronous step.

        Consecutive async steps run concurrently, each against a snapshot of
        changes taken when execution reaches it. Their results become visible
        at the next synchronization point (put, run, branch, switch, halt or
        the end of the flow).
        """
        if self.failed:
            return self
        _require_name(name)
        _require_callable(function, "Step function")
        self._assert_unique(name)
        return self._append(Step.async_(name, function))

    def then(self, continuation: ContinuationFn) -> Runner:
        """Apply ``continuation`` to this runner (composition helper)."""
        if self.failed:
            return self
        _require_callable(continuation, "Continuation")
        return continuation(self)

    def branch(self, predicate: PredicateFn, continuation: ContinuationFn) -> Runner:
        """
        Apply ``continuation`` at runtime when ``predicate(changes)`` is true.

        The steps built by the continuation run before any step registered
        after this branch.
        """
        if self.failed:
            return self
        _require_callable(predicate, "Predicate")
        _require_callable(continuation, "Continuation")
        return self._append(Step.branch(predicate, continuation))

    def switch(self, selector: SelectorFn) -> Runner:
        """
        Select a continuation at runtime from ``selector(changes)`` and apply it.
        """
        if self.failed:
            return self
        _require_callable(selector, "Selector")
        return self._append(Step.switch(selector))

    def halt(self, name: str, reason: Any) -> Runner:
        """
        Fail the flow at this point with ``reason``.

        Steps registered before the halt still run during ``finish()``; the
        result is then ``Err(RunFailure(name, reason, changes))``. Every
        builder call after a halt is a no-op.
        """
        if self.failed:
            return self
        _require_name(name)
        self._assert_unique(name)
        return self._append(
            Step.halt(name, reason),
            state=RunnerState.FAILED,
            failed_step=name,
            error_reason=reason,
        )

    # =========================================================================
    # Execution
    # =========================================================================

    def finish(self, transform: Callable[[FinishResult], T] | None = None) -> FinishResult | T:
        """
        Execute the flow.

        Returns:
            ``Ok(changes)`` when every step succeeds, or
            ``Err(RunFailure(step, reason, changes_before))`` when one fails.
            With ``transform``, returns ``transform(result)`` instead.
        """
        from essentials.orchestration.engine import StepEngine

        result = StepEngine(timeout_ms=self.timeout).execute(self)
        if transform is None:
            return result
        return transform(result)

    def __repr__(self) -> str:
        return f"Runner(steps={list(self.steps)!r}, state={self.state.value}, timeout={self.timeout})"
