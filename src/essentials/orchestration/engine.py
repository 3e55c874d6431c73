"""Step Engine — drains a runner plan with fail-fast semantics.

The engine walks the plan as a work list popped from the front:

::

    PUT     flush pending async → insert value
    SYNC    flush pending async → fn(snapshot) → Ok: insert | Err: stop
    ASYNC   enqueue (name, fn, snapshot), keep going
    BRANCH  flush → predicate(snapshot) → splice continuation steps in front
    SWITCH  flush → selector(snapshot) → splice continuation steps in front
    HALT    flush → stop with the halt reason
    (end)   flush → Ok(changes)

A flush submits the queued async steps to a thread pool (at most
``max_concurrency`` workers) and waits for all of them, bounded by the runner
timeout. The timeout covers the whole batch, queued tasks included. Each task works on its own read-only
snapshot, so only this thread ever writes ``changes``. A batch is
all-or-nothing: if any task fails, raises or times out, none of its results
are merged and the run stops with the changes from before the batch.

Timed-out tasks cannot be killed; they are abandoned, finish in the
background and their results are discarded.
"""

from __future__ import annotations

import uuid
from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from essentials.core.errors import categorize_error
from essentials.core.logging import LogContext, get_logger
from essentials.core.result import Err, Ok, Result, is_result
from essentials.core.settings import DEFAULT_RUNNER_TIMEOUT_MS, get_settings
from essentials.orchestration.exceptions import (
    DuplicateStepNameError,
    InvalidContinuationError,
    InvalidStepResultError,
)
from essentials.orchestration.runner import Runner
from essentials.orchestration.step_result import RunFailure, TaskExit, TaskTimeout
from essentials.orchestration.step_types import (
    Changes,
    ContinuationFn,
    Step,
    StepFunction,
    StepType,
    step_names,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class PendingStep:
    """An async step waiting for the next flush."""

    name: str
    function: StepFunction
    snapshot: Changes


class _Halt(Exception):
    """Internal signal carrying the failure that stops the walk."""

    def __init__(self, failure: RunFailure):
        super().__init__(failure.step)
        self.failure = failure


def _snapshot(changes: dict[str, Any]) -> Changes:
    return MappingProxyType(dict(changes))


def _check_outcome(step_name: str, outcome: Any) -> Result[Any, Any]:
    if not is_result(outcome):
        raise InvalidStepResultError(step_name, outcome)
    return outcome


class StepEngine:
    """
    Executes a ``Runner`` plan once.

    An engine instance holds the state of a single execution pass and is not
    reused: ``Runner.finish()`` creates a fresh one per call.

    Example::

        engine = StepEngine(timeout_ms=1_000, max_concurrency=8)
        result = engine.execute(runner)
    """

    def __init__(
        self,
        timeout_ms: int = DEFAULT_RUNNER_TIMEOUT_MS,
        max_concurrency: int | None = None,
    ):
        self.timeout_ms = timeout_ms
        self.max_concurrency = max_concurrency or get_settings().runner_max_concurrency
        self.run_id = uuid.uuid4().hex[:12]
        self._plan: deque[Step] = deque()
        self._changes: dict[str, Any] = {}
        self._pending: list[PendingStep] = []
        self._executed: set[str] = set()

    # =========================================================================
    # Entry point
    # =========================================================================

    def execute(self, runner: Runner) -> Result[dict[str, Any], RunFailure]:
        """Drain ``runner``'s plan and return ``Ok(changes)`` or ``Err(RunFailure)``."""
        self._plan = deque(runner.steps)
        self._changes = dict(runner.seed)
        self._pending = []
        self._executed = set(runner.seed)

        with LogContext(run_id=self.run_id):
            logger.debug(
                "runner.started",
                steps=len(self._plan),
                timeout_ms=self.timeout_ms,
            )
            try:
                while self._plan:
                    self._execute_step(self._plan.popleft())
                self._flush()
            except _Halt as halt:
                failure = halt.failure
                logger.warning("runner.step.failed", **failure.to_dict())
                logger.info("runner.finished", status="error", failed_step=failure.step)
                return Err(failure)

            logger.info("runner.finished", status="ok", changes=len(self._changes))
            return Ok(dict(self._changes))

    # =========================================================================
    # Step dispatch
    # =========================================================================

    def _execute_step(self, step: Step) -> None:
        if not step.is_barrier:
            self._pending.append(
                PendingStep(step.name, step.function, _snapshot(self._changes))
            )
            self._executed.add(step.name)
            return

        self._flush()

        match step.step_type:
            case StepType.PUT:
                self._commit(step.name, step.value)
            case StepType.SYNC:
                self._execute_sync(step)
            case StepType.BRANCH:
                if step.predicate(_snapshot(self._changes)):
                    self._splice(step.continuation)
                else:
                    logger.debug("runner.branch.skipped")
            case StepType.SWITCH:
                self._splice(step.selector(_snapshot(self._changes)))
            case StepType.HALT:
                self._executed.add(step.name)
                raise _Halt(RunFailure(step.name, step.reason, dict(self._changes)))

    def _commit(self, name: str, value: Any) -> None:
        self._changes[name] = value
        self._executed.add(name)
        logger.debug("runner.step.completed", step=name)

    def _execute_sync(self, step: Step) -> None:
        outcome = _check_outcome(step.name, step.function(_snapshot(self._changes)))
        match outcome:
            case Ok(value):
                self._commit(step.name, value)
            case Err(reason):
                self._executed.add(step.name)
                raise _Halt(RunFailure(step.name, reason, dict(self._changes)))

    # =========================================================================
    # Dynamic injection
    # =========================================================================

    def _reserved_names(self) -> frozenset[str]:
        return frozenset(self._executed) | frozenset(step_names(self._plan))

    def _splice(self, continuation: ContinuationFn) -> None:
        """Build the continuation's steps and queue them ahead of the remaining plan."""
        if not callable(continuation):
            raise InvalidContinuationError(continuation)

        reserved = self._reserved_names()
        helper = Runner.continuation_of(self._changes, self.timeout_ms, reserved)
        injected = continuation(helper)
        if not isinstance(injected, Runner):
            raise InvalidContinuationError(injected)

        for name in step_names(injected.steps):
            if name in reserved:
                raise DuplicateStepNameError(name)

        self._plan.extendleft(reversed(injected.steps))
        logger.debug("runner.spliced", steps=len(injected.steps))

    # =========================================================================
    # Async batches
    # =========================================================================

    def _flush(self) -> None:
        """Run every pending async step and merge the batch, or raise ``_Halt``."""
        if not self._pending:
            return

        batch, self._pending = self._pending, []
        executor = ThreadPoolExecutor(
            max_workers=min(len(batch), self.max_concurrency),
            thread_name_prefix=f"runner-{self.run_id}",
        )
        try:
            futures: list[tuple[PendingStep, Future]] = [
                (item, executor.submit(item.function, item.snapshot)) for item in batch
            ]
            done, not_done = wait(
                [future for _, future in futures], timeout=self.timeout_ms / 1000
            )
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        before = dict(self._changes)
        results: dict[str, Any] = {}
        for item, future in futures:
            if future in not_done:
                raise _Halt(RunFailure(item.name, TaskTimeout(self.timeout_ms), before))

            exc = future.exception()
            if exc is not None:
                logger.error(
                    "runner.task.crashed",
                    step=item.name,
                    error=str(exc),
                    category=categorize_error(exc).value,
                )
                raise _Halt(RunFailure(item.name, TaskExit(exc), before))

            match _check_outcome(item.name, future.result()):
                case Ok(value):
                    results[item.name] = value
                case Err(reason):
                    raise _Halt(RunFailure(item.name, reason, before))

        self._changes.update(results)
        logger.debug("runner.batch.flushed", steps=sorted(results))
