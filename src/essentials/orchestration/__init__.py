"""
Essentials Orchestration — a small step runner.

WHY
───
Application flows are sequences of named steps whose results feed later
steps, with some steps safe to run concurrently and a need to stop at the
first failure with enough context to compensate. ``Runner`` captures that
without a framework: build a plan, call ``finish()``, match the result.

MODULE MAP (recommended reading order)
──────────────────────────────────────
1. exceptions.py    ─ runner programming errors
2. step_result.py   ─ RunFailure, TaskExit, TaskTimeout
3. step_types.py    ─ Step tagged variant + StepType
4. runner.py        ─ Runner plan builder
5. engine.py        ─ StepEngine execution pass

Example:
    from essentials.core.result import Err, Ok
    from essentials.orchestration import RunFailure, Runner

    match (
        Runner.new()
        .put("value", 1)
        .run("may_fail", lambda _: Err("boom"))
        .run("never_runs", lambda _: Ok("ignored"))
        .finish()
    ):
        case Ok(changes):
            ...
        case Err(RunFailure(step, reason, changes)):
            # step == "may_fail", reason == "boom", changes == {"value": 1}
            ...
"""

from essentials.orchestration.engine import PendingStep, StepEngine
from essentials.orchestration.exceptions import (
    DuplicateStepNameError,
    InvalidContinuationError,
    InvalidStepResultError,
    RunnerError,
)
from essentials.orchestration.runner import FinishResult, Runner, RunnerState
from essentials.orchestration.step_result import RunFailure, TaskExit, TaskTimeout
from essentials.orchestration.step_types import Step, StepFunction, StepType

__all__ = [
    # Exceptions
    "RunnerError",
    "DuplicateStepNameError",
    "InvalidStepResultError",
    "InvalidContinuationError",
    # Results
    "RunFailure",
    "TaskExit",
    "TaskTimeout",
    # Steps
    "Step",
    "StepFunction",
    "StepType",
    # Runner
    "FinishResult",
    "Runner",
    "RunnerState",
    # Engine
    "PendingStep",
    "StepEngine",
]
