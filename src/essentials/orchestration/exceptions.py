"""Runner exceptions — programming errors raised while building or splicing a plan.

Step *failures* never raise: they come back from ``Runner.finish()`` as
``Err(RunFailure(...))``. The exceptions here flag caller bugs.

Hierarchy::

    OrchestrationError  (from essentials.core.errors)
      └── RunnerError                  ── base for all runner errors
            ├── DuplicateStepNameError   ── step name already used in the flow
            ├── InvalidStepResultError   ── step returned neither Ok nor Err
            └── InvalidContinuationError ── continuation did not return a Runner
"""

from typing import Any

from essentials.core.errors import OrchestrationError


class RunnerError(OrchestrationError):
    """Base exception for all runner errors."""

    pass


class DuplicateStepNameError(RunnerError):
    """Raised when a step name has already been used in the flow."""

    def __init__(self, step_name: str):
        self.step_name = step_name
        super().__init__(f"The step name '{step_name}' has already been used in the flow.")
        self.with_context(step=step_name)


class InvalidStepResultError(RunnerError):
    """Raised when a step function returns something other than ``Ok``/``Err``."""

    def __init__(self, step_name: str, outcome: Any):
        self.step_name = step_name
        self.outcome = outcome
        super().__init__(
            f"Step '{step_name}' must return Ok(value) or Err(reason), got {outcome!r}"
        )
        self.with_context(step=step_name)


class InvalidContinuationError(RunnerError):
    """Raised when a branch/switch continuation does not return a Runner."""

    def __init__(self, returned: Any):
        self.returned = returned
        super().__init__(
            f"Continuation must return a Runner, got {type(returned).__name__}"
        )
