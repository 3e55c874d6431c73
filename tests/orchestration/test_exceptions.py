"""Tests for runner exceptions."""

import pytest

from essentials.core.errors import ErrorCategory, EssentialsError, OrchestrationError
from essentials.orchestration.exceptions import (
    DuplicateStepNameError,
    InvalidContinuationError,
    InvalidStepResultError,
    RunnerError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "error",
        [
            DuplicateStepNameError("a"),
            InvalidStepResultError("a", 5),
            InvalidContinuationError(None),
        ],
    )
    def test_runner_errors(self, error):
        assert isinstance(error, RunnerError)
        assert isinstance(error, OrchestrationError)
        assert isinstance(error, EssentialsError)
        assert error.category is ErrorCategory.ORCHESTRATION


class TestDuplicateStepNameError:
    def test_message(self):
        error = DuplicateStepNameError("charge")
        assert str(error) == "The step name 'charge' has already been used in the flow."

    def test_context(self):
        error = DuplicateStepNameError("charge")
        assert error.to_dict()["context"] == {"step": "charge"}


class TestInvalidStepResultError:
    def test_message(self):
        error = InvalidStepResultError("double", 5)
        assert "double" in str(error)
        assert "5" in str(error)
        assert error.outcome == 5
        assert error.context.step == "double"


class TestInvalidContinuationError:
    def test_message(self):
        error = InvalidContinuationError("oops")
        assert str(error) == "Continuation must return a Runner, got str"
        assert error.returned == "oops"
