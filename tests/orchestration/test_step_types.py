"""Tests for Step factories and introspection."""

import pytest

from essentials.core.result import Ok
from essentials.orchestration.step_types import (
    NAMED_STEP_TYPES,
    Step,
    StepFunction,
    StepType,
    step_names,
)


def double(changes):
    return Ok(changes["value"] * 2)


class TestStepType:
    def test_values(self):
        assert [t.value for t in StepType] == ["put", "sync", "async", "branch", "switch", "halt"]

    def test_str_enum(self):
        assert StepType.ASYNC == "async"

    def test_named_types(self):
        assert StepType.BRANCH not in NAMED_STEP_TYPES
        assert StepType.SWITCH not in NAMED_STEP_TYPES
        assert StepType.HALT in NAMED_STEP_TYPES


class TestFactories:
    def test_put(self):
        step = Step.put("a", 1)
        assert step.step_type is StepType.PUT
        assert (step.name, step.value) == ("a", 1)

    def test_sync(self):
        step = Step.sync("double", double)
        assert step.step_type is StepType.SYNC
        assert step.function is double

    def test_async(self):
        assert Step.async_("double", double).step_type is StepType.ASYNC

    def test_branch(self):
        step = Step.branch(bool, lambda r: r)
        assert step.step_type is StepType.BRANCH
        assert step.name is None
        assert step.predicate is bool

    def test_switch(self):
        step = Step.switch(lambda c: None)
        assert step.step_type is StepType.SWITCH
        assert step.name is None

    def test_halt(self):
        step = Step.halt("stop", {"code": 1})
        assert step.reason == {"code": 1}

    def test_frozen(self):
        step = Step.put("a", 1)
        with pytest.raises(AttributeError):
            step.name = "b"


class TestIntrospection:
    @pytest.mark.parametrize(
        "step,named,barrier",
        [
            (Step.put("a", 1), True, True),
            (Step.sync("a", double), True, True),
            (Step.async_("a", double), True, False),
            (Step.branch(bool, bool), False, True),
            (Step.switch(bool), False, True),
            (Step.halt("a", "x"), True, True),
        ],
    )
    def test_named_and_barrier(self, step, named, barrier):
        assert step.is_named is named
        assert step.is_barrier is barrier

    def test_to_dict(self):
        assert Step.sync("double", double).to_dict() == {"type": "sync", "name": "double"}
        assert Step.switch(bool).to_dict() == {"type": "switch"}
        assert Step.halt("stop", "nope").to_dict() == {
            "type": "halt",
            "name": "stop",
            "reason": "'nope'",
        }

    def test_repr(self):
        assert repr(Step.put("a", 1)) == "Step(put, 'a')"
        assert repr(Step.branch(bool, bool)) == "Step(branch)"

    def test_step_names_skips_unnamed(self):
        steps = [Step.put("a", 1), Step.branch(bool, bool), Step.async_("b", double)]
        assert step_names(steps) == ["a", "b"]


def test_plain_function_satisfies_protocol():
    assert isinstance(double, StepFunction)
