"""Tests for RunFailure, TaskExit and TaskTimeout."""

from essentials.core.result import Err, Ok
from essentials.orchestration.step_result import RunFailure, TaskExit, TaskTimeout


class TestTaskExit:
    def test_equal_by_exception_type_and_args(self):
        assert TaskExit(RuntimeError("kaput")) == TaskExit(RuntimeError("kaput"))
        assert TaskExit(RuntimeError("kaput")) != TaskExit(ValueError("kaput"))
        assert TaskExit(RuntimeError("kaput")) != TaskExit(RuntimeError("other"))

    def test_hashable(self):
        assert len({TaskExit(RuntimeError("x")), TaskExit(RuntimeError("x"))}) == 1

    def test_message(self):
        assert TaskExit(KeyError("account")).message == "KeyError: 'account'"


class TestTaskTimeout:
    def test_equality(self):
        assert TaskTimeout(100) == TaskTimeout(100)
        assert TaskTimeout(100) != TaskTimeout(200)


class TestRunFailure:
    def test_defaults(self):
        assert RunFailure("b", "boom").changes == {}

    def test_kind_flags(self):
        assert RunFailure("b", TaskExit(RuntimeError())).is_task_exit
        assert RunFailure("b", TaskTimeout(5)).is_timeout
        plain = RunFailure("b", "boom")
        assert not plain.is_task_exit
        assert not plain.is_timeout

    def test_to_dict(self):
        failure = RunFailure("b", "boom", {"z": 1, "a": 2})
        assert failure.to_dict() == {"step": "b", "reason": "'boom'", "committed": ["a", "z"]}

    def test_to_dict_task_exit(self):
        failure = RunFailure("b", TaskExit(RuntimeError("kaput")))
        assert failure.to_dict()["reason"] == "RuntimeError: kaput"

    def test_pattern_matching(self):
        def describe(result):
            match result:
                case Ok(changes):
                    return f"ok {sorted(changes)}"
                case Err(RunFailure(step, TaskTimeout(), _)):
                    return f"timeout {step}"
                case Err(RunFailure(step, reason, _)):
                    return f"failed {step}: {reason}"

        assert describe(Ok({"a": 1})) == "ok ['a']"
        assert describe(Err(RunFailure("slow", TaskTimeout(10)))) == "timeout slow"
        assert describe(Err(RunFailure("b", "boom"))) == "failed b: boom"
