"""Tests for the sequential action runner."""
from __future__ import annotations

from collections.abc import Callable

import pytest

from hostprep.errors import GuardError, InvalidSelection, StepError
from hostprep.exit_codes import ExitCode
from hostprep.logging import OperationScope
from hostprep.steps import (
    ALL,
    Action,
    ActionContext,
    Selection,
    StepStatus,
    execute,
    resolve_selection,
    selected_actions,
)


def _fail() -> None:
    raise StepError("download failed")


def _ok() -> None:
    return None


class Recorder:
    """Build actions that log their invocation order."""

    def __init__(self) -> None:
        """Start with an empty invocation log."""
        self.invoked: list[str] = []

    def action(self, name: str, *, fail: bool = False) -> Action:
        """Return an action running one step, failing when *fail* is set."""

        def body(ctx: ActionContext) -> None:
            self.invoked.append(name)
            ctx.run_step("first", _fail if fail else _ok)
            ctx.run_step("second", _ok)

        return Action(name, f"{name} summary", body)


@pytest.fixture
def recorder() -> Recorder:
    """Fresh invocation recorder."""
    return Recorder()


def test_single_selection_runs_only_that_action(
    recorder: Recorder,
    make_context: Callable[..., ActionContext],
) -> None:
    """Selecting ``2`` against {A, B, C} runs only B."""
    actions = [recorder.action("A"), recorder.action("B"), recorder.action("C")]

    execution = execute(resolve_selection("2", len(actions)), actions, make_context())

    assert recorder.invoked == ["B"]
    assert [result.name for result in execution.results] == ["B"]
    assert execution.exit_code is ExitCode.OK


def test_all_runs_every_action_in_order_past_failures(
    recorder: Recorder,
    make_context: Callable[..., ActionContext],
) -> None:
    """Selecting ``0`` runs A, B, C in order even when B fails a step."""
    actions = [
        recorder.action("A"),
        recorder.action("B", fail=True),
        recorder.action("C"),
    ]

    execution = execute(resolve_selection("0", len(actions)), actions, make_context())

    assert recorder.invoked == ["A", "B", "C"]
    statuses = [result.status for result in execution.results]
    assert statuses == [StepStatus.COMPLETED, StepStatus.FAILED, StepStatus.COMPLETED]
    b_steps = execution.results[1].steps
    assert [(step.id, step.status) for step in b_steps] == [
        ("first", StepStatus.FAILED),
        ("second", StepStatus.COMPLETED),
    ]
    assert b_steps[0].message == "download failed"
    assert execution.exit_code is ExitCode.OK


def test_out_of_range_selection_runs_nothing(
    recorder: Recorder,
    make_context: Callable[..., ActionContext],
) -> None:
    """``5`` against three actions is rejected before anything runs."""
    actions = [recorder.action("A"), recorder.action("B"), recorder.action("C")]

    with pytest.raises(InvalidSelection):
        execute(resolve_selection("5", len(actions)), actions, make_context())
    with pytest.raises(InvalidSelection):
        selected_actions(Selection(4), actions)

    assert recorder.invoked == []


def test_declined_step_is_skipped_and_later_steps_run(
    make_context: Callable[..., ActionContext],
) -> None:
    """A declined confirmation only skips its own step."""
    calls: list[str] = []

    def body(ctx: ActionContext) -> None:
        ctx.run_step("one", lambda: calls.append("one"), prompt="Do one", default=True)
        ctx.run_step("two", lambda: calls.append("two"), prompt="Do two", default=False)

    def later(ctx: ActionContext) -> None:
        ctx.run_step("three", lambda: calls.append("three"))

    actions = [Action("first", "", body), Action("later", "", later)]
    context = make_context(answers=["n", "y"])

    execution = execute(ALL, actions, context)

    assert calls == ["two", "three"]
    first = execution.results[0]
    assert [(step.id, step.status) for step in first.steps] == [
        ("one", StepStatus.SKIPPED),
        ("two", StepStatus.COMPLETED),
    ]
    assert first.status is StepStatus.COMPLETED
    assert execution.results[1].status is StepStatus.COMPLETED


def test_all_declined_marks_action_skipped(make_context: Callable[..., ActionContext]) -> None:
    """An action whose every step was declined reports ``skipped``."""

    def body(ctx: ActionContext) -> None:
        if not ctx.confirmed("gate", "Proceed"):
            return
        ctx.run_step("never", _ok)

    execution = execute(ALL, [Action("gated", "", body)], make_context(answers=["n"]))

    (result,) = execution.results
    assert result.status is StepStatus.SKIPPED
    assert result.totals[StepStatus.SKIPPED] == 1


def test_guard_failure_aborts_the_run(
    recorder: Recorder,
    make_context: Callable[..., ActionContext],
) -> None:
    """A fatal error stops later actions and makes the run exit non-zero."""

    def fatal(ctx: ActionContext) -> None:
        raise GuardError("Installing docker-compose failed")

    actions = [recorder.action("A"), Action("fatal", "", fatal), recorder.action("C")]

    execution = execute(ALL, actions, make_context())

    assert recorder.invoked == ["A"]
    assert [result.name for result in execution.results] == ["A", "fatal"]
    aborted = execution.aborted
    assert aborted is not None
    assert aborted.fatal == "Installing docker-compose failed"
    assert aborted.status is StepStatus.FAILED
    assert execution.exit_code is ExitCode.FAILURE


def test_guard_error_inside_step_is_not_swallowed(
    make_context: Callable[..., ActionContext],
) -> None:
    """``run_step`` lets guard errors escape to the runner."""

    def verify() -> None:
        raise GuardError("verification failed")

    def body(ctx: ActionContext) -> None:
        ctx.run_step("verify", verify)

    execution = execute(ALL, [Action("checked", "", body)], make_context())

    assert execution.exit_code is ExitCode.FAILURE


def test_unexpected_exception_marks_action_failed_and_continues(
    recorder: Recorder,
    make_context: Callable[..., ActionContext],
) -> None:
    """Programming errors in one action do not stop the next one."""

    def broken(ctx: ActionContext) -> None:
        raise KeyError("missing")

    context = make_context()
    context.operation = OperationScope("hostprep")
    actions = [Action("broken", "", broken), recorder.action("after")]

    execution = execute(ALL, actions, context)

    assert recorder.invoked == ["after"]
    broken_result = execution.results[0]
    assert broken_result.status is StepStatus.FAILED
    assert broken_result.error is not None
    assert "raised an unexpected error" in broken_result.error
    assert execution.exit_code is ExitCode.OK
    step_names = [step["name"] for step in context.operation.steps]
    assert "broken.unexpected" in step_names
    assert "after.first" in step_names


def test_step_failures_are_reported_on_error_console(
    make_context: Callable[..., ActionContext],
) -> None:
    """The failing step is named on the error stream."""

    def body(ctx: ActionContext) -> None:
        ctx.run_step("fetch", _fail)

    context = make_context()
    execute(ALL, [Action("download", "", body)], context)

    assert "download.fetch failed: download failed" in context.err_console.export_text()
