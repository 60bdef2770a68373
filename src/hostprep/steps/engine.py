"""Sequential action runner."""

from __future__ import annotations

import time
import traceback
from collections.abc import Sequence

from rich.markup import escape

from ..errors import GuardError, InvalidSelection
from .context import ActionContext
from .models import Action, ActionResult, ExecutionResult, Selection


def _duration_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def _unexpected_failure(
    action: Action,
    context: ActionContext,
    exc: Exception,
    duration_ms: int,
) -> ActionResult:
    message = f"Action '{action.name}' raised an unexpected error: {exc}"
    context.err_console.print(f"[red]{escape(message)}[/red]")
    if context.operation is not None:
        context.operation.add_step(
            f"{action.name}.unexpected",
            status="failed",
            detail=traceback.format_exc(),
        )
    return ActionResult(
        name=action.name,
        steps=list(context.steps),
        duration_ms=duration_ms,
        error=message,
    )


def _run_single_action(action: Action, context: ActionContext) -> ActionResult:
    scoped = context.for_action(action.name)
    start = time.perf_counter()
    try:
        action.body(scoped)
    except GuardError as exc:
        scoped.err_console.print(f"[bold red]{escape(str(exc))}[/bold red]")
        return ActionResult(
            name=action.name,
            steps=list(scoped.steps),
            duration_ms=_duration_ms(start),
            fatal=str(exc),
        )
    except Exception as exc:  # noqa: BLE001
        return _unexpected_failure(action, scoped, exc, _duration_ms(start))
    return ActionResult(
        name=action.name,
        steps=list(scoped.steps),
        duration_ms=_duration_ms(start),
    )


def selected_actions(selection: Selection, actions: Sequence[Action]) -> list[Action]:
    """Return the actions implied by *selection*, in execution order."""
    if selection.index < 0 or selection.index > len(actions):
        raise InvalidSelection(
            f"Selection {selection.index} is outside 0..{len(actions)}."
        )
    if selection.is_all:
        return list(actions)
    return [actions[selection.index - 1]]


def execute(
    selection: Selection,
    actions: Sequence[Action],
    context: ActionContext,
) -> ExecutionResult:
    """Run the selected actions one after another.

    Step failures and unexpected errors inside one action never stop the
    following actions. A guard failure stops the run after the offending
    action.
    """
    chosen = selected_actions(selection, actions)
    execution = ExecutionResult(selection=selection)
    for action in chosen:
        context.console.rule(f"[bold]{escape(action.name)}[/bold]")
        result = _run_single_action(action, context)
        execution.results.append(result)
        if result.fatal:
            break
    return execution


__all__ = ["execute", "selected_actions"]
