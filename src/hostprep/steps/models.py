"""Data models for actions, selections and execution results."""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from ..exit_codes import ExitCode

if TYPE_CHECKING:
    from .context import ActionContext


class StepStatus(str, Enum):
    """Outcome of a single step (or of a whole action)."""

    COMPLETED = "completed"
    SKIPPED = "skipped"
    FAILED = "failed"


ActionBody = Callable[["ActionContext"], None]


@dataclass(slots=True, frozen=True)
class Action:
    """A named, independently selectable unit of provisioning work."""

    name: str
    summary: str
    body: ActionBody


@dataclass(slots=True, frozen=True)
class StepResult:
    """Recorded outcome of one step inside an action body."""

    id: str
    status: StepStatus
    message: str = ""


@dataclass(slots=True)
class ActionResult:
    """Outcome of one invoked action."""

    name: str
    steps: list[StepResult] = field(default_factory=list)
    duration_ms: int | None = None
    error: str | None = None
    fatal: str | None = None

    @property
    def status(self) -> StepStatus:
        """Return the aggregate status derived from the recorded steps."""
        if self.error or self.fatal:
            return StepStatus.FAILED
        if any(step.status is StepStatus.FAILED for step in self.steps):
            return StepStatus.FAILED
        if self.steps and all(step.status is StepStatus.SKIPPED for step in self.steps):
            return StepStatus.SKIPPED
        return StepStatus.COMPLETED

    @property
    def totals(self) -> Counter[StepStatus]:
        """Return step counts keyed by status."""
        return Counter(step.status for step in self.steps)


@dataclass(slots=True, frozen=True)
class Selection:
    """Operator choice: index ``0`` runs everything, ``1..N`` one action."""

    index: int

    @property
    def is_all(self) -> bool:
        """Return ``True`` when every action should run."""
        return self.index == 0


ALL = Selection(0)


@dataclass(slots=True)
class ExecutionResult:
    """Per-action outcomes of an executed selection."""

    selection: Selection
    results: list[ActionResult] = field(default_factory=list)

    @property
    def aborted(self) -> ActionResult | None:
        """Return the action whose fatal failure stopped the run, if any."""
        for result in self.results:
            if result.fatal:
                return result
        return None

    @property
    def exit_code(self) -> ExitCode:
        """Non-fatal step failures still exit cleanly."""
        return ExitCode.FAILURE if self.aborted is not None else ExitCode.OK


__all__ = [
    "ALL",
    "Action",
    "ActionBody",
    "ActionResult",
    "ExecutionResult",
    "Selection",
    "StepResult",
    "StepStatus",
]
