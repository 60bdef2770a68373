"""Execution context handed to every action body."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape

from ..errors import GuardError, StepError
from .models import StepResult, StepStatus

if TYPE_CHECKING:
    from ..config import AppConfig
    from ..logging import OperationScope
    from ..prompts import Confirmer
    from ..providers import (
        ArchiveExtractor,
        AsdfManager,
        CommandRunner,
        DockerProvider,
        GitProvider,
        HostFiles,
        HttpClient,
        PackageManager,
    )


@dataclass(slots=True)
class ActionContext:
    """Configuration, collaborators and the step recorder for one action."""

    config: AppConfig
    console: Console
    err_console: Console
    confirm: Confirmer
    runner: CommandRunner
    packages: PackageManager
    asdf: AsdfManager
    docker: DockerProvider
    git: GitProvider
    http: HttpClient
    files: HostFiles
    archives: ArchiveExtractor
    operation: OperationScope | None = None
    action: str = ""
    steps: list[StepResult] = field(default_factory=list)

    def for_action(self, name: str) -> ActionContext:
        """Return a copy bound to action *name* with an empty step log."""
        return replace(self, action=name, steps=[])

    def run_step(
        self,
        step_id: str,
        func: Callable[[], object],
        *,
        prompt: str | None = None,
        default: bool = True,
    ) -> StepStatus:
        """Run *func* as step *step_id*, asking *prompt* first when given.

        A declined prompt records a skipped step. Step-level errors are
        reported on the error console and recorded as failures; guard errors
        propagate and abort the run.
        """
        if prompt is not None and not self.confirmed(step_id, prompt, default=default):
            return StepStatus.SKIPPED
        try:
            func()
        except GuardError:
            raise
        except (StepError, OSError) as exc:
            self.err_console.print(
                f"[red]{escape(self._qualified(step_id))} failed:[/red] {escape(str(exc))}"
            )
            return self.record(step_id, StepStatus.FAILED, str(exc))
        return self.record(step_id, StepStatus.COMPLETED)

    def record(self, step_id: str, status: StepStatus, message: str = "") -> StepStatus:
        """Append a step result and mirror it into the operation log."""
        self.steps.append(StepResult(id=step_id, status=status, message=message))
        if self.operation is not None:
            self.operation.add_step(self._qualified(step_id), status=status.value, detail=message)
        return status

    def confirmed(self, step_id: str, prompt: str, *, default: bool = True) -> bool:
        """Ask *prompt*; a declined answer records *step_id* as skipped."""
        if self.confirm(prompt, default=default):
            return True
        self.record(step_id, StepStatus.SKIPPED, "declined")
        return False

    def note(self, message: str, *, style: str | None = None) -> None:
        """Print an operator-facing message on the error stream."""
        self.err_console.print(message, style=style, markup=False, highlight=False)

    def _qualified(self, step_id: str) -> str:
        return f"{self.action}.{step_id}" if self.action else step_id


__all__ = ["ActionContext"]
