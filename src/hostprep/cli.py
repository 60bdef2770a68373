"""Typer entry point for ``hostprep``.

The command takes no options: it checks the host, prints the numbered action
menu, reads one selection from standard input and runs it. Confirmations for
individual steps are read from the same terminal.
"""
from __future__ import annotations

import textwrap

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .actions import list_actions
from .config import AppConfig, ConfigError, load_config
from .errors import GuardError, InvalidSelection, StepError
from .exit_codes import ExitCode
from .guards import check_host
from .logging import OperationScope, StructuredLogger
from .prompts import Confirmer, PromptConfirmer
from .providers import (
    ArchiveExtractor,
    AsdfManager,
    CommandRunner,
    DockerProvider,
    GitProvider,
    HostFiles,
    HttpClient,
    PackageManager,
)
from .steps import (
    ActionContext,
    ExecutionResult,
    StepStatus,
    execute,
    render_menu,
    resolve_selection,
)

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    add_completion=False,
    help=textwrap.dedent(
        """
        Interactive bootstrap for Amazon Linux 2 Malcolm demo hosts.

        Pick one provisioning action from the menu, or 0 to run all of them
        in order. Each step asks for confirmation before changing the host.
        """
    ).strip(),
)

_STATUS_STYLE = {
    StepStatus.COMPLETED: "[green]completed[/green]",
    StepStatus.SKIPPED: "[yellow]skipped[/yellow]",
    StepStatus.FAILED: "[red]failed[/red]",
}


def _build_context(config: AppConfig, confirm: Confirmer) -> ActionContext:
    runner = CommandRunner(sudo=config.sudo)
    packages = PackageManager(runner)
    http = HttpClient()
    return ActionContext(
        config=config,
        console=console,
        err_console=err_console,
        confirm=confirm,
        runner=runner,
        packages=packages,
        asdf=AsdfManager(runner, config.asdf),
        docker=DockerProvider(runner, packages, http),
        git=GitProvider(runner),
        http=http,
        files=HostFiles(runner),
        archives=ArchiveExtractor(runner),
    )


def _read_selection() -> str:
    try:
        return console.input("Operation: ")
    except EOFError:
        return ""


def _render_summary(execution: ExecutionResult) -> None:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#", justify="right")
    table.add_column("Action", style="bold")
    table.add_column("Status")
    table.add_column("Completed", justify="right")
    table.add_column("Skipped", justify="right")
    table.add_column("Failed", justify="right")
    for position, result in enumerate(execution.results, start=1):
        totals = result.totals
        table.add_row(
            str(position),
            escape(result.name),
            _STATUS_STYLE[result.status],
            str(totals.get(StepStatus.COMPLETED, 0)),
            str(totals.get(StepStatus.SKIPPED, 0)),
            str(totals.get(StepStatus.FAILED, 0)),
        )
    console.print(table)


def _record_outcome(op: OperationScope, execution: ExecutionResult) -> None:
    failed = [
        f"{result.name}.{step.id}"
        for result in execution.results
        for step in result.steps
        if step.status is StepStatus.FAILED
    ]
    failed.extend(result.name for result in execution.results if result.error)
    context = {
        "selection": execution.selection.index,
        "actions": {result.name: result.status.value for result in execution.results},
    }
    aborted = execution.aborted
    if aborted is not None:
        op.error(
            f"Run aborted by {aborted.name}: {aborted.fatal}",
            rc=int(ExitCode.FAILURE),
            context=context,
        )
    elif failed:
        op.warning("Run completed with failed steps.", errors=failed, context=context)
    else:
        op.success("Run completed.", context=context)


@app.command()
def run() -> None:
    """Show the action menu and run the selected action(s)."""
    try:
        config = load_config()
    except ConfigError as exc:
        err_console.print(f"[bold red]{escape(str(exc))}[/bold red]")
        raise typer.Exit(code=int(ExitCode.FAILURE)) from exc

    logger = StructuredLogger(config.logs_dir)
    context = _build_context(config, PromptConfirmer(console))
    actions = list_actions()

    try:
        with logger.operation(
            "hostprep",
            args={"actions": [action.name for action in actions]},
            target={"user": config.user, "home": config.home},
        ) as op:
            context.operation = op
            try:
                check_host(config, context.runner)
            except GuardError as exc:
                err_console.print(f"[bold red]{escape(str(exc))}[/bold red]")
                op.error(str(exc), rc=int(ExitCode.FAILURE))
                raise typer.Exit(code=int(ExitCode.FAILURE)) from exc
            try:
                context.asdf.activate()
            except StepError as exc:
                err_console.print(f"[yellow]asdf not activated:[/yellow] {escape(str(exc))}")
                op.add_step("asdf.activate", status="warning", detail=str(exc))

            console.print(render_menu(actions), markup=False, highlight=False)
            raw = _read_selection()
            try:
                selection = resolve_selection(raw, len(actions))
            except InvalidSelection as exc:
                err_console.print("[red]Invalid operation selected[/red]")
                op.error(str(exc), rc=int(ExitCode.FAILURE))
                raise typer.Exit(code=int(ExitCode.FAILURE)) from exc
            op.add_step("selection", status="info", detail=str(selection.index))
            if not selection.is_all:
                console.print(actions[selection.index - 1].name, markup=False, highlight=False)

            execution = execute(selection, actions, context)
            _render_summary(execution)
            _record_outcome(op, execution)
    except KeyboardInterrupt:
        err_console.print("[red]Interrupted.[/red]")
        raise typer.Exit(code=int(ExitCode.FAILURE)) from None

    raise typer.Exit(code=int(execution.exit_code))


def main() -> None:
    """Console script entry point."""
    app()


__all__ = ["app", "main"]
