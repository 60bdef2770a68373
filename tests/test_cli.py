"""Tests for the hostprep CLI."""
from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from hostprep import cli
from hostprep.cli import app
from hostprep.errors import GuardError, StepError
from hostprep.providers import AsdfManager
from hostprep.steps import Action, ActionContext

runner = CliRunner()


@pytest.fixture
def cli_env(tmp_path: Path) -> dict[str, str]:
    """Environment isolating the CLI from the real home directory."""
    home = tmp_path / "home"
    home.mkdir()
    return {
        "HOME": str(home),
        "XDG_CONFIG_HOME": str(home / ".config"),
        "XDG_DATA_HOME": str(home / ".local" / "share"),
        "ASDF_DIR": str(home / ".asdf"),
        "HOSTPREP_USER": "ec2-user",
        "HOSTPREP_IS_ROOT": "false",
        "HOSTPREP_LOGS_DIR": str(tmp_path / "logs"),
    }


@pytest.fixture
def invoked(monkeypatch: pytest.MonkeyPatch) -> list[str]:
    """Install three fake actions; B fails a step. Returns the call log."""
    calls: list[str] = []

    def make(name: str, *, fail: bool = False) -> Action:
        def step() -> None:
            if fail:
                raise StepError(f"{name} broke")

        def body(ctx: ActionContext) -> None:
            calls.append(name)
            ctx.run_step("work", step)

        return Action(name, f"{name} summary", body)

    actions = (make("A"), make("B", fail=True), make("C"))
    monkeypatch.setattr(cli, "list_actions", lambda: actions)
    monkeypatch.setattr(cli, "check_host", lambda config, runner: None)
    return calls


def _log_records(tmp_path: Path) -> list[dict[str, object]]:
    path = tmp_path / "logs" / "operations.jsonl"
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


def test_menu_lists_all_then_actions(invoked: list[str], cli_env: dict[str, str]) -> None:
    """The menu is printed before the selection prompt."""
    result = runner.invoke(app, [], input="1\n", env=cli_env)

    assert result.exit_code == 0, result.output
    menu = [line.split() for line in result.output.splitlines()[:4]]
    assert menu == [["0", "ALL"], ["1", "A"], ["2", "B"], ["3", "C"]]
    assert "Operation:" in result.output


def test_single_selection_runs_only_that_action(
    invoked: list[str],
    cli_env: dict[str, str],
    tmp_path: Path,
) -> None:
    """Selecting ``2`` runs only B and still exits 0 despite its failed step."""
    result = runner.invoke(app, [], input="2\n", env=cli_env)

    assert result.exit_code == 0, result.output
    assert invoked == ["B"]
    assert "B.work failed: B broke" in result.output

    (record,) = _log_records(tmp_path)
    outcome = record["result"]
    assert isinstance(outcome, dict)
    assert outcome["status"] == "warning"
    assert outcome["errors"] == ["B.work"]


def test_all_runs_every_action_in_order(
    invoked: list[str],
    cli_env: dict[str, str],
) -> None:
    """Selecting ``0`` runs A, B and C in registration order."""
    result = runner.invoke(app, [], input="0\n", env=cli_env)

    assert result.exit_code == 0, result.output
    assert invoked == ["A", "B", "C"]
    assert "completed" in result.output
    assert "failed" in result.output


@pytest.mark.parametrize("answer", ["5\n", "abc\n", ""])
def test_invalid_selection_exits_non_zero(
    invoked: list[str],
    cli_env: dict[str, str],
    answer: str,
) -> None:
    """Out-of-range or malformed input runs nothing and exits 1."""
    result = runner.invoke(app, [], input=answer, env=cli_env)

    assert result.exit_code == 1
    assert invoked == []
    assert "Invalid operation selected" in result.output


def test_guard_failure_exits_before_menu(
    monkeypatch: pytest.MonkeyPatch,
    cli_env: dict[str, str],
    tmp_path: Path,
) -> None:
    """A host that fails the guards never sees the menu."""

    def reject(config: object, runner: object) -> None:
        raise GuardError("This command only targets Amazon Linux 2")

    monkeypatch.setattr(cli, "check_host", reject)

    result = runner.invoke(app, [], input="0\n", env=cli_env)

    assert result.exit_code == 1
    assert "This command only targets Amazon Linux 2" in result.output
    assert "ALL" not in result.output

    (record,) = _log_records(tmp_path)
    outcome = record["result"]
    assert isinstance(outcome, dict)
    assert outcome["status"] == "error"
    assert outcome["rc"] == 1


def test_fatal_action_failure_exits_non_zero(
    monkeypatch: pytest.MonkeyPatch,
    cli_env: dict[str, str],
) -> None:
    """A guard error raised by an action aborts the remaining actions."""
    calls: list[str] = []

    def fatal(ctx: ActionContext) -> None:
        calls.append("fatal")
        raise GuardError("Installing docker-compose failed")

    def after(ctx: ActionContext) -> None:
        calls.append("after")

    actions = (Action("fatal", "", fatal), Action("after", "", after))
    monkeypatch.setattr(cli, "list_actions", lambda: actions)
    monkeypatch.setattr(cli, "check_host", lambda config, runner: None)

    result = runner.invoke(app, [], input="0\n", env=cli_env)

    assert result.exit_code == 1
    assert calls == ["fatal"]
    assert "Installing docker-compose failed" in result.output


def test_invalid_configuration_exits_non_zero(
    invoked: list[str],
    cli_env: dict[str, str],
) -> None:
    """Configuration errors are reported before the menu."""
    env = {**cli_env, "HOSTPREP_DOCKER__COMPOSE_VERSION": "latest"}

    result = runner.invoke(app, [], input="0\n", env=env)

    assert result.exit_code == 1
    assert "compose_version" in result.output
    assert invoked == []


def test_asdf_directory_without_binary_still_shows_menu(
    invoked: list[str],
    cli_env: dict[str, str],
) -> None:
    """A half-populated ``~/.asdf`` does not stop the menu from rendering."""
    (Path(cli_env["HOME"]) / ".asdf").mkdir()

    result = runner.invoke(app, [], input="9999\n", env=cli_env)

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "ALL" in result.output
    assert "Invalid operation selected" in result.output


def test_asdf_activation_errors_are_reported_and_ignored(
    monkeypatch: pytest.MonkeyPatch,
    invoked: list[str],
    cli_env: dict[str, str],
    tmp_path: Path,
) -> None:
    """A failing activation is a warning; the selected action still runs."""

    def broken(self: AsdfManager) -> bool:
        raise StepError("asdf not found")

    monkeypatch.setattr(AsdfManager, "activate", broken)

    result = runner.invoke(app, [], input="1\n", env=cli_env)

    assert result.exit_code == 0, result.output
    assert "asdf not activated: asdf not found" in result.output
    assert invoked == ["A"]

    (record,) = _log_records(tmp_path)
    steps = record["steps"]
    assert isinstance(steps, list)
    assert steps[0]["name"] == "asdf.activate"
    assert steps[0]["status"] == "warning"
