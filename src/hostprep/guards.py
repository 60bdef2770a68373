"""Host checks that must pass before the menu is shown."""
from __future__ import annotations

from .config import AppConfig
from .errors import GuardError
from .providers import CommandRunner


def check_host(config: AppConfig, runner: CommandRunner) -> None:
    """Raise :class:`GuardError` unless this host can be provisioned."""
    if runner.which(config.guard.os_marker) is None:
        raise GuardError("This command only targets Amazon Linux 2")

    required = [*config.guard.required_tools, *config.sudo]
    missing = [tool for tool in required if runner.which(tool) is None]
    if missing:
        raise GuardError(f"hostprep requires {', '.join(missing)}")


__all__ = ["check_host"]
