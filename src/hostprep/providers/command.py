"""Subprocess wrapper shared by every provider."""
from __future__ import annotations

import logging
import os
import shutil
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from ..errors import StepError

LOGGER = logging.getLogger(__name__)


class CommandError(StepError):
    """Raised when an external command is missing or exits non-zero."""


@dataclass(slots=True)
class CommandRunner:
    """Run external commands, optionally through the privilege prefix."""

    sudo: tuple[str, ...] = ()
    env: dict[str, str] = field(default_factory=lambda: dict(os.environ))

    def run(
        self,
        args: Sequence[str | Path],
        *,
        privileged: bool = False,
        check: bool = True,
        capture_output: bool = True,
        cwd: Path | None = None,
        input: str | None = None,  # noqa: A002 - mirrors subprocess.run
    ) -> subprocess.CompletedProcess[str]:
        """Execute *args* and return the completed process."""
        command = [*(self.sudo if privileged else ()), *(str(arg) for arg in args)]
        LOGGER.debug("running %s (cwd=%s)", " ".join(command), cwd)
        try:
            result = subprocess.run(  # noqa: S603
                command,
                capture_output=capture_output,
                text=True,
                check=False,
                cwd=str(cwd) if cwd is not None else None,
                env=self.env,
                input=input,
            )
        except FileNotFoundError as exc:
            raise CommandError(f"{command[0]} not found: {exc}") from exc
        if check and result.returncode != 0:
            stdout = result.stdout or ""
            stderr = result.stderr or ""
            message = stderr.strip() or stdout.strip() or "no output"
            raise CommandError(
                f"{' '.join(command)} failed (exit {result.returncode}): {message}"
            )
        return result

    def succeeds(self, args: Sequence[str | Path], *, privileged: bool = False) -> bool:
        """Return ``True`` when *args* runs and exits zero."""
        try:
            result = self.run(args, privileged=privileged, check=False)
        except CommandError:
            return False
        return result.returncode == 0

    def output(self, args: Sequence[str | Path], *, cwd: Path | None = None) -> str:
        """Return the stripped standard output of *args*."""
        return (self.run(args, cwd=cwd).stdout or "").strip()

    def which(self, name: str) -> str | None:
        """Resolve *name* against the runner's ``PATH``."""
        return shutil.which(name, path=self.env.get("PATH"))

    def prepend_path(self, *directories: Path) -> None:
        """Put *directories* in front of ``PATH`` for later commands."""
        current = [entry for entry in self.env.get("PATH", "").split(os.pathsep) if entry]
        additions = [str(directory) for directory in directories]
        remaining = [entry for entry in current if entry not in additions]
        self.env["PATH"] = os.pathsep.join([*additions, *remaining])


__all__ = ["CommandError", "CommandRunner"]
