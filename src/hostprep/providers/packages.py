"""yum, amazon-linux-extras and pip wrappers."""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .command import CommandRunner


@dataclass(slots=True)
class PackageManager:
    """Install OS and Python packages on Amazon Linux 2."""

    runner: CommandRunner
    yum_bin: str = "yum"
    extras_bin: str = "amazon-linux-extras"
    python_bin: str = "python3"

    def update(self) -> None:
        """Refresh and upgrade installed packages."""
        self.runner.run([self.yum_bin, "update", "-y"], privileged=True)

    def install(self, *names: str) -> None:
        """Install *names* with yum."""
        self.runner.run(
            [self.yum_bin, "install", "-y", *names],
            privileged=True,
            capture_output=False,
        )

    def extras_install(self, topic: str) -> None:
        """Enable and install an amazon-linux-extras topic."""
        self.runner.run(
            [self.extras_bin, "install", "-y", topic],
            privileged=True,
            capture_output=False,
        )

    def tools_present(self, checks: Sequence[Sequence[str]]) -> bool:
        """Return ``True`` when every probe command in *checks* succeeds."""
        return all(self.runner.succeeds(check) for check in checks)

    def pip_available(self) -> bool:
        """Return ``True`` when ``python3 -m pip`` works."""
        return self.runner.succeeds([self.python_bin, "-m", "pip", "-V"])

    def pip_install_user(self, packages: Sequence[str]) -> None:
        """Install or upgrade *packages* into the user site."""
        self.runner.run(
            [self.python_bin, "-m", "pip", "install", "--user", "-U", *packages],
            capture_output=False,
        )


__all__ = ["PackageManager"]
