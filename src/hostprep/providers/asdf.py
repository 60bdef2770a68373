"""Wrapper around the asdf version manager and its plugins."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from ..config import AsdfConfig
from .command import CommandError, CommandRunner

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class AsdfManager:
    """Install asdf plugins and tool versions for the current user."""

    runner: CommandRunner
    config: AsdfConfig

    @property
    def asdf_bin(self) -> str:
        """Path to the asdf executable inside the checkout."""
        return str(self.config.bin_dir / "asdf")

    def installed(self) -> bool:
        """Return ``True`` when the checkout holds a runnable asdf."""
        path = self.config.bin_dir / "asdf"
        return path.is_file() and os.access(path, os.X_OK)

    def activate(self) -> bool:
        """Expose asdf and its shims to later commands.

        Returns ``False`` when asdf is not installed yet.
        """
        if not self.installed():
            return False
        self.runner.env["ASDF_DIR"] = str(self.config.dir)
        self.runner.prepend_path(self.config.bin_dir, self.config.shims_dir)
        for tool in self.config.tools:
            self.reshim(tool)
        return True

    def update(self) -> None:
        """Update asdf itself."""
        self.runner.run([self.asdf_bin, "update"], capture_output=False)

    def plugins(self) -> set[str]:
        """Return the names of installed plugins."""
        try:
            output = self.runner.output([self.asdf_bin, "plugin", "list"])
        except CommandError as exc:
            LOGGER.debug("asdf plugin list failed: %s", exc)
            return set()
        return {line.strip() for line in output.splitlines() if line.strip()}

    def add_plugin(self, name: str) -> None:
        """Add the plugin for *name*."""
        self.runner.run([self.asdf_bin, "plugin", "add", name])

    def update_plugin(self, name: str) -> None:
        """Update the plugin for *name*."""
        self.runner.run([self.asdf_bin, "plugin", "update", name])

    def install_version(self, name: str, version: str = "latest") -> None:
        """Install *version* of tool *name*."""
        self.runner.run([self.asdf_bin, "install", name, version], capture_output=False)

    def set_global(self, name: str, version: str = "latest") -> None:
        """Select *version* of *name* as the user-wide default."""
        self.runner.run([self.asdf_bin, "global", name, version])

    def reshim(self, name: str) -> None:
        """Regenerate shims for *name*; failures are ignored."""
        if not self.runner.succeeds([self.asdf_bin, "reshim", name]):
            LOGGER.debug("asdf reshim %s failed", name)


__all__ = ["AsdfManager"]
