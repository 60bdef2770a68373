"""git clone helpers."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .command import CommandRunner

SHALLOW_ARGS = (
    "--depth=1",
    "--single-branch",
    "--recurse-submodules",
    "--shallow-submodules",
    "--no-tags",
)


@dataclass(slots=True)
class GitProvider:
    """Clone repositories and pin checkouts."""

    runner: CommandRunner
    git_bin: str = "git"

    def clone(self, url: str, dest: Path, *, shallow: bool = True) -> None:
        """Clone *url* into *dest*; shallow clones skip history and tags."""
        args = [self.git_bin, "clone"]
        if shallow:
            args.extend(SHALLOW_ARGS)
        else:
            args.extend(["--recurse-submodules", "--shallow-submodules"])
        args.extend([url, str(dest)])
        self.runner.run(args, capture_output=False)

    def latest_tag(self, repo: Path) -> str:
        """Return the most recent tag reachable from ``HEAD``."""
        return self.runner.output([self.git_bin, "describe", "--abbrev=0", "--tags"], cwd=repo)

    def checkout(self, repo: Path, ref: str) -> None:
        """Check out *ref* inside *repo*."""
        self.runner.run([self.git_bin, "checkout", ref], cwd=repo)


__all__ = ["GitProvider", "SHALLOW_ARGS"]
