"""Idempotent edits to host and home-directory files."""
from __future__ import annotations

import os
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from ..errors import StepError
from .command import CommandRunner


class FileEditError(StepError):
    """Raised when a file cannot be patched."""


def render_sysctl(settings: Iterable[tuple[str, str, str]]) -> str:
    """Render ``(comment, key, value)`` rows as a sysctl.conf block."""
    blocks = [f"# {comment}\n{key}={value}\n" for comment, key, value in settings]
    return "\n" + "\n".join(blocks)


def append_kernel_args(text: str, args: Sequence[str]) -> str:
    """Append *args* to ``GRUB_CMDLINE_LINUX_DEFAULT`` in a grub defaults file."""
    pattern = re.compile(r'^(GRUB_CMDLINE_LINUX_DEFAULT="[^"]*)', re.MULTILINE)
    addition = " " + " ".join(args)
    return pattern.sub(lambda match: match.group(1) + addition, text)


def set_key_values(text: str, pairs: Iterable[tuple[str, str]]) -> str:
    """Replace the value of every ``KEY : value`` line for each pair.

    Indentation and spacing before the value are kept; keys missing from
    *text* are ignored.
    """
    for key, value in pairs:
        pattern = re.compile(rf"^([ \t]*{re.escape(key)}[ \t]*:[ \t]*).*$", re.MULTILINE)
        text = pattern.sub(lambda match, v=value: match.group(1) + v, text)
    return text


@dataclass(slots=True)
class HostFiles:
    """Read and patch files, escalating through the runner when needed."""

    runner: CommandRunner

    def readable(self, path: Path) -> bool:
        """Return ``True`` for an existing, readable regular file."""
        return path.is_file() and os.access(path, os.R_OK)

    def contains(self, path: Path, needle: str) -> bool:
        """Return ``True`` when *path* is readable and mentions *needle*."""
        if not self.readable(path):
            return False
        return needle in path.read_text(encoding="utf-8", errors="replace")

    def append(self, path: Path, text: str, *, privileged: bool = False) -> None:
        """Append *text* to *path*."""
        if privileged:
            self.runner.run(["tee", "-a", str(path)], privileged=True, input=text)
            return
        with path.open("a", encoding="utf-8") as handle:
            handle.write(text)

    def write(self, path: Path, text: str, *, privileged: bool = False) -> None:
        """Replace the contents of *path* with *text*, creating parents."""
        if privileged:
            self.runner.run(["mkdir", "-p", str(path.parent)], privileged=True)
            self.runner.run(["tee", str(path)], privileged=True, input=text)
            return
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")

    def link(self, source: Path, link: Path) -> None:
        """Point *link* at *source* with a relative symlink, replacing files."""
        if link.is_symlink() or link.is_file():
            link.unlink()
        elif link.exists():
            raise FileEditError(f"Refusing to replace directory {link} with a symlink.")
        link.parent.mkdir(parents=True, exist_ok=True)
        link.symlink_to(os.path.relpath(source, link.parent))

    def install_file(self, source: Path, dest: Path, *, mode: int = 0o755) -> None:
        """Copy *source* over *dest* and set *mode*."""
        dest.parent.mkdir(parents=True, exist_ok=True)
        if dest.is_symlink():
            dest.unlink()
        dest.write_bytes(source.read_bytes())
        dest.chmod(mode)


__all__ = [
    "FileEditError",
    "HostFiles",
    "append_kernel_args",
    "render_sysctl",
    "set_key_values",
]
