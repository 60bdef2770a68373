"""Release archive extraction via the host's tar and unzip."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..errors import StepError
from .command import CommandError, CommandRunner


class ArchiveError(StepError):
    """Raised when an archive cannot be unpacked."""


@dataclass(slots=True)
class ArchiveExtractor:
    """Unpack ``tar.gz`` and ``zip`` release artifacts."""

    runner: CommandRunner
    tar_bin: str = "tar"
    unzip_bin: str = "unzip"

    def extract(
        self,
        archive: Path,
        dest: Path,
        *,
        fmt: str = "tar",
        strip_components: int = 0,
    ) -> None:
        """Extract *archive* into *dest*.

        ``fmt`` is ``tar`` (gzip-compressed) or ``zip``.
        """
        dest.mkdir(parents=True, exist_ok=True)
        if fmt == "tar":
            args = [self.tar_bin, "xzf", str(archive), "-C", str(dest)]
            if strip_components:
                args.append(f"--strip-components={strip_components}")
        elif fmt == "zip":
            args = [self.unzip_bin, "-o", "-q", str(archive), "-d", str(dest)]
        else:
            raise ArchiveError(f"Unsupported archive format '{fmt}' for {archive.name}.")
        try:
            self.runner.run(args)
        except CommandError as exc:
            raise ArchiveError(f"Extracting {archive.name} failed: {exc}") from exc


__all__ = ["ArchiveError", "ArchiveExtractor"]
