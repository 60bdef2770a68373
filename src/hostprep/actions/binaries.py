"""User-local binaries from GitHub release archives."""
from __future__ import annotations

import tempfile
from functools import partial
from pathlib import Path

from ..config import BinaryRelease
from ..providers import ArchiveError, DownloadError
from ..providers.http import UNKNOWN_RELEASE
from ..steps import ActionContext


def install_user_local_binaries(ctx: ActionContext) -> None:
    """Download the configured release archives into ``~/.local/bin``."""
    if not ctx.confirmed("binaries", "Install user-local binaries/packages", default=True):
        return

    ctx.config.local_bin.mkdir(parents=True, exist_ok=True)
    ctx.config.completions_dir.mkdir(parents=True, exist_ok=True)

    for release in ctx.config.binaries:
        ctx.run_step(release.name, partial(install_release, ctx, release))


def resolve_version(ctx: ActionContext, release: BinaryRelease) -> str:
    """Return the release version substituted into the download URL."""
    if not release.repo:
        return ""
    tag = ctx.http.latest_release(release.repo)
    if tag == UNKNOWN_RELEASE:
        raise DownloadError(f"Could not determine the latest {release.name} release.")
    return tag.removeprefix("v") if release.strip_v else tag


def install_release(ctx: ActionContext, release: BinaryRelease) -> None:
    """Fetch, unpack and install every member of *release*."""
    url = release.url.format(version=resolve_version(ctx, release))
    with tempfile.TemporaryDirectory(prefix=f"hostprep-{release.name}-") as staging:
        staging_dir = Path(staging)
        archive = ctx.http.download_to(url, staging_dir / "download")
        extracted = staging_dir / "extracted"
        ctx.archives.extract(
            archive,
            extracted,
            fmt=release.archive,
            strip_components=release.strip_components,
        )
        for member, target in release.members:
            source = extracted / member
            if not source.is_file():
                raise ArchiveError(f"{member} is missing from the {release.name} archive.")
            dest = ctx.config.expand(target)
            mode = 0o755 if dest.parent == ctx.config.local_bin else 0o644
            ctx.files.install_file(source, dest, mode=mode)


__all__ = ["install_release", "install_user_local_binaries", "resolve_version"]
