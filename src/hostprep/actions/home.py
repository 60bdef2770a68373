"""Home-directory scaffolding and dotfiles."""
from __future__ import annotations

from functools import partial
from pathlib import Path

from ..steps import ActionContext


def create_common_linux_config(ctx: ActionContext) -> None:
    """Create the usual home-directory files and folders when missing."""
    if not ctx.confirmed("home", "Create missing common local config in home", default=True):
        return

    home = ctx.config.home
    ctx.run_step("hushlogin", (home / ".hushlogin").touch)
    ctx.run_step(
        "directories",
        partial(
            _make_directories,
            home / "tmp",
            home / "devel",
            ctx.config.local_bin,
            ctx.config.completions_dir,
        ),
    )

    vimrc = home / ".vimrc"
    if not vimrc.is_file():
        ctx.run_step("vimrc", partial(vimrc.write_text, "set nocompatible\n", encoding="utf-8"))

    ssh_dir = home / ".ssh"
    if not ssh_dir.is_dir():
        ctx.run_step("ssh", partial(_make_private_dir, ssh_dir))


def setup_dotfiles(ctx: ActionContext) -> None:
    """Clone the dotfiles repository and link its files into place.

    Only link sources present in the checkout are linked; each link is its
    own step so a single clash does not stop the rest.
    """
    dotfiles = ctx.config.dotfiles
    if not ctx.confirmed(
        "dotfiles",
        f"Clone and setup symlinks for dotfiles ({dotfiles.repo})",
        default=True,
    ):
        return

    _make_directories(ctx.config.local_bin, dotfiles.dest.parent)
    if not dotfiles.dest.is_dir():
        ctx.run_step("clone", partial(ctx.git.clone, dotfiles.repo, dotfiles.dest))

    for relative, target in dotfiles.links:
        source = dotfiles.dest / relative
        if not source.exists():
            continue
        ctx.run_step(
            f"link.{relative}",
            partial(ctx.files.link, source, ctx.config.expand(target)),
        )


def _make_directories(*paths: Path) -> None:
    for path in paths:
        path.mkdir(parents=True, exist_ok=True)


def _make_private_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)
    path.chmod(0o700)


__all__ = ["create_common_linux_config", "setup_dotfiles"]
