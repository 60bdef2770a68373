"""Essential, common and Python package installs."""
from __future__ import annotations

from functools import partial
from pathlib import Path

from ..errors import StepError
from ..steps import ActionContext


def ensure_essential_packages(ctx: ActionContext) -> None:
    """Install the clone/download toolset unless it already works."""
    essentials = ctx.config.packages.essential
    if ctx.packages.tools_present([[name, "--version"] for name in essentials]):
        quoted = ", ".join(f'"{name}"' for name in essentials)
        ctx.note(f"{quoted} are already installed!")
        return
    ctx.note(f"Installing {', '.join(essentials)}...")
    ctx.packages.update()
    ctx.packages.install(*essentials)


def try_essential_packages(ctx: ActionContext) -> None:
    """Like :func:`ensure_essential_packages` but only reports failures."""
    try:
        ensure_essential_packages(ctx)
    except StepError as exc:
        ctx.note(f"Installing essential packages failed: {exc}", style="red")


def install_essential_packages(ctx: ActionContext) -> None:
    """Install curl, git and jq for cloning and downloading."""
    ctx.run_step("essentials", partial(ensure_essential_packages, ctx))


def install_env_packages(ctx: ActionContext) -> None:
    """Install common pip packages into the user site."""
    ctx.run_step(
        "pip",
        partial(_install_pip_packages, ctx),
        prompt="Install common pip, etc. packages",
        default=True,
    )
    ctx.asdf.activate()


def _install_pip_packages(ctx: ActionContext) -> None:
    ctx.asdf.activate()
    if not ctx.packages.pip_available():
        ctx.note("python3 -m pip is unavailable; skipping pip packages.")
        return
    ctx.packages.pip_install_user(ctx.config.packages.pip)


def install_common_packages(ctx: ActionContext) -> None:
    """Install EPEL, amazon-linux-extras topics and yum packages."""
    if not ctx.confirmed("common-packages", "Install common packages", default=True):
        return

    packages = ctx.packages
    ctx.run_step("yum.update", packages.update)
    ctx.run_step("extras.epel", partial(packages.extras_install, "epel"))
    ctx.run_step("yum.refresh", packages.update)

    for topic in ctx.config.packages.extras:
        ctx.run_step(f"extras.{topic}", partial(packages.extras_install, topic))

    for source, dest in ctx.config.packages.python_links:
        ctx.run_step(
            f"link.{Path(dest).name}",
            partial(ctx.runner.run, ["ln", "-s", "-r", "-f", source, dest], privileged=True),
        )

    for name in ctx.config.packages.yum:
        ctx.run_step(f"yum.{name}", partial(packages.install, name))


__all__ = [
    "ensure_essential_packages",
    "install_common_packages",
    "install_env_packages",
    "install_essential_packages",
    "try_essential_packages",
]
