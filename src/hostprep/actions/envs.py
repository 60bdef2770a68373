"""asdf version manager and tool plugins."""
from __future__ import annotations

from functools import partial

from ..steps import ActionContext, StepStatus
from .packages import try_essential_packages


def install_envs(ctx: ActionContext) -> None:
    """Install asdf, then add or update the configured tool plugins.

    Selected tools get their latest version installed and set as the global
    default.
    """
    asdf = ctx.asdf
    if not asdf.installed():
        ctx.run_step(
            "asdf",
            partial(_install_asdf, ctx),
            prompt='"asdf" is not installed, attempt to install it',
            default=True,
        )
    if not asdf.activate():
        return

    ctx.run_step("asdf.update", asdf.update)

    present = asdf.plugins()
    selected: list[str] = []
    for tool in ctx.config.asdf.tools:
        if tool in present:
            status = ctx.run_step(
                f"plugin.{tool}",
                _noop,
                prompt=f'"{tool}" is already installed, attempt to update it',
                default=False,
            )
        else:
            status = ctx.run_step(
                f"plugin.{tool}",
                partial(asdf.add_plugin, tool),
                prompt=f'"{tool}" is not installed, attempt to install it',
                default=False,
            )
        if status is StepStatus.COMPLETED:
            selected.append(tool)

    for tool in selected:
        _install_latest(ctx, tool)

    asdf.activate()


def _install_asdf(ctx: ActionContext) -> None:
    try_essential_packages(ctx)
    checkout = ctx.config.asdf.dir
    ctx.git.clone(ctx.config.asdf.repo, checkout, shallow=False)
    ctx.git.checkout(checkout, ctx.git.latest_tag(checkout))


def _install_latest(ctx: ActionContext, tool: str) -> None:
    asdf = ctx.asdf
    ctx.run_step(f"update.{tool}", partial(asdf.update_plugin, tool))
    ctx.run_step(f"install.{tool}", partial(asdf.install_version, tool, "latest"))
    ctx.run_step(f"global.{tool}", partial(asdf.set_global, tool, "latest"))
    asdf.reshim(tool)


def _noop() -> None:
    return None


__all__ = ["install_envs"]
