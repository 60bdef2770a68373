"""Kernel parameters, resource limits and grub command line."""
from __future__ import annotations

from functools import partial

from ..providers.files import append_kernel_args, render_sysctl
from ..steps import ActionContext


def system_config(ctx: ActionContext) -> None:
    """Tune sysctl, PAM limits and kernel boot arguments.

    Each file is only touched when its marker is absent, so repeated runs
    leave an already tuned host alone.
    """
    settings = ctx.config.system
    files = ctx.files

    if files.readable(settings.sysctl_file) and not files.contains(
        settings.sysctl_file, settings.sysctl_marker
    ):
        ctx.run_step(
            "sysctl",
            partial(
                files.append,
                settings.sysctl_file,
                render_sysctl(settings.sysctl_settings),
                privileged=True,
            ),
            prompt="Tweak sysctl.conf (swap, NIC buffers, handles, etc.)",
            default=True,
        )

    if not settings.limits_file.exists():
        ctx.run_step(
            "limits",
            partial(
                files.write,
                settings.limits_file,
                "".join(f"{line}\n" for line in settings.limits),
                privileged=True,
            ),
            prompt="Increase limits for file handles and memlock",
            default=True,
        )

    if settings.grub_file.is_file() and not files.contains(
        settings.grub_file, settings.grub_marker
    ):
        ctx.run_step(
            "grub",
            partial(_tune_grub, ctx),
            prompt="Tweak kernel parameters in grub (cgroup, etc.)",
            default=True,
        )


def _tune_grub(ctx: ActionContext) -> None:
    settings = ctx.config.system
    current = settings.grub_file.read_text(encoding="utf-8")
    ctx.files.write(
        settings.grub_file,
        append_kernel_args(current, settings.grub_args),
        privileged=True,
    )
    ctx.runner.run(
        ["grub2-mkconfig", "-o", str(settings.grub_cfg)],
        privileged=True,
        capture_output=False,
    )


__all__ = ["system_config"]
