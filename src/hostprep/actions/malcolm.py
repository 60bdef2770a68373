"""Malcolm checkout, configuration and demo artifacts."""
from __future__ import annotations

from functools import partial
from pathlib import Path

from ..providers.files import set_key_values
from ..steps import ActionContext, StepStatus


def install_malcolm(ctx: ActionContext) -> None:
    """Clone and configure Malcolm, then fetch helper scripts and samples."""
    settings = ctx.config.malcolm

    if ctx.confirmed("malcolm", "Clone and setup Malcolm", default=True):
        cloned = ctx.run_step("clone", partial(ctx.git.clone, settings.repo, settings.path))
        if cloned is StepStatus.COMPLETED:
            ctx.run_step(
                "install",
                partial(
                    ctx.runner.run,
                    ["python3", "./scripts/install.py", *settings.install_args],
                    cwd=settings.path,
                    capture_output=False,
                ),
            )
            ctx.run_step("configure", partial(configure_malcolm, ctx))
            ctx.run_step("pull", partial(ctx.docker.compose_pull, settings.path))
            ctx.note(
                f"Please run {settings.path / 'scripts' / 'auth_setup'} to complete configuration"
            )

        for url in settings.helper_scripts:
            ctx.run_step(
                f"helper.{Path(url).name}",
                partial(_download_helper, ctx, url),
            )

    if ctx.confirmed(
        "samples",
        "Download a sample PCAP (SANS Cyberville ICS CTF)",
        default=True,
    ):
        ctx.run_step("samples", partial(_download_samples, ctx))


def configure_malcolm(ctx: ActionContext) -> None:
    """Apply the compose overrides and create an empty ``auth.env``."""
    settings = ctx.config.malcolm
    compose_file = settings.path / settings.compose_file
    current = compose_file.read_text(encoding="utf-8")
    ctx.files.write(compose_file, set_key_values(current, settings.compose_overrides))
    (settings.path / "auth.env").touch()


def _download_helper(ctx: ActionContext, url: str) -> None:
    ctx.config.local_bin.mkdir(parents=True, exist_ok=True)
    script = ctx.http.download_to(url, ctx.config.local_bin)
    script.chmod(0o755)


def _download_samples(ctx: ActionContext) -> None:
    settings = ctx.config.malcolm
    settings.artifacts.mkdir(parents=True, exist_ok=True)
    for url in settings.samples:
        ctx.http.download_to(url, settings.artifacts)
    for name in settings.copy_samples:
        source = settings.artifacts / name
        ctx.files.install_file(source, settings.path / name, mode=0o644)


__all__ = ["configure_malcolm", "install_malcolm"]
