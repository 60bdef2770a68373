"""Docker engine and docker-compose."""
from __future__ import annotations

from functools import partial

from ..errors import GuardError, StepError
from ..steps import ActionContext, StepStatus
from .packages import try_essential_packages


def install_docker(ctx: ActionContext) -> None:
    """Install docker and docker-compose when they do not already work.

    A docker-compose binary that still fails after installation aborts the
    whole run.
    """
    docker = ctx.docker
    if docker.available():
        ctx.note('"docker" is already installed!')
        ctx.record("docker", StepStatus.COMPLETED, "already installed")
    elif ctx.confirmed("docker", '"docker info" failed, attempt to install docker'):
        _install_engine(ctx)

    if docker.compose_available():
        ctx.note('"docker-compose" is already installed!')
        ctx.record("compose", StepStatus.COMPLETED, "already installed")
    else:
        ctx.run_step(
            "compose",
            partial(_install_compose, ctx),
            prompt='"docker-compose version" failed, attempt to install docker-compose',
            default=True,
        )


def _install_engine(ctx: ActionContext) -> None:
    docker = ctx.docker
    ctx.run_step("docker.install", partial(_install_packages, ctx))
    ctx.run_step("docker.enable", docker.enable)
    ctx.run_step("docker.start", docker.start)
    if not ctx.config.is_root:
        user = ctx.config.user
        ctx.note(f'Adding "{user}" to group "docker"...')
        ctx.run_step("docker.group", partial(docker.add_user, user))
        ctx.note("You will need to log out and log back in for this to take effect")


def _install_packages(ctx: ActionContext) -> None:
    try_essential_packages(ctx)
    ctx.docker.install()


def _install_compose(ctx: ActionContext) -> None:
    settings = ctx.config.docker
    ctx.note(f"Installing Docker Compose via download to {settings.compose_path.parent}...")
    try_essential_packages(ctx)
    url = ctx.docker.compose_url(settings.compose_url, settings.compose_version)
    try:
        ctx.docker.install_compose(url, settings.compose_path)
    except StepError as exc:
        ctx.note(str(exc), style="red")
    if not ctx.docker.compose_available(settings.compose_path):
        raise GuardError("Installing docker-compose failed")


__all__ = ["install_docker"]
