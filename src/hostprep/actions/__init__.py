"""Registered provisioning actions.

The order of :data:`ACTIONS` is both the menu order and the order used when
the operator runs everything.
"""
from __future__ import annotations

from ..steps import Action, ensure_unique
from .binaries import install_user_local_binaries
from .docker import install_docker
from .envs import install_envs
from .home import create_common_linux_config, setup_dotfiles
from .malcolm import install_malcolm
from .packages import (
    install_common_packages,
    install_env_packages,
    install_essential_packages,
)
from .system import system_config

ACTIONS: tuple[Action, ...] = (
    Action("install-envs", "asdf and its tool plugins", install_envs),
    Action("install-env-packages", "user-level pip packages", install_env_packages),
    Action(
        "install-essential-packages",
        "curl, git and jq for cloning and downloading",
        install_essential_packages,
    ),
    Action(
        "install-common-packages",
        "EPEL, amazon-linux-extras and yum packages",
        install_common_packages,
    ),
    Action("install-docker", "docker engine and docker-compose", install_docker),
    Action("system-config", "sysctl, limits and kernel boot arguments", system_config),
    Action(
        "install-user-local-binaries",
        "release binaries in ~/.local/bin",
        install_user_local_binaries,
    ),
    Action(
        "create-common-linux-config",
        "home directory scaffolding",
        create_common_linux_config,
    ),
    Action("dotfiles", "dotfiles checkout and symlinks", setup_dotfiles),
    Action("install-malcolm", "Malcolm checkout and demo artifacts", install_malcolm),
)

ensure_unique(ACTIONS)


def list_actions() -> tuple[Action, ...]:
    """Return the registered actions in registration order."""
    return ACTIONS


__all__ = ["ACTIONS", "list_actions"]
