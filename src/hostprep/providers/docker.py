"""Docker engine and docker-compose provisioning."""
from __future__ import annotations

import platform
import tempfile
from dataclasses import dataclass
from pathlib import Path

from .command import CommandRunner
from .http import HttpClient
from .packages import PackageManager


@dataclass(slots=True)
class DockerProvider:
    """Install and drive the container runtime."""

    runner: CommandRunner
    packages: PackageManager
    http: HttpClient
    docker_bin: str = "docker"
    compose_bin: str = "docker-compose"
    systemctl_bin: str = "systemctl"

    def available(self) -> bool:
        """Return ``True`` when ``docker info`` succeeds."""
        return self.runner.succeeds([self.docker_bin, "info"], privileged=True)

    def install(self) -> None:
        """Install docker from amazon-linux-extras."""
        self.packages.update()
        self.packages.extras_install("docker")

    def enable(self) -> None:
        """Start the docker service at boot."""
        self.runner.run([self.systemctl_bin, "enable", "docker"], privileged=True)

    def start(self) -> None:
        """Start the docker service now."""
        self.runner.run([self.systemctl_bin, "start", "docker"], privileged=True)

    def add_user(self, user: str) -> None:
        """Add *user* to the ``docker`` group."""
        self.runner.run(["usermod", "-a", "-G", "docker", user], privileged=True)

    def compose_available(self, compose_bin: str | Path | None = None) -> bool:
        """Return ``True`` when ``docker-compose version`` succeeds."""
        return self.runner.succeeds([str(compose_bin or self.compose_bin), "version"])

    def compose_url(self, template: str, version: str) -> str:
        """Fill the release URL *template* for this machine."""
        return template.format(
            version=version,
            system=platform.system(),
            machine=platform.machine(),
        )

    def install_compose(self, url: str, dest: Path) -> None:
        """Download the docker-compose binary from *url* to *dest* (mode 755)."""
        with tempfile.TemporaryDirectory(prefix="hostprep-compose-") as staging:
            staged = self.http.download_to(url, Path(staging) / "docker-compose")
            self.runner.run(
                ["install", "-D", "-m", "0755", str(staged), str(dest)],
                privileged=True,
            )

    def compose_pull(self, project_dir: Path) -> None:
        """Pull every image referenced by the compose project in *project_dir*."""
        self.runner.run([self.compose_bin, "pull"], cwd=project_dir, capture_output=False)


__all__ = ["DockerProvider"]
