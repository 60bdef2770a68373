"""Pytest configuration helpers for the test suite."""

from __future__ import annotations

import subprocess
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path

import pytest
from rich.console import Console

from hostprep.config import AppConfig, load_config
from hostprep.errors import StepError
from hostprep.prompts import ScriptedConfirmer
from hostprep.providers import (
    AsdfManager,
    CommandError,
    CommandRunner,
    DockerProvider,
    DownloadError,
    GitProvider,
    HostFiles,
    PackageManager,
)
from hostprep.providers.http import UNKNOWN_RELEASE
from hostprep.steps import ActionContext

Response = int | tuple[int, str]


class FakeRunner(CommandRunner):
    """Record commands instead of executing them.

    ``responses`` maps a command prefix (joined with spaces, without the sudo
    prefix) to an exit code or an ``(exit code, stdout)`` pair. Unknown
    commands succeed with empty output.
    """

    def __init__(
        self,
        responses: Mapping[str, Response] | None = None,
        *,
        installed: Sequence[str] = (),
        sudo: tuple[str, ...] = ("sudo",),
    ) -> None:
        """Create a runner with canned *responses* and *installed* tools."""
        super().__init__(sudo=sudo, env={"PATH": "/usr/bin"})
        self.responses = dict(responses or {})
        self.installed = set(installed)
        self.calls: list[list[str]] = []
        self.inputs: dict[str, str] = {}

    def run(
        self,
        args: Sequence[str | Path],
        *,
        privileged: bool = False,
        check: bool = True,
        capture_output: bool = True,
        cwd: Path | None = None,
        input: str | None = None,  # noqa: A002
    ) -> subprocess.CompletedProcess[str]:
        """Record *args* and return the canned response."""
        plain = [str(arg) for arg in args]
        command = [*(self.sudo if privileged else ()), *plain]
        self.calls.append(command)
        if input is not None:
            self.inputs[" ".join(plain)] = input
        returncode, stdout = self._lookup(" ".join(plain))
        if check and returncode != 0:
            raise CommandError(f"{' '.join(command)} failed (exit {returncode}): boom")
        return subprocess.CompletedProcess(command, returncode, stdout, "")

    def which(self, name: str) -> str | None:
        """Resolve only tools listed as installed."""
        return f"/usr/bin/{name}" if name in self.installed else None

    def commands(self) -> list[str]:
        """Return every recorded command joined with spaces."""
        return [" ".join(call) for call in self.calls]

    def _lookup(self, command: str) -> tuple[int, str]:
        for prefix in sorted(self.responses, key=len, reverse=True):
            if command.startswith(prefix):
                response = self.responses[prefix]
                if isinstance(response, tuple):
                    return response
                return response, ""
        return 0, ""


class FakeHttp:
    """In-memory stand-in for :class:`hostprep.providers.HttpClient`."""

    def __init__(
        self,
        files: Mapping[str, bytes] | None = None,
        releases: Mapping[str, str] | None = None,
    ) -> None:
        """Serve *files* by URL and *releases* by GitHub repo."""
        self.files = dict(files or {})
        self.releases = dict(releases or {})
        self.downloads: list[str] = []

    def download(self, url: str, *, accept: str | None = None) -> bytes:
        """Return the canned body for *url*."""
        self.downloads.append(url)
        if url not in self.files:
            raise DownloadError(f"GET {url} failed: HTTP 404")
        return self.files[url]

    def download_to(self, url: str, dest: Path) -> Path:
        """Write the canned body for *url* to *dest*."""
        payload = self.download(url)
        if dest.is_dir():
            dest = dest / url.rsplit("/", 1)[-1]
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(payload)
        return dest

    def latest_release(self, repo: str) -> str:
        """Return the configured tag for *repo*."""
        return self.releases.get(repo, UNKNOWN_RELEASE)


class FakeArchives:
    """Archive extractor that materialises configured member files."""

    def __init__(self, members: Mapping[str, Sequence[str]] | None = None) -> None:
        """Map archive file names to the members they contain."""
        self.members = {key: list(value) for key, value in (members or {}).items()}
        self.extracted: list[tuple[str, str, int]] = []

    def extract(
        self,
        archive: Path,
        dest: Path,
        *,
        fmt: str = "tar",
        strip_components: int = 0,
    ) -> None:
        """Create each member of *archive* under *dest*."""
        self.extracted.append((archive.name, fmt, strip_components))
        if archive.name not in self.members:
            raise StepError(f"unexpected archive {archive.name}")
        for member in self.members[archive.name]:
            target = dest / member
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(f"#!/bin/sh\necho {member}\n", encoding="utf-8")


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[..., AppConfig]:
    """Return a factory building configs rooted in ``tmp_path``."""

    def factory(**overrides: object) -> AppConfig:
        home = tmp_path / "home"
        home.mkdir(exist_ok=True)
        etc = tmp_path / "etc"
        base: dict[str, object] = {
            "user": "tester",
            "is_root": False,
            "home": str(home),
            "logs_dir": str(tmp_path / "logs"),
            "system": {
                "sysctl_file": str(etc / "sysctl.conf"),
                "limits_file": str(etc / "limits.d" / "limits.conf"),
                "grub_file": str(etc / "default" / "grub"),
                "grub_cfg": str(tmp_path / "boot" / "grub.cfg"),
            },
        }
        base.update(overrides)
        return load_config(env={"HOME": str(home)}, overrides=base)

    return factory


@pytest.fixture
def config(make_config: Callable[..., AppConfig]) -> AppConfig:
    """Default configuration rooted in ``tmp_path``."""
    return make_config()


@pytest.fixture
def make_context(config: AppConfig) -> Callable[..., ActionContext]:
    """Return a factory assembling an :class:`ActionContext` around fakes."""

    def factory(
        *,
        answers: Sequence[str] = (),
        runner: FakeRunner | None = None,
        http: FakeHttp | None = None,
        archives: FakeArchives | None = None,
        app_config: AppConfig | None = None,
    ) -> ActionContext:
        cfg = app_config or config
        fake_runner = runner or FakeRunner()
        fake_http = http or FakeHttp()
        packages = PackageManager(fake_runner)
        return ActionContext(
            config=cfg,
            console=Console(record=True, width=400),
            err_console=Console(record=True, width=400),
            confirm=ScriptedConfirmer(answers),
            runner=fake_runner,
            packages=packages,
            asdf=AsdfManager(fake_runner, cfg.asdf),
            docker=DockerProvider(fake_runner, packages, fake_http),  # type: ignore[arg-type]
            git=GitProvider(fake_runner),
            http=fake_http,  # type: ignore[arg-type]
            files=HostFiles(fake_runner),
            archives=archives or FakeArchives(),  # type: ignore[arg-type]
            action="test",
        )

    return factory
