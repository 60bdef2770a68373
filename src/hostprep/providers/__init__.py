"""Host collaborators used by action bodies."""
from __future__ import annotations

from .archive import ArchiveError, ArchiveExtractor
from .asdf import AsdfManager
from .command import CommandError, CommandRunner
from .docker import DockerProvider
from .files import FileEditError, HostFiles
from .git import GitProvider
from .http import DownloadError, HttpClient
from .packages import PackageManager

__all__ = [
    "ArchiveError",
    "ArchiveExtractor",
    "AsdfManager",
    "CommandError",
    "CommandRunner",
    "DockerProvider",
    "DownloadError",
    "FileEditError",
    "GitProvider",
    "HostFiles",
    "HttpClient",
    "PackageManager",
]
