"""HTTP downloads and GitHub release lookups."""
from __future__ import annotations

import json
import logging
import re
import shutil
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .. import __version__
from ..errors import StepError

LOGGER = logging.getLogger(__name__)

GITHUB_API = "https://api.github.com"
UNKNOWN_RELEASE = "unknown"

_FILENAME_RE = re.compile(r'filename\*?=(?:UTF-8\'\')?"?([^";]+)"?', re.IGNORECASE)


class DownloadError(StepError):
    """Raised when a download fails."""


@dataclass(slots=True)
class HttpClient:
    """Blocking HTTP client following redirects."""

    timeout: float | None = None
    user_agent: str = f"hostprep/{__version__}"

    def download(self, url: str, *, accept: str | None = None) -> bytes:
        """Return the body of *url*."""
        with self._open(url, accept=accept) as response:
            try:
                return response.read()
            except OSError as exc:
                raise DownloadError(f"Reading {url} failed: {exc}") from exc

    def download_to(self, url: str, dest: Path) -> Path:
        """Stream *url* to *dest*.

        When *dest* is a directory the file name comes from the
        ``Content-Disposition`` header, falling back to the URL path.
        """
        with self._open(url) as response:
            if dest.is_dir():
                dest = dest / _remote_filename(url, response.headers.get("Content-Disposition"))
            dest.parent.mkdir(parents=True, exist_ok=True)
            try:
                with dest.open("wb") as handle:
                    shutil.copyfileobj(response, handle)
            except OSError as exc:
                raise DownloadError(f"Saving {url} to {dest} failed: {exc}") from exc
        LOGGER.debug("downloaded %s to %s", url, dest)
        return dest

    def fetch_json(self, url: str) -> Any:
        """Return the decoded JSON document at *url*."""
        payload = self.download(url, accept="application/vnd.github+json")
        try:
            return json.loads(payload.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise DownloadError(f"{url} returned invalid JSON: {exc}") from exc

    def latest_release(self, repo: str) -> str:
        """Return the newest release tag of GitHub *repo*.

        Falls back to the first entry of the release list and finally to
        ``"unknown"``.
        """
        try:
            latest = self.fetch_json(f"{GITHUB_API}/repos/{repo}/releases/latest")
            tag = latest.get("tag_name") if isinstance(latest, dict) else None
            if isinstance(tag, str) and tag:
                return tag
        except DownloadError as exc:
            LOGGER.debug("latest release lookup failed for %s: %s", repo, exc)
        try:
            releases = self.fetch_json(f"{GITHUB_API}/repos/{repo}/releases")
            if isinstance(releases, list) and releases and isinstance(releases[0], dict):
                tag = releases[0].get("tag_name")
                if isinstance(tag, str) and tag:
                    return tag
        except DownloadError as exc:
            LOGGER.debug("release list lookup failed for %s: %s", repo, exc)
        return UNKNOWN_RELEASE

    def _open(self, url: str, *, accept: str | None = None) -> Any:
        headers = {"User-Agent": self.user_agent}
        if accept:
            headers["Accept"] = accept
        request = urllib.request.Request(url, headers=headers)
        try:
            return urllib.request.urlopen(request, timeout=self.timeout)  # noqa: S310
        except urllib.error.HTTPError as exc:
            raise DownloadError(f"GET {url} failed: HTTP {exc.code}") from exc
        except urllib.error.URLError as exc:
            raise DownloadError(f"GET {url} failed: {exc.reason}") from exc
        except OSError as exc:
            raise DownloadError(f"GET {url} failed: {exc}") from exc


def _remote_filename(url: str, disposition: str | None) -> str:
    if disposition:
        match = _FILENAME_RE.search(disposition)
        if match:
            name = Path(urllib.parse.unquote(match.group(1).strip())).name
            if name:
                return name
    name = Path(urllib.parse.urlparse(url).path).name
    if not name:
        raise DownloadError(f"Cannot derive a file name from {url}.")
    return name


__all__ = ["DownloadError", "HttpClient", "UNKNOWN_RELEASE"]
