"""Downloading of the resources listed in ``linked_resources.json``."""

from __future__ import annotations

import json
from dataclasses import dataclass
from http.client import HTTPException, InvalidURL
from pathlib import Path
from typing import Callable, Dict, List, Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from .logging import get_logger
from .models import (
    RESOURCE_ASSET_BUNDLE,
    RESOURCE_AUDIO,
    RESOURCE_IMAGE,
    RESOURCE_MODEL,
    RESOURCE_PDF,
    is_resource_kind,
)
from .writer import JSON_INDENT, LINKED_RESOURCES_FILENAME, write_text_file

RESOURCES_DIRNAME = "resources"


class ResourceFormatError(RuntimeError):
    """Raised when linked_resources.json is not in the expected format."""

    def __init__(self, detail: str = "") -> None:
        message = "Unrecognized format of resource file."
        super().__init__(f"{message} {detail}".strip())


@dataclass
class DownloadRequest:
    """Represents one HTTP fetch."""

    url: str
    timeout: Optional[float]
    user_agent: Optional[str]


@dataclass
class DownloadJob:
    id: int
    url: str
    kind: str
    filename: str


def _audio_ext(payload: bytes) -> str:
    if len(payload) >= 16 and payload[0:4] == b"RIFF" and payload[8:12] == b"WAVE":
        return ".wav"
    if len(payload) >= 2 and payload[0] == 0xFF and payload[1] in (0xFB, 0xF3, 0xF2):
        return ".mp3"
    return ".WAV"


def _image_ext(payload: bytes) -> str:
    if payload[:8] == b"\x89PNG\r\n\x1a\n":
        return ".png"
    if payload[:3] == b"\xff\xd8\xff":
        return ".jpg"
    return ".PNG"


_EXTENSION_DISPATCH: Dict[str, Callable[[bytes], str]] = {
    RESOURCE_ASSET_BUNDLE: lambda _payload: ".unity3d",
    RESOURCE_MODEL: lambda _payload: ".obj",
    RESOURCE_PDF: lambda _payload: ".pdf",
    RESOURCE_AUDIO: _audio_ext,
    RESOURCE_IMAGE: _image_ext,
}


def determine_extension(payload: bytes, kind: str) -> str:
    """Pick a file extension from the resource kind and its leading bytes."""
    return _EXTENSION_DISPATCH[kind](payload)


class ResourceDownloader:
    """Fetches linked resources into ``resources/`` and records their filenames."""

    def __init__(
        self,
        *,
        timeout: Optional[float] = 30.0,
        user_agent: Optional[str] = None,
        fetcher: Callable[[DownloadRequest], bytes] | None = None,
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._fetcher = fetcher or self._http_fetch
        self.logger = get_logger("download")

    def plan(self, resources: List[object]) -> List[DownloadJob]:
        """Name each well-formed entry ``<type><per-type counter>``."""
        jobs: List[DownloadJob] = []
        order = len(str(len(resources) - 1))
        counts: Dict[str, int] = {}
        for index, resource in enumerate(resources):
            if (
                not isinstance(resource, dict)
                or not isinstance(resource.get("url"), str)
                or not is_resource_kind(resource.get("type"))
            ):
                self.logger.warning("Skipping bad entry %d", index)
                continue

            kind = resource["type"]
            number = counts.get(kind, 0)
            counts[kind] = number + 1
            jobs.append(
                DownloadJob(
                    id=index,
                    url=resource["url"],
                    kind=kind,
                    filename=f"{kind}{number:0{order}d}",
                )
            )
        return jobs

    def download_all(self, out_dir: Path) -> int:
        """Download everything listed in ``out_dir/linked_resources.json``.

        Returns the number of resources saved. The JSON file is rewritten
        with an ``fn`` entry after each successful download.
        """
        linked_resources_path = out_dir / LINKED_RESOURCES_FILENAME
        data = self._load(linked_resources_path)
        resources = data["resources"]
        jobs = self.plan(resources)

        resource_dir = out_dir / RESOURCES_DIRNAME
        resource_dir.mkdir(parents=True, exist_ok=True)

        saved = 0
        for job in jobs:
            self.logger.info("Downloading %s as %s...", job.url, job.filename)
            try:
                filename = self._download(job, resource_dir)
            except (RuntimeError, OSError, ValueError, HTTPException) as exc:
                self.logger.warning(
                    "Failure downloading/saving %s as %s: %s", job.url, job.filename, exc
                )
                continue
            resources[job.id]["fn"] = filename
            write_text_file(
                linked_resources_path,
                json.dumps(data, indent=JSON_INDENT, ensure_ascii=False),
            )
            saved += 1
        return saved

    def _download(self, job: DownloadJob, resource_dir: Path) -> str:
        request = DownloadRequest(url=job.url, timeout=self.timeout, user_agent=self.user_agent)
        payload = self._fetcher(request)
        filename = job.filename + determine_extension(payload, job.kind)
        (resource_dir / filename).write_bytes(payload)
        return filename

    @staticmethod
    def _load(path: Path) -> Dict[str, object]:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ResourceFormatError(str(exc)) from exc
        if not isinstance(data, dict) or not isinstance(data.get("resources"), list):
            raise ResourceFormatError()
        return data

    @staticmethod
    def _http_fetch(request: DownloadRequest) -> bytes:
        headers = {}
        if request.user_agent:
            headers["User-Agent"] = request.user_agent
        timeout = request.timeout or 30.0

        try:
            http_request = Request(request.url, headers=headers)
            with urlopen(http_request, timeout=timeout) as response:  # type: ignore[arg-type]
                return response.read()
        except HTTPError as exc:  # pragma: no cover - depends on network
            raise RuntimeError(f"HTTP {exc.code}: {exc.reason}") from exc
        except URLError as exc:  # pragma: no cover - depends on network
            raise RuntimeError(str(exc.reason)) from exc
        except (InvalidURL, ValueError) as exc:
            raise RuntimeError(f"Invalid URL: {exc}") from exc
        except HTTPException as exc:
            raise RuntimeError(f"Transfer failed: {exc!r}") from exc


__all__ = [
    "DownloadJob",
    "DownloadRequest",
    "RESOURCES_DIRNAME",
    "ResourceDownloader",
    "ResourceFormatError",
    "determine_extension",
]
