"""Core data models shared across ttsextract components."""

from dataclasses import dataclass
from typing import Dict, Optional

RESOURCE_ASSET_BUNDLE = "asset_bundle"
RESOURCE_AUDIO = "audio"
RESOURCE_IMAGE = "image"
RESOURCE_MODEL = "model"
RESOURCE_PDF = "pdf"

RESOURCE_KINDS = frozenset(
    {
        RESOURCE_ASSET_BUNDLE,
        RESOURCE_AUDIO,
        RESOURCE_IMAGE,
        RESOURCE_MODEL,
        RESOURCE_PDF,
    }
)


def is_resource_kind(value: object) -> bool:
    return isinstance(value, str) and value in RESOURCE_KINDS


@dataclass(frozen=True)
class VirtualFile:
    """A file produced by unbundling, addressed by a ``/``-separated relative path."""

    path: str
    content: str


@dataclass(frozen=True)
class ScriptRecord:
    """Inline script and/or XML UI owned by the save itself or one object."""

    name: str
    guid: str
    index: int = 0
    script: Optional[str] = None
    xml: Optional[str] = None

    @property
    def base_filename(self) -> str:
        suffix = f"-{self.index}" if self.index else ""
        return f"{self.name}.{self.guid}{suffix}"


@dataclass(frozen=True)
class ResourceRecord:
    """An externally hosted file referenced by the save."""

    url: str
    kind: str

    def to_dict(self) -> Dict[str, str]:
        return {"url": self.url, "type": self.kind}


@dataclass(frozen=True)
class NoteRecord:
    """A notebook tab, named for writing to ``notes/``."""

    filename: str
    index: int
    title: str
    body: str

    def render(self) -> str:
        return f"Title: {self.title}\n\n{self.body}"
