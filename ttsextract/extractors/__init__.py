"""Per-document extractors for scripts, linked resources and notes."""

from .base import Extractor
from .linked import LinkedExtractor
from .notes import NotesExtractor
from .scripts import ScriptExtractor

__all__ = ["Extractor", "LinkedExtractor", "NotesExtractor", "ScriptExtractor"]
