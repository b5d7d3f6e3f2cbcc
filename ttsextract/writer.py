"""Persistence of extracted records into the output directory tree."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, List, Mapping, Sequence

from .logging import get_logger
from .models import NoteRecord, ResourceRecord, ScriptRecord
from .text import ensure_trailing_lf
from .unbundle import SCRIPT_EXT

OBJS_DIRNAME = "objs"
LIB_DIRNAME = "lib"
NOTES_DIRNAME = "notes"
LINKED_RESOURCES_FILENAME = "linked_resources.json"
XML_EXT = ".xml"
JSON_INDENT = 3


def write_text_file(path: Path, text: str) -> None:
    """Write text with a terminating newline and native line endings."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(ensure_trailing_lf(text), encoding="utf-8")


def dump_resources(resources: Iterable[ResourceRecord]) -> str:
    payload = {"resources": [record.to_dict() for record in resources]}
    return json.dumps(payload, indent=JSON_INDENT, ensure_ascii=False)


class OutputWriter:
    """Lays out extracted files below ``out_dir``."""

    def __init__(self, out_dir: Path) -> None:
        self.out_dir = out_dir
        self.logger = get_logger("writer")

    @property
    def linked_resources_path(self) -> Path:
        return self.out_dir / LINKED_RESOURCES_FILENAME

    def write_scripts(
        self,
        records: Sequence[ScriptRecord],
        lib_data: Mapping[str, str],
        *,
        scripts: bool = True,
        xml: bool = True,
    ) -> List[Path]:
        """Write ``objs/<name>.<guid>[-<index>].<ext>`` files and the ``lib/`` tree."""
        written: List[Path] = []
        objs_dir = self.out_dir / OBJS_DIRNAME
        for record in records:
            base = record.base_filename
            if scripts and record.script:
                written.append(self._write(objs_dir / (base + SCRIPT_EXT), record.script))
            if xml and record.xml:
                written.append(self._write(objs_dir / (base + XML_EXT), record.xml))

        lib_dir = self.out_dir / LIB_DIRNAME
        for rel_path, content in lib_data.items():
            if rel_path.endswith(SCRIPT_EXT) and not scripts:
                continue
            if rel_path.endswith(XML_EXT) and not xml:
                continue
            written.append(self._write(lib_dir.joinpath(*rel_path.split("/")), content))

        self.logger.debug("Wrote %d script and library files", len(written))
        return written

    def write_linked(self, resources: Sequence[ResourceRecord]) -> Path:
        """Write ``linked_resources.json`` with resources in the given order."""
        path = self.linked_resources_path
        self.out_dir.mkdir(parents=True, exist_ok=True)
        write_text_file(path, dump_resources(resources))
        self.logger.debug("Wrote %d linked resources to %s", len(resources), path)
        return path

    def write_notes(self, notes: Sequence[NoteRecord]) -> List[Path]:
        notes_dir = self.out_dir / NOTES_DIRNAME
        notes_dir.mkdir(parents=True, exist_ok=True)
        written = [self._write(notes_dir / note.filename, note.render()) for note in notes]
        self.logger.debug("Wrote %d notes", len(written))
        return written

    def _write(self, path: Path, text: str) -> Path:
        write_text_file(path, text)
        return path


__all__ = [
    "LIB_DIRNAME",
    "LINKED_RESOURCES_FILENAME",
    "NOTES_DIRNAME",
    "OBJS_DIRNAME",
    "OutputWriter",
    "dump_resources",
    "write_text_file",
]
