"""Pipeline orchestration for extract/download flows."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, TextIO

from .config import ExtractConfig, TTSExtractConfig, load_config
from .document import JsonValue, is_json_dict
from .download import ResourceDownloader
from .extractors import LinkedExtractor, NotesExtractor, ScriptExtractor
from .logging import get_logger
from .writer import OutputWriter


def default_tts_dir() -> Path:
    """Return the Tabletop Simulator data directory for this platform."""
    if sys.platform == "win32":
        doc_dir = Path.home() / "Documents"
    else:
        doc_dir = Path.home()
    return doc_dir / "My Games" / "Tabletop Simulator"


def default_saves_dir() -> Path:
    return default_tts_dir() / "Saves"


@dataclass
class ExtractOutcome:
    """Summary of an extract run."""

    out_dir: Path
    script_records: int = 0
    library_files: int = 0
    resources: int = 0
    notes: int = 0


class Orchestrator:
    """Coordinates loading a save, running extractors and writing the results."""

    def __init__(
        self,
        *,
        stdin: TextIO | None = None,
        writer_factory: Callable[[Path], OutputWriter] = OutputWriter,
        downloader: ResourceDownloader | None = None,
    ) -> None:
        self._stdin = stdin
        self._writer_factory = writer_factory
        self._downloader = downloader
        self.logger = get_logger("orchestrator")

    def run_extract(
        self,
        save_file: str | None,
        out_dir: str,
        options: ExtractConfig,
        *,
        config_path: Path | None = None,
    ) -> ExtractOutcome:
        """Extract the requested parts of a save into ``out_dir``."""
        out_path = Path(out_dir or ".")
        config = self._load_config(config_path, out_path)
        options = config.extract.merged(options)
        if not options.any_enabled():
            self.logger.warning(
                "No parts selected; pass --all or one of --scripts, --xml, --linked, --notes"
            )

        out_path.mkdir(parents=True, exist_ok=True)
        outcome = ExtractOutcome(out_dir=out_path)

        mod = self.load_document(save_file, saves_dir=config.saves_dir)
        if not is_json_dict(mod):
            self.logger.warning("Save file does not contain a JSON object; nothing to extract")
            return outcome

        writer = self._writer_factory(out_path)
        self.logger.info("Extracting into %s", out_path)

        if options.scripts or options.xml:
            script_extractor = ScriptExtractor(options.unbundle)
            script_extractor.extract(mod)
            writer.write_scripts(
                script_extractor.obj_data,
                script_extractor.lib_data,
                scripts=options.scripts,
                xml=options.xml,
            )
            outcome.script_records = len(script_extractor.obj_data)
            outcome.library_files = len(script_extractor.lib_data)

        if options.linked:
            linked_extractor = LinkedExtractor()
            linked_extractor.extract(mod)
            resources = linked_extractor.resources
            writer.write_linked(resources)
            outcome.resources = len(resources)

        if options.notes:
            notes_extractor = NotesExtractor()
            notes_extractor.extract(mod)
            writer.write_notes(notes_extractor.tab_data)
            outcome.notes = len(notes_extractor.tab_data)

        self.logger.info(
            "Extracted %d scripted objects, %d library files, %d linked resources, %d notes",
            outcome.script_records,
            outcome.library_files,
            outcome.resources,
            outcome.notes,
        )
        return outcome

    def run_download(self, out_dir: str, *, config_path: Path | None = None) -> int:
        """Download the resources listed by a previous ``extract --linked`` run."""
        out_path = Path(out_dir or ".")
        config = self._load_config(config_path, out_path)
        downloader = self._downloader or ResourceDownloader(
            timeout=config.download.timeout,
            user_agent=config.download.user_agent,
        )
        saved = downloader.download_all(out_path)
        self.logger.info("Downloaded %d resources into %s", saved, out_path)
        return saved

    def load_document(self, save_file: str | None, *, saves_dir: Path | None = None) -> JsonValue:
        """Decode a save from stdin, a path, or a name in the saves directory."""
        if not save_file:
            stream = self._stdin or sys.stdin
            self.logger.debug("Reading save from stdin")
            text = stream.read()
        else:
            path = Path(save_file).expanduser()
            if not path.exists():
                path = (saves_dir or default_saves_dir()) / save_file
            self.logger.debug("Reading save from %s", path)
            text = path.read_text(encoding="utf-8")
        return json.loads(text)

    def _load_config(self, config_path: Path | None, out_path: Path) -> TTSExtractConfig:
        if config_path is not None:
            return load_config(config_path)
        if out_path.is_dir():
            return load_config(out_path)
        return TTSExtractConfig(root=out_path.resolve())


__all__ = ["ExtractOutcome", "Orchestrator", "default_saves_dir", "default_tts_dir"]
