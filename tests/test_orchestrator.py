"""End-to-end tests for extract and download runs."""

from __future__ import annotations

import io
import json
import logging
from pathlib import Path

from ttsextract.config import ExtractConfig
from ttsextract.download import ResourceDownloader
from ttsextract.orchestrator import Orchestrator

from tests._fixtures.save_builder import SaveBuilder, make_object


def _files(root: Path) -> set[str]:
    return {path.relative_to(root).as_posix() for path in root.rglob("*") if path.is_file()}


def _populate(save_builder: SaveBuilder) -> None:
    save_builder.set(
        LuaScript="----#include lib/setup\nsetup()\n----#include lib/setup\n",
        XmlUI="<Panel/>",
        TableURL="http://x/table",
        TabStates={
            "1": {"title": "Rules", "body": "Read me."},
            "0": {"title": "Rules", "body": "Read me first."},
        },
    )
    save_builder.add(
        make_object(
            "abcdef",
            nickname="Deck",
            script="print('deck')",
            CustomDeck={"1": {"FaceURL": "http://x/face", "BackURL": "http://x/back"}},
        )
    )
    save_builder.add(make_object("abcdef", nickname="Deck", script="print('copy')"))


def test_run_extract_everything(save_builder: SaveBuilder, tmp_path: Path) -> None:
    _populate(save_builder)
    save_file = save_builder.write()
    out_dir = tmp_path / "out"

    outcome = Orchestrator().run_extract(str(save_file), str(out_dir), ExtractConfig.everything())

    assert _files(out_dir) == {
        "objs/Global.-1.ttslua",
        "objs/Global.-1.xml",
        "objs/Deck.abcdef-1.ttslua",
        "objs/Deck.abcdef-2.ttslua",
        "lib/lib/setup.ttslua",
        "linked_resources.json",
        "notes/Rules.1.txt",
        "notes/Rules.2.txt",
    }
    assert (out_dir / "objs" / "Global.-1.ttslua").read_text(encoding="utf-8") == (
        "----#include lib/setup\n"
    )
    assert (out_dir / "objs" / "Deck.abcdef-1.ttslua").read_text(encoding="utf-8") == (
        "print('copy')\n"
    )
    assert (out_dir / "lib" / "lib" / "setup.ttslua").read_text(encoding="utf-8") == "setup()\n"
    assert (out_dir / "notes" / "Rules.1.txt").read_text(encoding="utf-8") == (
        "Title: Rules\n\nRead me first.\n"
    )
    linked = json.loads((out_dir / "linked_resources.json").read_text(encoding="utf-8"))
    assert [entry["url"] for entry in linked["resources"]] == [
        "http://x/back",
        "http://x/face",
        "http://x/table",
    ]
    assert outcome.script_records == 3
    assert outcome.library_files == 1
    assert outcome.resources == 3
    assert outcome.notes == 2


def test_run_extract_only_requested_parts(save_builder: SaveBuilder, tmp_path: Path) -> None:
    _populate(save_builder)
    save_file = save_builder.write()
    out_dir = tmp_path / "out"

    Orchestrator().run_extract(str(save_file), str(out_dir), ExtractConfig(scripts=True))

    assert _files(out_dir) == {
        "objs/Global.-1.ttslua",
        "objs/Deck.abcdef-1.ttslua",
        "objs/Deck.abcdef-2.ttslua",
    }
    assert "#include" in (out_dir / "objs" / "Global.-1.ttslua").read_text(encoding="utf-8")
    assert "setup()" in (out_dir / "objs" / "Global.-1.ttslua").read_text(encoding="utf-8")


def test_run_extract_merges_config_file(save_builder: SaveBuilder, tmp_path: Path) -> None:
    _populate(save_builder)
    save_file = save_builder.write()
    out_dir = tmp_path / "out"
    out_dir.mkdir()
    (out_dir / ".ttsextract.yml").write_text("extract:\n  notes: true\n", encoding="utf-8")

    outcome = Orchestrator().run_extract(str(save_file), str(out_dir), ExtractConfig())

    assert outcome.notes == 2
    assert (out_dir / "notes" / "Rules.2.txt").exists()
    assert not (out_dir / "objs").exists()


def test_run_extract_reads_stdin(tmp_path: Path) -> None:
    stdin = io.StringIO(json.dumps({"LuaScript": "print(1)"}))
    out_dir = tmp_path / "out"

    Orchestrator(stdin=stdin).run_extract(None, str(out_dir), ExtractConfig(scripts=True))

    assert (out_dir / "objs" / "Global.-1.ttslua").read_text(encoding="utf-8") == "print(1)\n"


def test_load_document_falls_back_to_saves_dir(tmp_path: Path) -> None:
    saves_dir = tmp_path / "Saves"
    saves_dir.mkdir()
    (saves_dir / "TS_Save_7.json").write_text('{"SaveName": "Seven"}', encoding="utf-8")

    document = Orchestrator().load_document("TS_Save_7.json", saves_dir=saves_dir)

    assert document == {"SaveName": "Seven"}


def test_run_extract_ignores_non_object_documents(tmp_path: Path) -> None:
    stdin = io.StringIO("[1, 2, 3]")
    out_dir = tmp_path / "out"

    outcome = Orchestrator(stdin=stdin).run_extract(None, str(out_dir), ExtractConfig.everything())

    assert outcome.script_records == 0
    assert _files(out_dir) == set()


def test_run_download_uses_injected_downloader(tmp_path: Path) -> None:
    (tmp_path / "linked_resources.json").write_text(
        json.dumps({"resources": [{"url": "http://x/model", "type": "model"}]}),
        encoding="utf-8",
    )
    downloader = ResourceDownloader(fetcher=lambda request: b"v 0 0 0\n")

    saved = Orchestrator(downloader=downloader).run_download(str(tmp_path))

    assert saved == 1
    assert (tmp_path / "resources" / "model0.obj").read_bytes() == b"v 0 0 0\n"


def test_run_extract_warns_when_nothing_selected(tmp_path: Path, caplog, monkeypatch) -> None:
    monkeypatch.setattr(logging.getLogger("ttsextract"), "propagate", True)
    stdin = io.StringIO(json.dumps({"LuaScript": "print(1)"}))
    out_dir = tmp_path / "out"

    with caplog.at_level(logging.WARNING, logger="ttsextract"):
        outcome = Orchestrator(stdin=stdin).run_extract(
            None, str(out_dir), ExtractConfig(unbundle=True)
        )

    assert outcome.script_records == 0
    assert not (out_dir / "objs").exists()
    assert "No parts selected" in caplog.text
