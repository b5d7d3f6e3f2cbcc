"""Extraction of Lua scripts and XML UI from the save and its objects."""

from __future__ import annotations

import re
from typing import Dict, List, Optional

from ..document import JsonDict, root_objects, walk_objects
from ..logging import get_logger
from ..models import ScriptRecord, VirtualFile
from ..paths import clean_str_for_path
from ..text import normalize_line_endings
from ..unbundle import ScriptUnbundler, XmlUnbundler
from .base import Extractor

GLOBAL_NAME = "Global"
GLOBAL_GUID = "-1"

_VALID_GUID = re.compile(r"^[0-9a-fA-F]{6}\Z")


def is_valid_guid(value: str) -> bool:
    return _VALID_GUID.match(value) is not None


def count_guids(objs: List[object]) -> Dict[str, int]:
    """Count how often each (sanitised) GUID occurs across the whole object graph."""
    counts: Dict[str, int] = {}
    for obj in walk_objects(objs):
        guid = obj.get("GUID")
        if not isinstance(guid, str):
            continue
        guid = clean_str_for_path(guid)
        if not guid:
            continue
        counts[guid] = counts.get(guid, 0) + 1
    return counts


class ScriptExtractor(Extractor):
    """Collects one ScriptRecord per object carrying ``LuaScript`` or ``XmlUI``.

    With ``unbundle`` enabled, bundled modules and includes are moved into
    ``lib_data`` keyed by virtual path.
    """

    def __init__(self, unbundle: bool) -> None:
        self._unbundle = unbundle
        self._obj_data: List[ScriptRecord] = []
        self._lib_data: Dict[str, str] = {}
        self._script_unbundler = ScriptUnbundler(self._lib_data)
        self._xml_unbundler = XmlUnbundler(self._lib_data)
        # GUID -> occurrences assigned so far, only for GUIDs needing a suffix.
        self._duplicate_guids: Dict[str, int] = {}
        self.logger = get_logger("extractors.scripts")

    @property
    def obj_data(self) -> List[ScriptRecord]:
        return self._obj_data

    @property
    def lib_data(self) -> Dict[str, str]:
        return self._lib_data

    @property
    def library_files(self) -> List[VirtualFile]:
        return [VirtualFile(path=path, content=content) for path, content in self._lib_data.items()]

    def extract(self, mod: JsonDict) -> None:
        self._extract_from_mod_or_obj(GLOBAL_NAME, GLOBAL_GUID, mod)

        objs = root_objects(mod)
        if not objs:
            return

        self._duplicate_guids = {
            guid: 0 for guid, count in count_guids(objs).items() if count > 1
        }
        if self._duplicate_guids:
            self.logger.debug(
                "GUIDs shared by several objects: %s", ", ".join(sorted(self._duplicate_guids))
            )

        for obj in self.iter_objects(mod):
            self._extract_from_obj(obj)

        self.logger.debug(
            "Extracted %d script records and %d library files",
            len(self._obj_data),
            len(self._lib_data),
        )

    def _extract_from_obj(self, obj: JsonDict) -> None:
        name = _object_name(obj)
        if not name:
            return

        guid = obj.get("GUID")
        if not isinstance(guid, str) or not is_valid_guid(guid):
            return

        self._extract_from_mod_or_obj(name, guid, obj)

    def _extract_from_mod_or_obj(self, name: str, guid: str, mod_or_obj: JsonDict) -> None:
        script = _as_text(mod_or_obj.get("LuaScript"))
        xml = _as_text(mod_or_obj.get("XmlUI"))
        if not script and not xml:
            return

        if script:
            script = normalize_line_endings(script)
        if xml:
            xml = normalize_line_endings(xml)

        if self._unbundle:
            if script:
                script = self._script_unbundler.unbundle(script)
            if xml:
                xml = self._xml_unbundler.unbundle(xml)

        index = 0
        if guid in self._duplicate_guids:
            index = self._duplicate_guids[guid] = self._duplicate_guids[guid] + 1

        self._obj_data.append(ScriptRecord(name=name, guid=guid, index=index, script=script, xml=xml))


def _object_name(obj: JsonDict) -> str:
    for key in ("Nickname", "Name"):
        value = obj.get(key)
        if isinstance(value, str):
            name = clean_str_for_path(value)
            if name:
                return name
    return ""


def _as_text(value: object) -> Optional[str]:
    return value if isinstance(value, str) else None


__all__ = ["GLOBAL_GUID", "GLOBAL_NAME", "ScriptExtractor", "count_guids", "is_valid_guid"]
