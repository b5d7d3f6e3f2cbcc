"""Extraction of Notebook tabs (``TabStates``)."""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional, Tuple

from ..document import JsonDict, is_json_dict
from ..logging import get_logger
from ..models import NoteRecord
from ..paths import clean_str_for_path
from ..text import normalize_line_endings
from .base import Extractor

UNTITLED = "[Untitled]"
NOTE_EXT = ".txt"

_INT_PREFIX = re.compile(r"\s*([+-]?[0-9]+)")


def _int_prefix(key: str) -> Optional[int]:
    # Mirrors parseInt(key, 10): leading whitespace and trailing junk are allowed.
    match = _INT_PREFIX.match(key)
    return int(match.group(1)) if match else None


def _tab_sort_key(key: str) -> Tuple[int, int, str]:
    number = _int_prefix(key)
    if number is not None:
        return (0, number, "")
    return (1, 0, key)


def sort_tab_keys(keys: Iterable[str]) -> List[str]:
    """Numeric keys first by value, then the remaining keys lexicographically."""
    return sorted(keys, key=_tab_sort_key)


class NotesExtractor(Extractor):
    """Produces one NoteRecord per non-empty notebook tab."""

    def __init__(self) -> None:
        self._tab_data: List[NoteRecord] = []
        self.logger = get_logger("extractors.notes")

    @property
    def tab_data(self) -> List[NoteRecord]:
        return self._tab_data

    def extract(self, mod: JsonDict) -> None:
        tabs = mod.get("TabStates")
        if not is_json_dict(tabs):
            return

        entries: List[Tuple[str, str]] = []
        for key in sort_tab_keys(tabs.keys()):
            tab = tabs[key]
            if not is_json_dict(tab):
                continue

            body = tab.get("body")
            if not isinstance(body, str):
                continue
            body = normalize_line_endings(body)
            if not body:
                continue

            title = tab.get("title")
            title = normalize_line_endings(title) if isinstance(title, str) else ""
            entries.append((title, body))

        self._tab_data.extend(self._named_records(entries))
        self.logger.debug("Extracted %d notes", len(self._tab_data))

    @staticmethod
    def _named_records(entries: List[Tuple[str, str]]) -> List[NoteRecord]:
        bases = [clean_str_for_path(title) or UNTITLED for title, _body in entries]
        totals: Dict[str, int] = {}
        for base in bases:
            totals[base] = totals.get(base, 0) + 1

        records: List[NoteRecord] = []
        seen: Dict[str, int] = {}
        for base, (title, body) in zip(bases, entries):
            index = seen.get(base, 0) + 1
            seen[base] = index
            suffix = f".{index}" if totals[base] > 1 else ""
            records.append(
                NoteRecord(filename=base + suffix + NOTE_EXT, index=index, title=title, body=body)
            )
        return records


__all__ = ["NOTE_EXT", "UNTITLED", "NotesExtractor", "sort_tab_keys"]
