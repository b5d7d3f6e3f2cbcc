"""Reverse ``<!-- include path -->`` blocks in XML UI markup."""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

from ..models import VirtualFile
from ..paths import ROOT_DIR, join_virtual_path, sanitize_xml_include_path, virtual_dirname
from ..text import remove_extra_trailing_lf, text_to_xml_attr

# ( (?:^[^\S\n]+)? ) ( <!-- [^\S\n]+ include [^\S\n]+ ( path ) [^\S\n]+ --> ) \n (.*?) \2
_INCLUDE_PATTERN = re.compile(
    r"((?:^[^\S\n]+)?)"
    r"(<!--[^\S\n]+include[^\S\n]+((?!--)\S(?:(?:(?!--)[^\n])*(?!--)\S)?)[^\S\n]+-->)"
    r"\n(.*?)\2",
    re.MULTILINE | re.DOTALL,
)


class XmlUnbundler:
    """Moves included XML fragments into virtual files and emits ``<Include/>`` tags."""

    def __init__(self, files: Optional[Dict[str, str]] = None) -> None:
        self.files: Dict[str, str] = files if files is not None else {}

    @property
    def virtual_files(self) -> List[VirtualFile]:
        return [VirtualFile(path=path, content=content) for path, content in self.files.items()]

    def unbundle(self, xml: str) -> str:
        return self._unbundle(ROOT_DIR, xml)

    def _unbundle(self, dir_path: str, xml: str) -> str:
        def _replace(match: re.Match[str]) -> str:
            prefix, _, include_path, included_xml = match.group(1, 2, 3, 4)

            rel_path = sanitize_xml_include_path(include_path)
            if rel_path is None:
                return match.group(0)

            # Raises InvalidXmlTextError before anything is recorded.
            include = f'<Include src="{text_to_xml_attr(include_path)}"/>'

            path = join_virtual_path(dir_path, rel_path)
            if prefix:
                included_xml = re.sub(
                    "^" + re.escape(prefix), "", included_xml, flags=re.MULTILINE
                )

            self.files[path] = self._unbundle(virtual_dirname(path), included_xml)
            return prefix + include

        return remove_extra_trailing_lf(_INCLUDE_PATTERN.sub(_replace, xml))


def unbundle_xml(xml: str) -> Tuple[str, Dict[str, str]]:
    """Return the rewritten markup and the virtual files it expanded into."""
    unbundler = XmlUnbundler()
    return unbundler.unbundle(xml), unbundler.files


__all__ = ["XmlUnbundler", "unbundle_xml"]
