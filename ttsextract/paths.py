"""Sanitisation of titles, GUIDs and include targets into relative path segments."""

from __future__ import annotations

import re
from typing import Iterable, Optional

# Still very permissive; only strips what breaks common filesystems.
_INVALID_PATH_CHARS = re.compile(r'[\x00-\x1f"*./:<>?\\|\]]')
_MODULE_PATH_SEP = re.compile(r"[./\\]")
_INCLUDE_PATH_SEP = re.compile(r"[/\\]")
_ABSOLUTE_INCLUDE_PREFIX = re.compile(r"^![/\\]")
_XML_EXT = re.compile(r"\.xml$", re.IGNORECASE)

ROOT_DIR = "."


def clean_str_for_path(value: str) -> str:
    """Replace characters that are unsafe in a path segment with spaces."""
    return _INVALID_PATH_CHARS.sub(" ", value).rstrip()


def _join_segments(segments: Iterable[str]) -> str:
    cleaned = (clean_str_for_path(segment) for segment in segments)
    return "/".join(segment for segment in cleaned if segment)


def sanitize_module_path(module_path: str) -> str:
    """Turn a dotted or slashed module name into a relative path (may be empty)."""
    return _join_segments(_MODULE_PATH_SEP.split(module_path))


def sanitize_script_include_path(include_path: str) -> Optional[str]:
    """Resolve a `#include` target into a relative path, or None if unusable.

    ``foo`` and ``/foo`` are relative paths. ``!/foo`` is absolute and is
    returned as ``/foo``. ``/!/foo`` is the relative path ``!/foo``.
    """
    rel_path = _ABSOLUTE_INCLUDE_PREFIX.sub("", include_path, count=1)
    is_absolute = rel_path != include_path

    rel_path = _join_segments(_INCLUDE_PATH_SEP.split(rel_path))
    if not rel_path:
        return None

    return "/" + rel_path if is_absolute else rel_path


def sanitize_xml_include_path(include_path: str) -> Optional[str]:
    """Resolve an XML include target; ``foo.xml`` and ``/foo.xml`` are both relative."""
    stripped = _XML_EXT.sub("", include_path, count=1)
    rel_path = _join_segments(_INCLUDE_PATH_SEP.split(stripped))
    if not rel_path:
        return None
    return rel_path + ".xml"


def join_virtual_path(dir_path: str, rel_path: str) -> str:
    """Join a virtual directory and a relative path without a leading ``./``."""
    if not dir_path or dir_path == ROOT_DIR:
        return rel_path
    return f"{dir_path}/{rel_path}"


def virtual_dirname(path: str) -> str:
    """Return the directory of a virtual path, ``.`` for top-level files."""
    head, sep, _ = path.rpartition("/")
    if not sep or not head:
        return ROOT_DIR
    return head


__all__ = [
    "ROOT_DIR",
    "clean_str_for_path",
    "join_virtual_path",
    "sanitize_module_path",
    "sanitize_script_include_path",
    "sanitize_xml_include_path",
    "virtual_dirname",
]
