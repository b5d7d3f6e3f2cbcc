"""Reverse luabundle bundling and ``----#include`` fences in Lua scripts."""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

from ..logging import get_logger
from ..models import VirtualFile
from ..paths import (
    ROOT_DIR,
    join_virtual_path,
    sanitize_module_path,
    sanitize_script_include_path,
    virtual_dirname,
)
from ..text import chomp
from .luabundle import unbundle_string

SCRIPT_EXT = ".ttslua"

# ^---- ( \s* #include [^\S\n]+ ( \S(?:[^\n]*\S)? ) [^\S\n]* ) \n (.*?) ^---- \1 $
_INCLUDE_PATTERN = re.compile(
    r"^----(\s*#include[^\S\n]+(\S(?:[^\n]*\S)?)[^\S\n]*)\n(.*?)^----\1$",
    re.MULTILINE | re.DOTALL,
)
_WRAPPED_PATH_PATTERN = re.compile(r"^<(.*)>$", re.DOTALL)
_WRAPPED_BODY_PATTERN = re.compile(r"\Ado\n(.*)\nend\Z", re.DOTALL)


class ScriptUnbundler:
    """Expands bundled modules and includes into a map of virtual files.

    The file map may be shared with an XmlUnbundler so that one document
    produces a single library tree.
    """

    def __init__(self, files: Optional[Dict[str, str]] = None) -> None:
        self.files: Dict[str, str] = files if files is not None else {}
        self.logger = get_logger("unbundle.script")

    @property
    def virtual_files(self) -> List[VirtualFile]:
        return [VirtualFile(path=path, content=content) for path, content in self.files.items()]

    def unbundle(self, script: str) -> str:
        """Unbundle modules, then expand includes relative to the extraction root."""
        bundle = unbundle_string(script)
        if bundle is not None:
            script = bundle.root_module.content
            for module in bundle.dependencies():
                base_path = sanitize_module_path(module.name)
                if not base_path:
                    self.logger.debug("Skipping bundled module with unusable name %r", module.name)
                    continue
                # Bundled modules never contain #include fences.
                self.files[base_path + SCRIPT_EXT] = module.content
            self.logger.debug("Unbundled %d luabundle modules", len(bundle.modules) - 1)

        return self.unbundle_includes(ROOT_DIR, script)

    def unbundle_includes(self, dir_path: str, script: str) -> str:
        """Move every ``#include`` body into its own file, leaving the marker line."""

        def _replace(match: re.Match[str]) -> str:
            include, include_path, included_script = match.group(1, 2, 3)
            included_script = chomp(included_script)

            wrapped = _WRAPPED_PATH_PATTERN.match(include_path)
            if wrapped is not None:
                include_path = wrapped.group(1)
                included_script = _WRAPPED_BODY_PATTERN.sub(r"\1", included_script, count=1)

            rel_path = sanitize_script_include_path(include_path)
            if rel_path is None:
                return match.group(0)

            if rel_path.startswith("/"):
                path = rel_path[1:] + SCRIPT_EXT
            else:
                path = join_virtual_path(dir_path, rel_path + SCRIPT_EXT)

            self.files[path] = self.unbundle_includes(virtual_dirname(path), included_script)
            return "----" + include

        return _INCLUDE_PATTERN.sub(_replace, script)


def unbundle_script(script: str) -> Tuple[str, Dict[str, str]]:
    """Return the rewritten script and the virtual files it expanded into."""
    unbundler = ScriptUnbundler()
    return unbundler.unbundle(script), unbundler.files


__all__ = ["SCRIPT_EXT", "ScriptUnbundler", "unbundle_script"]
