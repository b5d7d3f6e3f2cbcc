"""Reader for scripts packed by the luabundle Lua bundler.

A bundle starts with a metadata comment::

    -- Bundled by luabundle {"version":"1.6.0"}

followed by the bundler's runtime prelude, one registration call per
module and a final ``return __bundle_require("__root")``::

    __bundle_register("utils.math", function(require, _LOADED, __bundle_register, __bundle_modules)
    <module source>
    end)

Only the information needed to recover module sources is parsed here.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..errors import BundleFormatError

DEFAULT_ROOT_MODULE_NAME = "__root"
DEFAULT_REGISTER_IDENTIFIER = "__bundle_register"
DEFAULT_REQUIRE_IDENTIFIER = "__bundle_require"

_METADATA_PATTERN = re.compile(r"-- Bundled by luabundle (\{[^\n]*\})[^\S\n]*(?:\n|\Z)")
_STRING_ESCAPE_PATTERN = re.compile(r"\\(.)", re.DOTALL)


@dataclass(frozen=True)
class BundleMetadata:
    """Settings recorded by the bundler in the metadata comment."""

    root_module_name: str = DEFAULT_ROOT_MODULE_NAME
    register_identifier: str = DEFAULT_REGISTER_IDENTIFIER
    require_identifier: str = DEFAULT_REQUIRE_IDENTIFIER


@dataclass
class BundledModule:
    name: str
    content: str


@dataclass
class Bundle:
    """An unpacked bundle: metadata plus modules in registration order."""

    metadata: BundleMetadata
    modules: Dict[str, BundledModule]

    @property
    def root_module(self) -> BundledModule:
        return self.modules[self.metadata.root_module_name]

    def dependencies(self) -> List[BundledModule]:
        """Return every module except the root module."""
        root_name = self.metadata.root_module_name
        return [module for name, module in self.modules.items() if name != root_name]


def read_metadata(script: str) -> Optional[BundleMetadata]:
    """Return bundle metadata, or None when the script is not a luabundle bundle."""
    match = _METADATA_PATTERN.match(script)
    if match is None:
        return None

    try:
        raw = json.loads(match.group(1))
    except json.JSONDecodeError as exc:
        raise BundleFormatError(f"Malformed luabundle metadata: {exc}") from exc
    if not isinstance(raw, dict):
        raise BundleFormatError("luabundle metadata must be a JSON object")

    identifiers = raw.get("identifiers")
    if not isinstance(identifiers, dict):
        identifiers = {}

    return BundleMetadata(
        root_module_name=_as_identifier(raw.get("rootModuleName"), DEFAULT_ROOT_MODULE_NAME),
        register_identifier=_as_identifier(identifiers.get("register"), DEFAULT_REGISTER_IDENTIFIER),
        require_identifier=_as_identifier(identifiers.get("require"), DEFAULT_REQUIRE_IDENTIFIER),
    )


def unbundle_string(script: str) -> Optional[Bundle]:
    """Split a bundled script into its modules.

    Returns None when the script carries no bundle metadata. Raises
    BundleFormatError when metadata is present but the root module cannot be
    found.
    """
    metadata = read_metadata(script)
    if metadata is None:
        return None

    register = re.escape(metadata.register_identifier)
    require = re.escape(metadata.require_identifier)
    header_pattern = re.compile(
        rf'^{register}\("((?:[^"\\\n]|\\.)*)",[^\S\n]*function\([^)\n]*\)[^\S\n]*\n',
        re.MULTILINE,
    )
    footer_pattern = re.compile(rf"^return {require}\(", re.MULTILINE)

    headers = list(header_pattern.finditer(script))
    modules: Dict[str, BundledModule] = {}
    for position, header in enumerate(headers):
        if position + 1 < len(headers):
            end = headers[position + 1].start()
        else:
            footer = footer_pattern.search(script, header.end())
            end = footer.start() if footer else len(script)
        name = _STRING_ESCAPE_PATTERN.sub(r"\1", header.group(1))
        content = _strip_module_terminator(script[header.end():end])
        modules[name] = BundledModule(name=name, content=content)

    if metadata.root_module_name not in modules:
        raise BundleFormatError(
            f"luabundle root module '{metadata.root_module_name}' not found in bundle"
        )

    return Bundle(metadata=metadata, modules=modules)


def _strip_module_terminator(region: str) -> str:
    # Each registration ends with "\nend)\n" appended by the bundler.
    if region.endswith("\n"):
        region = region[:-1]
    if region.endswith("end)"):
        region = region[: -len("end)")]
    if region.endswith("\n"):
        region = region[:-1]
    return region


def _as_identifier(value: Any, default: str) -> str:
    return value if isinstance(value, str) and value else default


__all__ = [
    "Bundle",
    "BundleMetadata",
    "BundledModule",
    "read_metadata",
    "unbundle_string",
]
