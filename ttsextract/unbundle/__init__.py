"""Reversal of bundled Lua modules and inlined include directives."""

from .luabundle import Bundle, BundledModule, BundleMetadata, read_metadata, unbundle_string
from .script import SCRIPT_EXT, ScriptUnbundler, unbundle_script
from .xml import XmlUnbundler, unbundle_xml

__all__ = [
    "Bundle",
    "BundleMetadata",
    "BundledModule",
    "SCRIPT_EXT",
    "ScriptUnbundler",
    "XmlUnbundler",
    "read_metadata",
    "unbundle_script",
    "unbundle_string",
    "unbundle_xml",
]
