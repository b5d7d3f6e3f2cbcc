"""Line-ending and XML attribute helpers shared by the unbundlers."""

from __future__ import annotations

import re

from .errors import InvalidXmlTextError

_INVALID_XML_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")
_XML_ATTR_CHARS = re.compile(r"[\t\n\r\"&'<>]")
_XML_ATTR_ESCAPES = {
    "\t": "&#x9;",
    "\n": "&#xA;",
    "\r": "&#xD;",
    "<": "&lt;",
    ">": "&gt;",
    "&": "&amp;",
    '"': "&quot;",
    "'": "&#x27;",
}
_EXTRA_TRAILING_LF = re.compile(r"\n+\Z")


def text_to_xml_attr(text: str) -> str:
    """Escape text for use inside a double-quoted XML attribute."""
    if _INVALID_XML_CHARS.search(text):
        raise InvalidXmlTextError(f"String not supported by XML: {text!r}")
    return _XML_ATTR_CHARS.sub(lambda match: _XML_ATTR_ESCAPES[match.group(0)], text)


def normalize_line_endings(text: str) -> str:
    return text.replace("\r", "")


def ensure_trailing_lf(text: str) -> str:
    if not text or text.endswith("\n"):
        return text
    return text + "\n"


def remove_extra_trailing_lf(text: str) -> str:
    """Collapse a run of trailing newlines down to one."""
    return _EXTRA_TRAILING_LF.sub("\n", text)


def chomp(text: str) -> str:
    """Remove a single trailing newline, if any."""
    return text[:-1] if text.endswith("\n") else text


__all__ = [
    "chomp",
    "ensure_trailing_lf",
    "normalize_line_endings",
    "remove_extra_trailing_lf",
    "text_to_xml_attr",
]
