"""Exception types raised by the extraction core."""


class ExtractionError(RuntimeError):
    """Base class for errors that abort an extraction run."""


class InvalidXmlTextError(ExtractionError):
    """Raised when text contains characters that cannot be represented in XML."""


class BundleFormatError(ExtractionError):
    """Raised when a script declares luabundle metadata but cannot be unbundled."""


__all__ = ["BundleFormatError", "ExtractionError", "InvalidXmlTextError"]
