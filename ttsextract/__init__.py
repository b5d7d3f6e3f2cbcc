"""Extract scripts, UI, notes and linked resources from Tabletop Simulator saves."""

__version__ = "0.1.0"
