"""
Errors raised by textrange.

Classification and materialization are total over well-formed trees and never
raise; these cover setup problems and caller protocol violations.
"""

from __future__ import annotations


class TextRangeError(Exception):
    """Base class for textrange errors."""


class ConfigurationError(TextRangeError):
    """No usable means of querying computed styles."""


class ProtocolMisuseError(TextRangeError):
    """An iterator was asked to rewind with nothing to rewind to."""


class UnsupportedUnitError(TextRangeError, ValueError):
    """A movement or expansion unit other than character or word."""

    def __init__(self, unit: str):
        super().__init__(f"Unit {unit!r} not implemented, use 'character' or 'word'")
        self.unit = unit
