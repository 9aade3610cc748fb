"""Exceptions raised by the encode / decode layers."""

from __future__ import annotations


class OrderedMapError(Exception):
    """Base class for all orderedmap_core errors."""


class ParseError(OrderedMapError, ValueError):
    """Malformed JSON text handed to the decoder.

    Mirrors ``json.JSONDecodeError``: *pos* is the character offset into
    *doc* where the problem was detected, *lineno* / *colno* are 1-based.
    """

    def __init__(self, msg: str, doc: str = "", pos: int = 0) -> None:
        lineno = doc.count("\n", 0, pos) + 1
        colno = pos - doc.rfind("\n", 0, pos)
        super().__init__(f"{msg}: line {lineno} column {colno} (char {pos})")
        self.msg = msg
        self.doc = doc
        self.pos = pos
        self.lineno = lineno
        self.colno = colno

    def __reduce__(self):
        return self.__class__, (self.msg, self.doc, self.pos)


class EncodeError(OrderedMapError, ValueError):
    """A value that cannot be represented as JSON text."""
