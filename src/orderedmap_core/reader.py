"""Reader layer: decodes JSON object text into nested OrderedMap structures.

Objects are built member by member from the token stream, so keys arrive in
source order and ``OrderedMap.set`` decides what happens to duplicates (last
value wins, first position is kept).
"""

from __future__ import annotations

import codecs
from typing import IO

from .errors import ParseError
from .model import OrderedMap, Value
from .tokenizer import Token, TokenStream, TokenType


DEFAULT_MAX_DEPTH = 256
"""Deepest container nesting accepted by ``decode`` (the top object is 1)."""


class _EndOfArray:
    """Returned by ``_parse_value`` when it meets ``]``; never leaves this module."""


_END_OF_ARRAY = _EndOfArray()


# ---------------------------------------------------------------------------
# Input handling
# ---------------------------------------------------------------------------

def _as_text(data: str | bytes | bytearray | IO) -> str:
    """Accept text, UTF-8 bytes or a readable stream of either."""
    if hasattr(data, "read"):
        data = data.read()
    if isinstance(data, (bytes, bytearray)):
        raw = bytes(data)
        if raw.startswith(codecs.BOM_UTF8):
            raw = raw[len(codecs.BOM_UTF8):]
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError(f"input is not valid UTF-8 ({exc.reason})", "", exc.start) from None
    if not isinstance(data, str):
        raise TypeError(f"expected str, bytes or a readable stream, got {type(data).__name__}")
    return data


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def decode(
    data: str | bytes | bytearray | IO,
    target: OrderedMap | None = None,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> OrderedMap:
    """Decode a single top-level JSON object into *target* (or a new map).

    Raises ``ParseError`` on malformed input, including nesting deeper than
    *max_depth* or than the interpreter can recurse.  Decoding stops at the first
    error and leaves *target* partially populated; discard it in that case.
    """
    text = _as_text(data).strip()
    stream = TokenStream(text)
    om = OrderedMap() if target is None else target

    tok = stream.next()
    if tok.type is not TokenType.BEGIN_OBJECT:
        raise ParseError("expect JSON object open with '{'", text, tok.pos)

    try:
        _read_members(om, stream, 1, max_depth)
    except RecursionError:
        raise ParseError("maximum nesting depth exceeded", text, stream.pos) from None

    tok = stream.next()
    if tok.type is not TokenType.END_OBJECT:
        raise ParseError("expect JSON object close with '}'", text, tok.pos)

    if not stream.at_end():
        raise ParseError("unexpected data after top-level object", text, stream.peek().pos)

    return om


# ---------------------------------------------------------------------------
# Recursive descent
# ---------------------------------------------------------------------------

def _read_members(om: OrderedMap, stream: TokenStream, depth: int, max_depth: int) -> None:
    """Read ``key: value`` pairs until the closing ``}`` (left unconsumed)."""
    while stream.more():
        tok = stream.next()
        if tok.type is not TokenType.STRING:
            raise ParseError(f"key must be a string, got {tok.describe()}", stream.text, tok.pos)

        val = _parse_value(stream, depth, max_depth)
        if val is _END_OF_ARRAY:
            # The stream rejects ']' in value position; guard regardless.
            raise ParseError("unexpected ']'", stream.text, tok.pos)
        om.set(tok.value, val)


def _parse_value(stream: TokenStream, depth: int, max_depth: int) -> Value | _EndOfArray:
    """Read one value.  ``]`` yields the end-of-array sentinel."""
    tok = stream.next()
    kind = tok.type

    if kind is TokenType.BEGIN_ARRAY:
        _check_depth(tok, stream, depth, max_depth)
        return _parse_array(stream, depth + 1, max_depth)

    if kind is TokenType.BEGIN_OBJECT:
        _check_depth(tok, stream, depth, max_depth)
        om = OrderedMap()
        _read_members(om, stream, depth + 1, max_depth)
        stream.next()  # }
        return om

    if kind is TokenType.END_ARRAY:
        return _END_OF_ARRAY

    if kind is TokenType.END_OBJECT:
        raise ParseError("unexpected '}'", stream.text, tok.pos)

    return tok.value


def _parse_array(stream: TokenStream, depth: int, max_depth: int) -> list[Value]:
    items: list[Value] = []
    while True:
        val = _parse_value(stream, depth, max_depth)
        if val is _END_OF_ARRAY:
            return items
        items.append(val)


def _check_depth(tok: Token, stream: TokenStream, depth: int, max_depth: int) -> None:
    if depth >= max_depth:
        raise ParseError(f"maximum nesting depth of {max_depth} exceeded", stream.text, tok.pos)
