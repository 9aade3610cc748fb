"""Forward-only JSON lexer and the token stream that drives the reader.

``tokenize`` turns text into raw tokens, separators included.  ``TokenStream``
sits on top of it and behaves like a streaming decoder: ``next()`` hands out
delimiters, keys and scalar values while checking and swallowing the ``,`` and
``:`` separators, and ``more()`` says whether another element follows at the
current nesting level.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, auto
from json import JSONDecodeError
from json.decoder import scanstring
from typing import Iterator

from .errors import ParseError
from .model import Value


_WS_RE = re.compile(r"[ \t\n\r]*")
_NUMBER_RE = re.compile(r"-?(?:0|[1-9][0-9]*)(\.[0-9]+)?([eE][-+]?[0-9]+)?")
_NUMBER_START = frozenset("-0123456789")
_LITERALS: dict[str, Value] = {"true": True, "false": False, "null": None}


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------

class TokenType(Enum):
    BEGIN_OBJECT = auto()   # {
    END_OBJECT = auto()     # }
    BEGIN_ARRAY = auto()    # [
    END_ARRAY = auto()      # ]
    COLON = auto()          # :
    COMMA = auto()          # ,
    STRING = auto()
    NUMBER = auto()
    LITERAL = auto()        # true / false / null
    EOF = auto()


_DELIMITERS: dict[str, TokenType] = {
    "{": TokenType.BEGIN_OBJECT,
    "}": TokenType.END_OBJECT,
    "[": TokenType.BEGIN_ARRAY,
    "]": TokenType.END_ARRAY,
    ":": TokenType.COLON,
    ",": TokenType.COMMA,
}

_SCALARS = frozenset({TokenType.STRING, TokenType.NUMBER, TokenType.LITERAL})


@dataclass(slots=True)
class Token:
    """A lexical unit.  *value* is the decoded scalar, or the delimiter text."""
    type: TokenType
    value: Value
    pos: int

    def describe(self) -> str:
        if self.type is TokenType.EOF:
            return "end of input"
        if self.type in _SCALARS:
            return self.type.name.lower()
        return repr(self.value)


# ---------------------------------------------------------------------------
# Lexer
# ---------------------------------------------------------------------------

def tokenize(text: str) -> Iterator[Token]:
    """Yield the tokens of *text*, ending with a single EOF token.

    Errors are raised lazily, when the offending character is reached.
    """
    pos = _WS_RE.match(text, 0).end()
    end = len(text)

    while pos < end:
        ch = text[pos]

        if ch in _DELIMITERS:
            yield Token(_DELIMITERS[ch], ch, pos)
            pos += 1

        elif ch == '"':
            try:
                value, nxt = scanstring(text, pos + 1, True)
            except JSONDecodeError as exc:
                raise ParseError(exc.msg, text, exc.pos) from None
            yield Token(TokenType.STRING, value, pos)
            pos = nxt

        elif ch in _NUMBER_START:
            m = _NUMBER_RE.match(text, pos)
            if m is None:
                raise ParseError(f"invalid number literal starting with {ch!r}", text, pos)
            frac, exp = m.groups()
            literal = m.group()
            try:
                value = float(literal) if frac or exp else int(literal)
            except ValueError as exc:
                raise ParseError(str(exc), text, pos) from None
            yield Token(TokenType.NUMBER, value, pos)
            pos = m.end()

        else:
            for word, value in _LITERALS.items():
                if text.startswith(word, pos):
                    yield Token(TokenType.LITERAL, value, pos)
                    pos += len(word)
                    break
            else:
                raise ParseError(f"invalid character {ch!r}", text, pos)

        pos = _WS_RE.match(text, pos).end()

    yield Token(TokenType.EOF, None, end)


# ---------------------------------------------------------------------------
# TokenStream
# ---------------------------------------------------------------------------

class _State(Enum):
    TOP_VALUE = auto()
    TOP_DONE = auto()
    ARRAY_START = auto()
    ARRAY_VALUE = auto()
    ARRAY_COMMA = auto()
    OBJECT_START = auto()
    OBJECT_KEY = auto()
    OBJECT_COLON = auto()
    OBJECT_VALUE = auto()
    OBJECT_COMMA = auto()


_VALUE_ALLOWED = frozenset({
    _State.TOP_VALUE,
    _State.ARRAY_START,
    _State.ARRAY_VALUE,
    _State.OBJECT_VALUE,
})

_KEY_ALLOWED = frozenset({_State.OBJECT_START, _State.OBJECT_KEY})


class TokenStream:
    """Structural tokens of a single JSON value, read strictly forward.

    Separators never reach the caller.  A token in a place the grammar does
    not allow raises ``ParseError``; scalars are accepted in key position and
    returned as-is so the reader can report non-string keys itself.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self._tokens = tokenize(text)
        self._peeked: Token | None = None
        self._state = _State.TOP_VALUE
        self._stack: list[_State] = []
        self.pos = 0

    # -- Raw access -----------------------------------------------------

    def peek(self) -> Token:
        if self._peeked is None:
            self._peeked = next(self._tokens)
        return self._peeked

    def _consume(self) -> Token:
        tok = self.peek()
        self._peeked = None
        self.pos = tok.pos
        return tok

    def _error(self, msg: str, tok: Token) -> ParseError:
        return ParseError(msg, self.text, tok.pos)

    # -- State transitions ----------------------------------------------

    def _value_done(self) -> None:
        if self._state in (_State.ARRAY_START, _State.ARRAY_VALUE):
            self._state = _State.ARRAY_COMMA
        elif self._state is _State.OBJECT_VALUE:
            self._state = _State.OBJECT_COMMA
        elif self._state is _State.TOP_VALUE:
            self._state = _State.TOP_DONE

    def _expect_value(self, tok: Token) -> None:
        if self._state in _VALUE_ALLOWED:
            return
        if self._state is _State.ARRAY_COMMA:
            raise self._error(f"expected ',' or ']', got {tok.describe()}", tok)
        if self._state is _State.OBJECT_COMMA:
            raise self._error(f"expected ',' or '}}', got {tok.describe()}", tok)
        if self._state is _State.OBJECT_COLON:
            raise self._error(f"expected ':' after object key, got {tok.describe()}", tok)
        if self._state is _State.TOP_DONE:
            raise self._error("unexpected data after top-level value", tok)
        raise self._error(f"unexpected {tok.describe()}", tok)

    # -- Public API -----------------------------------------------------

    def more(self) -> bool:
        """True if another element follows in the current array or object."""
        return self.peek().type not in (
            TokenType.END_ARRAY,
            TokenType.END_OBJECT,
            TokenType.EOF,
        )

    def at_end(self) -> bool:
        return self.peek().type is TokenType.EOF

    def next(self) -> Token:
        """Return the next delimiter, key or scalar token."""
        while True:
            tok = self.peek()
            kind = tok.type

            if kind is TokenType.EOF:
                raise self._error("unexpected end of JSON input", tok)

            if kind is TokenType.COMMA:
                if self._state is _State.ARRAY_COMMA:
                    self._state = _State.ARRAY_VALUE
                elif self._state is _State.OBJECT_COMMA:
                    self._state = _State.OBJECT_KEY
                else:
                    raise self._error("unexpected ','", tok)
                self._consume()
                continue

            if kind is TokenType.COLON:
                if self._state is not _State.OBJECT_COLON:
                    raise self._error("unexpected ':'", tok)
                self._state = _State.OBJECT_VALUE
                self._consume()
                continue

            if kind is TokenType.END_ARRAY:
                if self._state not in (_State.ARRAY_START, _State.ARRAY_COMMA):
                    raise self._error("unexpected ']'", tok)
                self._state = self._stack.pop()
                self._value_done()
                return self._consume()

            if kind is TokenType.END_OBJECT:
                if self._state not in (_State.OBJECT_START, _State.OBJECT_COMMA):
                    raise self._error("unexpected '}'", tok)
                self._state = self._stack.pop()
                self._value_done()
                return self._consume()

            if kind in _SCALARS and self._state in _KEY_ALLOWED:
                self._state = _State.OBJECT_COLON
                return self._consume()

            self._expect_value(tok)

            if kind is TokenType.BEGIN_ARRAY:
                self._stack.append(self._state)
                self._state = _State.ARRAY_START
            elif kind is TokenType.BEGIN_OBJECT:
                self._stack.append(self._state)
                self._state = _State.OBJECT_START
            else:
                self._value_done()
            return self._consume()
