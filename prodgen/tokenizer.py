"""
tokenizer.py

Splits production-rule text into (category, text) tokens.

Categories
----------
    Ident   identifiers: Unicode letters, digits and underscore, not starting with a digit
    String  double-quoted string, quotes kept in the token text
    Char    single-quoted character, quotes kept in the token text
    Int     decimal or 0x-prefixed hexadecimal integer
    Float   decimal number with a fraction and/or exponent
    Punct   any other single character (':', '|', '.', ';', '$', '(', ...)
    EOF     end of input, text is ""

Whitespace, `// line` comments and `/* block */` comments are skipped.
"""

import re
from typing import Iterator, Optional, TextIO, Tuple, Union

from .errors import ParseError

IDENT = "Ident"
STRING = "String"
CHAR = "Char"
INT = "Int"
FLOAT = "Float"
PUNCT = "Punct"
EOF = "EOF"

Token = Tuple[str, str]

_TOKEN_RE = re.compile(
    r"""
      (?P<skip>\s+|//[^\n]*|/\*.*?\*/)
    | (?P<Float>\d+\.\d+(?:[eE][+-]?\d+)?|\d+[eE][+-]?\d+)
    | (?P<Int>0[xX][0-9a-fA-F]+|\d+)
    | (?P<String>"(?:[^"\\\n]|\\(?:x[0-9a-fA-F]{2}|u[0-9a-fA-F]{4}|U[0-9a-fA-F]{8}|[0-7]{3}|.))*")
    | (?P<Char>'(?:[^'\\\n]|\\(?:x[0-9a-fA-F]{2}|u[0-9a-fA-F]{4}|U[0-9a-fA-F]{8}|[0-7]{3}|.))')
    | (?P<Ident>[^\W\d]\w*)
    | (?P<bad>["']|/\*)
    | (?P<Punct>.)
    """,
    re.VERBOSE | re.DOTALL,
)


def int_value(text: str) -> int:
    """Value of an Int token."""
    if text[:2] in ("0x", "0X"):
        return int(text, 16)
    return int(text)


class Tokenizer:
    """
    Token stream over a grammar source with one token of lookahead.

    `source` may be a string or an open text stream.
    """

    def __init__(self, source: Union[str, TextIO]):
        self._text = source if isinstance(source, str) else source.read()
        self._pos = 0
        self._lookahead: Optional[Tuple[Token, int, int]] = None
        self.line = 1
        self.column = 1
        # Line number of _mark and the offset where that line starts.
        self._mark = 0
        self._mark_line = 1
        self._line_start = 0

    def _location(self, pos: int) -> Tuple[int, int]:
        # Positions only move forward, so newlines are counted once.
        if pos > self._mark:
            newlines = self._text.count("\n", self._mark, pos)
            if newlines:
                self._mark_line += newlines
                self._line_start = self._text.rfind("\n", self._mark, pos) + 1
            self._mark = pos
        return self._mark_line, pos - self._line_start + 1

    def _scan(self, pos: int) -> Tuple[Token, int, int]:
        while pos < len(self._text):
            m = _TOKEN_RE.match(self._text, pos)
            kind = m.lastgroup
            if kind == "skip":
                pos = m.end()
                continue
            if kind == "bad":
                line, column = self._location(pos)
                what = "block comment" if m.group() == "/*" else "string or character literal"
                raise ParseError(f"unterminated {what}", line, column)
            return (kind, m.group()), pos, m.end()
        return (EOF, ""), len(self._text), len(self._text)

    def next(self) -> Token:
        """Consume and return the next token."""
        if self._lookahead is not None:
            token, start, end = self._lookahead
            self._lookahead = None
        else:
            token, start, end = self._scan(self._pos)
        self._pos = end
        self.line, self.column = self._location(start)
        return token

    def peek(self) -> Token:
        """Return the next token without consuming it."""
        if self._lookahead is None:
            self._lookahead = self._scan(self._pos)
        return self._lookahead[0]

    def peek_char(self) -> str:
        """Character immediately after the last consumed token, "" at end of input."""
        if self._pos < len(self._text):
            return self._text[self._pos]
        return ""

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next()
            if token[0] == EOF:
                return
            yield token
