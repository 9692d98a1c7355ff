"""
Tokenizer for the Abacus language.

Converts source text into a lazy sequence of typed tokens. Tokens are pulled
one at a time with ``next_token()``; once input is exhausted every further
call returns ``END_OF_INPUT``.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from enum import StrEnum

from abacus.core.errors import LexError

logger = logging.getLogger(__name__)


class TokenKind(StrEnum):
    """Token types for the Abacus language."""

    # Literals and names
    NUMBER = "NUMBER"
    IDENTIFIER = "IDENTIFIER"

    # Operators
    ASSIGN = "ASSIGN"
    PLUS = "PLUS"
    MINUS = "MINUS"
    STAR = "STAR"
    SLASH = "SLASH"

    # Punctuation
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    SEMICOLON = "SEMICOLON"

    END_OF_INPUT = "END_OF_INPUT"


@dataclass(frozen=True, slots=True)
class Token:
    """A single token: kind, payload and starting character offset."""

    kind: TokenKind
    value: float | str | None
    pos: int

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.value!r}, pos={self.pos})"

    @property
    def number(self) -> float:
        """Numeric payload of a NUMBER token."""
        if not isinstance(self.value, float):
            raise TypeError(f"{self.kind} token has no numeric value")
        return self.value

    @property
    def text(self) -> str:
        """Name of an IDENTIFIER token, or the symbol of an operator token."""
        if not isinstance(self.value, str):
            raise TypeError(f"{self.kind} token has no text value")
        return self.value


_SINGLE_CHAR: dict[str, TokenKind] = {
    "=": TokenKind.ASSIGN,
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    ";": TokenKind.SEMICOLON,
}

_SYMBOLS: dict[TokenKind, str] = {kind: char for char, kind in _SINGLE_CHAR.items()}


def _is_digit(c: str) -> bool:
    return "0" <= c <= "9"


def _is_letter(c: str) -> bool:
    return ("a" <= c <= "z") or ("A" <= c <= "Z")


class Tokenizer:
    """Cursor over source text producing one token per call."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.pos = 0

    @property
    def current_char(self) -> str | None:
        """Character under the cursor, or None past the end."""
        if self.pos < len(self.source):
            return self.source[self.pos]
        return None

    def next_token(self) -> Token:
        self._skip_whitespace()

        c = self.current_char
        if c is None:
            return Token(TokenKind.END_OF_INPUT, None, len(self.source))

        start = self.pos

        if _is_digit(c):
            digits = self._read_while(_is_digit)
            value = float(digits)
            if not math.isfinite(value):
                raise LexError(c, start, f"number literal too large ({len(digits)} digits)")
            return Token(TokenKind.NUMBER, value, start)

        if _is_letter(c):
            name = self._read_while(lambda ch: _is_letter(ch) or _is_digit(ch) or ch == "_")
            return Token(TokenKind.IDENTIFIER, name, start)

        kind = _SINGLE_CHAR.get(c)
        if kind is not None:
            self.pos += 1
            return Token(kind, c, start)

        raise LexError(c, start)

    def __iter__(self) -> Iterator[Token]:
        """Yield tokens up to and including the first END_OF_INPUT."""
        while True:
            tok = self.next_token()
            yield tok
            if tok.kind == TokenKind.END_OF_INPUT:
                return

    def _skip_whitespace(self) -> None:
        while self.pos < len(self.source) and self.source[self.pos].isspace():
            self.pos += 1

    def _read_while(self, predicate: Callable[[str], bool]) -> str:
        start = self.pos
        n = len(self.source)
        while self.pos < n and predicate(self.source[self.pos]):
            self.pos += 1
        return self.source[start : self.pos]


def tokenize(source: str) -> list[Token]:
    """Tokenize a whole source string, END_OF_INPUT included."""
    tokens = list(Tokenizer(source))
    logger.debug("Tokenized %d characters into %d tokens", len(source), len(tokens))
    return tokens


def render_tokens(tokens: Iterable[Token]) -> str:
    """Rebuild a canonical, single-space separated source string.

    Re-tokenizing the result yields the same kinds and values as ``tokens``.
    """
    parts: list[str] = []
    for tok in tokens:
        if tok.kind == TokenKind.END_OF_INPUT:
            break
        if tok.kind == TokenKind.NUMBER:
            parts.append(str(int(tok.number)))
        elif tok.kind == TokenKind.IDENTIFIER:
            parts.append(tok.text)
        else:
            parts.append(_SYMBOLS[tok.kind])
    return " ".join(parts)
