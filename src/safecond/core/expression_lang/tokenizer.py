"""
Tokenizer for the safecond expression language.

Converts an expression string into a flat sequence of typed tokens ending
with EOF. Blocklisted identifiers and oversized input are rejected here,
before any parsing happens.
"""

from __future__ import annotations

import logging
import re
from enum import StrEnum, auto

from safecond.core.errors import (
    BlockedIdentifierError,
    ExpressionTooLongError,
    InvalidNumberError,
    UnexpectedCharacterError,
)
from safecond.core.expression_lang.blocklist import is_blocked

logger = logging.getLogger(__name__)

DEFAULT_MAX_LENGTH = 1000


class TokenKind(StrEnum):
    """Token types for the expression language."""

    NUMBER = auto()
    BOOLEAN = auto()
    IDENT = auto()
    OPERATOR = auto()
    LPAREN = auto()
    RPAREN = auto()
    EOF = auto()


TokenValue = float | bool | str


class Token:
    """A single token from the expression tokenizer.

    ``value`` is a float for NUMBER, a bool for BOOLEAN and the source
    text for everything else.
    """

    __slots__ = ("kind", "value", "pos")

    def __init__(self, kind: TokenKind, value: TokenValue, pos: int) -> None:
        self.kind = kind
        self.value = value
        self.pos = pos

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.value!r}, pos={self.pos})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return (self.kind, self.value, self.pos) == (other.kind, other.value, other.pos)

    def __hash__(self) -> int:
        return hash((self.kind, self.value, self.pos))

    def describe(self) -> str:
        """Short human-readable form used in error messages."""
        if self.kind == TokenKind.EOF:
            return "end of input"
        if self.kind in (TokenKind.LPAREN, TokenKind.RPAREN):
            return f"'{self.value}'"
        if self.kind == TokenKind.OPERATOR:
            return f"operator '{self.value}'"
        return f"{self.kind} {self.value!r}"


# Maximal munch: longest operators are tried first
_OPERATORS_3 = ("===", "!==")
_OPERATORS_2 = ("==", "!=", "<=", ">=", "&&", "||")
_OPERATORS_1 = "+-*/%<>!"

_WHITESPACE = " \t\n\r\f\v"

# Digit-led run of digits and dots; validated against _NUMBER_RE afterwards
_NUMBER_RUN_RE = re.compile(r"[0-9][0-9.]*")
_NUMBER_RE = re.compile(r"[0-9]+(\.[0-9]*)?")
_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def tokenize(source: str, max_length: int = DEFAULT_MAX_LENGTH) -> list[Token]:
    """Tokenize an expression string into a list of tokens.

    Args:
        source: Expression text, e.g. ``"x < 10 && y > 5"``.
        max_length: Inputs longer than this are refused before scanning.

    Raises:
        ExpressionTooLongError: If ``len(source) > max_length``.
        UnexpectedCharacterError: For characters outside the grammar.
        InvalidNumberError: For malformed numeric literals like ``1.2.3``.
        BlockedIdentifierError: For blocklisted names.
    """
    if len(source) > max_length:
        raise ExpressionTooLongError(len(source), max_length)

    tokens: list[Token] = []
    i = 0
    n = len(source)

    while i < n:
        c = source[i]

        # Skip whitespace
        if c in _WHITESPACE:
            i += 1
            continue

        # Numbers
        if "0" <= c <= "9":
            m = _NUMBER_RUN_RE.match(source, i)
            assert m is not None
            text = m.group(0)
            if not _NUMBER_RE.fullmatch(text):
                raise InvalidNumberError(text, i)
            tokens.append(Token(TokenKind.NUMBER, float(text), i))
            i = m.end()
            continue

        # Identifiers and boolean literals
        m = _IDENT_RE.match(source, i)
        if m is not None:
            word = m.group(0)
            if is_blocked(word):
                logger.debug("Rejected blocked identifier %r at %d", word, i)
                raise BlockedIdentifierError(word, i)
            if word == "true":
                tokens.append(Token(TokenKind.BOOLEAN, True, i))
            elif word == "false":
                tokens.append(Token(TokenKind.BOOLEAN, False, i))
            else:
                tokens.append(Token(TokenKind.IDENT, word, i))
            i = m.end()
            continue

        if c == "(":
            tokens.append(Token(TokenKind.LPAREN, c, i))
            i += 1
            continue
        if c == ")":
            tokens.append(Token(TokenKind.RPAREN, c, i))
            i += 1
            continue

        op = _match_operator(source, i)
        if op is not None:
            tokens.append(Token(TokenKind.OPERATOR, op, i))
            i += len(op)
            continue

        raise UnexpectedCharacterError(c, i)

    tokens.append(Token(TokenKind.EOF, "", n))
    return tokens


def _match_operator(source: str, i: int) -> str | None:
    """Return the longest operator starting at source[i], if any."""
    three = source[i : i + 3]
    if three in _OPERATORS_3:
        return three
    two = source[i : i + 2]
    if two in _OPERATORS_2:
        return two
    if source[i] in _OPERATORS_1:
        return source[i]
    return None
