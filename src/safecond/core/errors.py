"""
Error types for safecond lexing, parsing, and evaluation.

Every failure the pipeline can produce is a subclass of ExpressionError.
None of them is fatal: callers decide whether a failed condition means
"did not match" or a configuration problem.
"""

from __future__ import annotations


class ExpressionError(Exception):
    """Base exception for all safecond errors."""

    def __init__(self, message: str, pos: int | None = None) -> None:
        self.message = message
        self.pos = pos
        super().__init__(message)

    def format_with_source(self, source: str) -> str:
        """
        Format the error with a snippet of the offending expression.

        Returns:
            Message followed by the expression and a ``^`` marker under
            the error position, e.g.::

                Unexpected character: '@'
                  1 + @
                      ^
        """
        if self.pos is None or not source:
            return self.message
        snippet = source if len(source) <= 80 else _window(source, self.pos)
        offset = self.pos if len(source) <= 80 else min(self.pos, 40)
        marker = " " * (offset + 2) + "^"
        return f"{self.message}\n  {snippet}\n{marker}"


def _window(source: str, pos: int) -> str:
    """Return an 80 character slice of source positioned around pos."""
    start = max(0, pos - 40)
    return source[start : start + 80]


# ---------------------------------------------------------------------------
# Lexing
# ---------------------------------------------------------------------------


class LexError(ExpressionError):
    """
    Raised when an expression cannot be tokenized.

    Examples:
    - Characters outside the grammar (``@``, ``.``, ``[``)
    - Malformed numbers (``1.2.3``)
    - Blocklisted identifiers
    - Input over the length cap
    """


class UnexpectedCharacterError(LexError):
    def __init__(self, char: str, pos: int) -> None:
        self.char = char
        super().__init__(f"Unexpected character: {char!r}", pos)


class InvalidNumberError(LexError):
    def __init__(self, text: str, pos: int) -> None:
        self.text = text
        super().__init__(f"Invalid number: {text}", pos)


class BlockedIdentifierError(LexError):
    """
    A blocklisted name appeared in the expression.

    The name is kept on ``.name`` for internal logging only; the message
    never repeats it so user-facing surfaces cannot be used to probe the
    blocklist.
    """

    def __init__(self, name: str, pos: int) -> None:
        self.name = name
        super().__init__("Blocked identifier", pos)


class ExpressionTooLongError(LexError):
    def __init__(self, length: int, limit: int) -> None:
        self.length = length
        self.limit = limit
        super().__init__(f"Expression too long ({length} > {limit} characters)")


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class ParseError(ExpressionError):
    """
    Raised when a token stream does not match the grammar.

    Examples:
    - Operator with a missing operand
    - Unbalanced parentheses
    - Tokens left over after a complete expression
    - Nesting deeper than the configured limit
    """


class UnexpectedTokenError(ParseError):
    def __init__(self, expected: str, found: str, pos: int | None) -> None:
        self.expected = expected
        self.found = found
        super().__init__(f"Unexpected token: expected {expected}, got {found}", pos)


class ExpectedTokenError(ParseError):
    def __init__(self, expected: str, found: str, pos: int | None) -> None:
        self.expected = expected
        self.found = found
        super().__init__(f"Expected {expected}, got {found}", pos)


class TrailingTokensError(ParseError):
    def __init__(self, found: str, pos: int | None) -> None:
        self.found = found
        super().__init__(f"Unexpected tokens after expression: {found}", pos)


class ExpressionTooDeepError(ParseError):
    def __init__(self, limit: int, pos: int | None) -> None:
        self.limit = limit
        super().__init__(f"Expression nested deeper than {limit} levels", pos)


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------


class EvalError(ExpressionError):
    """Raised when a parsed expression cannot be evaluated."""


class UndefinedVariableError(EvalError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Undefined variable: {name}")


class UnsupportedVariableTypeError(ExpressionError):
    """
    A caller supplied a variable whose value is neither a number nor a
    boolean. Raised at the boundary, before evaluation begins.
    """

    def __init__(self, name: object, type_name: str) -> None:
        self.name = name
        self.type_name = type_name
        super().__init__(f"Unsupported type for variable {name!r}: {type_name}")
