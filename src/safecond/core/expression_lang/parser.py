"""
Recursive descent parser for the safecond expression language.

Grammar:
    expr      → unary (binary_op expr)*        precedence climbing
    unary     → ("!" | "-") unary | primary
    primary   → NUMBER | BOOLEAN | IDENT | "(" expr ")"

Binary operator precedence (loosest first), all left-associative:
    1  ||
    2  &&
    3  ==  ===  !=  !==
    4  <  >  <=  >=
    5  +  -
    6  *  /  %

There is no production for calls, member access or indexing.

Nesting depth counts every recursive step: a parenthesised group, a prefix
operator, or a right operand that binds tighter than its left neighbour.
A flat chain such as ``a + b + c`` stays at depth 1 however long it is.
"""

from __future__ import annotations

from safecond.core.errors import (
    ExpectedTokenError,
    ExpressionTooDeepError,
    TrailingTokensError,
    UnexpectedTokenError,
)
from safecond.core.expression_lang.tokenizer import (
    DEFAULT_MAX_LENGTH,
    Token,
    TokenKind,
    tokenize,
)
from safecond.core.ir.expressions import (
    BinaryExpr,
    BinaryOp,
    BooleanLiteral,
    Expr,
    Identifier,
    NumberLiteral,
    UnaryExpr,
    UnaryOp,
)

DEFAULT_MAX_DEPTH = 100

# Each level costs the parser at most three Python frames, so this keeps
# parsing well inside the interpreter's default recursion limit.
MAX_DEPTH = 200

PRECEDENCE: dict[BinaryOp, int] = {
    BinaryOp.OR: 1,
    BinaryOp.AND: 2,
    BinaryOp.EQ: 3,
    BinaryOp.STRICT_EQ: 3,
    BinaryOp.NE: 3,
    BinaryOp.STRICT_NE: 3,
    BinaryOp.LT: 4,
    BinaryOp.GT: 4,
    BinaryOp.LE: 4,
    BinaryOp.GE: 4,
    BinaryOp.ADD: 5,
    BinaryOp.SUB: 5,
    BinaryOp.MUL: 6,
    BinaryOp.DIV: 6,
    BinaryOp.MOD: 6,
}

_UNARY_OPS: dict[str, UnaryOp] = {op.value: op for op in UnaryOp}
_BINARY_OPS: dict[str, BinaryOp] = {op.value: op for op in BinaryOp}


class _Parser:
    """Precedence-climbing parser over a token list."""

    def __init__(self, tokens: list[Token], max_depth: int) -> None:
        if not 1 <= max_depth <= MAX_DEPTH:
            raise ValueError(f"max_depth must be between 1 and {MAX_DEPTH}, got {max_depth}")
        self.tokens = tokens
        self.pos = 0
        self.max_depth = max_depth
        self.depth = 0

    @property
    def current(self) -> Token:
        return self.tokens[self.pos]

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return tok

    def expect(self, kind: TokenKind, label: str) -> Token:
        tok = self.current
        if tok.kind != kind:
            raise ExpectedTokenError(label, tok.describe(), tok.pos)
        return self.advance()

    def _enter(self) -> None:
        self.depth += 1
        if self.depth > self.max_depth:
            raise ExpressionTooDeepError(self.max_depth, self.current.pos)

    def _leave(self) -> None:
        self.depth -= 1

    # -- Grammar rules --

    def parse(self) -> Expr:
        expr = self.parse_expr(0)
        if self.current.kind != TokenKind.EOF:
            raise TrailingTokensError(self.current.describe(), self.current.pos)
        return expr

    def parse_expr(self, min_precedence: int) -> Expr:
        """unary (binary_op expr)*"""
        left = self.parse_unary()

        while True:
            op = self._peek_binary_op()
            if op is None:
                break
            precedence = PRECEDENCE[op]
            if precedence < min_precedence:
                break
            self.advance()
            # precedence + 1 keeps same-level operators left-associative
            self._enter()
            right = self.parse_expr(precedence + 1)
            self._leave()
            left = BinaryExpr(op=op, left=left, right=right)

        return left

    def _peek_binary_op(self) -> BinaryOp | None:
        tok = self.current
        if tok.kind != TokenKind.OPERATOR:
            return None
        return _BINARY_OPS.get(str(tok.value))

    def parse_unary(self) -> Expr:
        """('!' | '-') unary | primary"""
        tok = self.current
        if tok.kind == TokenKind.OPERATOR and tok.value in _UNARY_OPS:
            self.advance()
            self._enter()
            operand = self.parse_unary()
            self._leave()
            return UnaryExpr(op=_UNARY_OPS[str(tok.value)], operand=operand)
        return self.parse_primary()

    def parse_primary(self) -> Expr:
        """NUMBER | BOOLEAN | IDENT | '(' expr ')'"""
        tok = self.current

        if tok.kind == TokenKind.NUMBER:
            self.advance()
            return NumberLiteral(value=float(tok.value))
        if tok.kind == TokenKind.BOOLEAN:
            self.advance()
            return BooleanLiteral(value=bool(tok.value))
        if tok.kind == TokenKind.IDENT:
            self.advance()
            return Identifier(name=str(tok.value))

        if tok.kind == TokenKind.LPAREN:
            self.advance()
            self._enter()
            expr = self.parse_expr(0)
            self._leave()
            self.expect(TokenKind.RPAREN, "')'")
            return expr

        raise UnexpectedTokenError(
            "number, boolean, identifier or '('",
            tok.describe(),
            tok.pos,
        )


def parse_tokens(tokens: list[Token], max_depth: int = DEFAULT_MAX_DEPTH) -> Expr:
    """Build an AST from a token list produced by tokenize().

    Raises:
        UnexpectedTokenError: If a token cannot start an operand.
        ExpectedTokenError: If a closing parenthesis is missing.
        TrailingTokensError: If tokens remain after a complete expression.
        ExpressionTooDeepError: If parentheses, unary operators or
            tighter-binding right operands nest more than max_depth levels.
        ValueError: If max_depth is outside 1..MAX_DEPTH.
    """
    return _Parser(tokens, max_depth).parse()


def parse_expr(
    source: str,
    max_length: int = DEFAULT_MAX_LENGTH,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Expr:
    """Parse an expression string into an AST.

    Args:
        source: Expression string (e.g., "x < 10 && y > 5")

    Returns:
        Parsed expression AST.

    Raises:
        LexError: If tokenization fails.
        ParseError: If the expression is invalid.
    """
    return parse_tokens(tokenize(source, max_length=max_length), max_depth=max_depth)
