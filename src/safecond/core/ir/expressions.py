"""
Expression AST for safecond.

The tree is closed over five node types. There are no call, member-access
or assignment nodes, so the parser has nothing to produce for them.

Supports:
- Arithmetic: +, -, *, /, %
- Ordering: <, >, <=, >=
- Equality: == and != (numeric coercion), === and !== (kind-strict)
- Logic: &&, ||, !
- Number and boolean literals, bare variable names
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from safecond.core.ir.values import format_number

# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


class BinaryOp(StrEnum):
    """Binary operators for expressions."""

    # Logical
    OR = "||"
    AND = "&&"
    # Equality
    EQ = "=="
    NE = "!="
    STRICT_EQ = "==="
    STRICT_NE = "!=="
    # Ordering
    LT = "<"
    GT = ">"
    LE = "<="
    GE = ">="
    # Arithmetic
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"


class UnaryOp(StrEnum):
    """Unary operators for expressions."""

    NOT = "!"
    NEG = "-"


# ---------------------------------------------------------------------------
# AST node types
# ---------------------------------------------------------------------------


class NumberLiteral(BaseModel):
    """A numeric literal such as ``42`` or ``3.5``."""

    value: float

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return format_number(self.value)


class BooleanLiteral(BaseModel):
    """``true`` or ``false``."""

    value: bool

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "true" if self.value else "false"


class Identifier(BaseModel):
    """A bare variable reference, resolved against the environment."""

    name: str = Field(description="Variable name")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.name


class BinaryExpr(BaseModel):
    """Binary operation: left op right."""

    op: BinaryOp
    left: Expr
    right: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return render(self)


class UnaryExpr(BaseModel):
    """Unary operation: op operand."""

    op: UnaryOp
    operand: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return render(self)


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Expr = NumberLiteral | BooleanLiteral | Identifier | BinaryExpr | UnaryExpr

# Rebuild models for recursive forward references
BinaryExpr.model_rebuild()
UnaryExpr.model_rebuild()


def render(expr: Expr) -> str:
    """Render the canonical, fully parenthesised form of an expression.

    Walks the tree with an explicit stack, so tree height is not limited
    by the interpreter's recursion limit.
    """
    parts: list[str] = []
    stack: list[Expr | str] = [expr]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
        elif isinstance(item, BinaryExpr):
            stack.extend([")", item.right, f" {item.op.value} ", item.left, "("])
        elif isinstance(item, UnaryExpr):
            stack.extend([item.operand, item.op.value])
        else:
            parts.append(str(item))
    return "".join(parts)
