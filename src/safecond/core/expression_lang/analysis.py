"""
Static analysis for safecond expressions.

Infers the kind of value an expression produces and collects the variable
names it reads, without evaluating anything. Rule authoring tools use this
to check that a condition yields a boolean and that every variable it
needs will be supplied.
"""

from __future__ import annotations

from collections.abc import Mapping

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
from safecond.core.ir.values import ValueKind

# Kind context maps variable names to their kinds
VariableKinds = Mapping[str, ValueKind]

_ARITHMETIC_OPS = {BinaryOp.ADD, BinaryOp.SUB, BinaryOp.MUL, BinaryOp.DIV, BinaryOp.MOD}


def infer_kind(expr: Expr, variable_kinds: VariableKinds | None = None) -> ValueKind:
    """Infer the kind of value an expression evaluates to.

    Arithmetic and unary minus always produce NUMBER; comparisons, equality,
    logic and ``!`` always produce BOOLEAN. Only a bare identifier can be
    ANY, when its kind is not given.

    Args:
        expr: Expression AST node.
        variable_kinds: Optional mapping of variable name -> ValueKind.
    """
    ctx = variable_kinds or {}

    if isinstance(expr, NumberLiteral):
        return ValueKind.NUMBER
    if isinstance(expr, BooleanLiteral):
        return ValueKind.BOOLEAN
    if isinstance(expr, Identifier):
        return ctx.get(expr.name, ValueKind.ANY)
    if isinstance(expr, UnaryExpr):
        return ValueKind.BOOLEAN if expr.op == UnaryOp.NOT else ValueKind.NUMBER
    if isinstance(expr, BinaryExpr):
        return ValueKind.NUMBER if expr.op in _ARITHMETIC_OPS else ValueKind.BOOLEAN
    return ValueKind.ANY


def referenced_variables(expr: Expr) -> frozenset[str]:
    """Return the names of every identifier in the expression."""
    names: set[str] = set()
    stack: list[Expr] = [expr]
    while stack:
        node = stack.pop()
        if isinstance(node, Identifier):
            names.add(node.name)
        elif isinstance(node, UnaryExpr):
            stack.append(node.operand)
        elif isinstance(node, BinaryExpr):
            stack.append(node.left)
            stack.append(node.right)
    return frozenset(names)
