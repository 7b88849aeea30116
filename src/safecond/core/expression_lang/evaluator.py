"""
Expression evaluator for the safecond expression language.

Evaluates expression AST nodes against an environment of Number/Boolean
values. Pure evaluation: no I/O, no side effects, no attribute lookup and
no fallback to any scope other than the environment passed in. Does NOT
use Python's eval().
"""

from __future__ import annotations

import math

from safecond.core.errors import UndefinedVariableError
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
from safecond.core.ir.values import (
    Boolean,
    Environment,
    Number,
    Value,
    boolean,
    number,
    to_boolean,
    to_number,
)


def evaluate(expr: Expr, env: Environment) -> Value:
    """Evaluate an expression against an environment.

    Both operands of every binary operator are evaluated, including ``&&``
    and ``||``. Arithmetic follows IEEE-754: division by zero yields
    Infinity or NaN rather than an error. The walk is iterative, so any
    tree the parser accepts can be evaluated.

    Args:
        expr: Parsed expression AST.
        env: Variable name -> Value. Never mutated.

    Returns:
        The computed value.

    Raises:
        UndefinedVariableError: If an identifier is missing from env.
    """
    return _interpret(expr, env)


def _interpret(expr: Expr, env: Environment) -> Value:
    # Post-order walk on an explicit stack; left operands are visited first.
    # Each entry is (node, operands_done).
    pending: list[tuple[Expr, bool]] = [(expr, False)]
    results: list[Value] = []

    while pending:
        node, operands_done = pending.pop()

        if isinstance(node, NumberLiteral):
            results.append(number(node.value))

        elif isinstance(node, BooleanLiteral):
            results.append(boolean(node.value))

        elif isinstance(node, Identifier):
            if node.name not in env:
                raise UndefinedVariableError(node.name)
            results.append(env[node.name])

        elif isinstance(node, UnaryExpr):
            if operands_done:
                results.append(_apply_unary(node.op, results.pop()))
            else:
                pending.append((node, True))
                pending.append((node.operand, False))

        elif isinstance(node, BinaryExpr):
            if operands_done:
                right = results.pop()
                left = results.pop()
                results.append(_apply_binary(node.op, left, right))
            else:
                pending.append((node, True))
                pending.append((node.right, False))
                pending.append((node.left, False))

        else:
            raise TypeError(f"Unknown expression type: {type(node).__name__}")

    return results.pop()


def _apply_unary(op: UnaryOp, operand: Value) -> Value:
    if op == UnaryOp.NOT:
        return boolean(not to_boolean(operand))
    return number(-to_number(operand))


def _apply_binary(op: BinaryOp, left: Value, right: Value) -> Value:
    if op in _ARITHMETIC:
        return number(_ARITHMETIC[op](to_number(left), to_number(right)))

    if op in _ORDERING:
        return boolean(_ORDERING[op](to_number(left), to_number(right)))

    if op == BinaryOp.EQ:
        return boolean(to_number(left) == to_number(right))
    if op == BinaryOp.NE:
        return boolean(to_number(left) != to_number(right))

    if op == BinaryOp.STRICT_EQ:
        return boolean(_strict_equal(left, right))
    if op == BinaryOp.STRICT_NE:
        return boolean(not _strict_equal(left, right))

    # No short-circuit: both sides were already evaluated by the caller
    if op == BinaryOp.AND:
        return boolean(to_boolean(left) and to_boolean(right))
    if op == BinaryOp.OR:
        return boolean(to_boolean(left) or to_boolean(right))

    raise TypeError(f"Unknown binary op: {op}")


def _strict_equal(left: Value, right: Value) -> bool:
    """Same kind and same value; no coercion across kinds."""
    if isinstance(left, Number) and isinstance(right, Number):
        return left.value == right.value
    if isinstance(left, Boolean) and isinstance(right, Boolean):
        return left.value is right.value
    return False


def _divide(a: float, b: float) -> float:
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        # Sign follows IEEE-754, including signed zero in the divisor
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def _modulo(a: float, b: float) -> float:
    # Truncated remainder (sign of the dividend), x % 0 is NaN
    if b == 0 or math.isinf(a) or math.isnan(a) or math.isnan(b):
        return math.nan
    if math.isinf(b):
        return a
    return math.fmod(a, b)


_ARITHMETIC = {
    BinaryOp.ADD: lambda a, b: a + b,
    BinaryOp.SUB: lambda a, b: a - b,
    BinaryOp.MUL: lambda a, b: a * b,
    BinaryOp.DIV: _divide,
    BinaryOp.MOD: _modulo,
}

_ORDERING = {
    BinaryOp.LT: lambda a, b: a < b,
    BinaryOp.GT: lambda a, b: a > b,
    BinaryOp.LE: lambda a, b: a <= b,
    BinaryOp.GE: lambda a, b: a >= b,
}
