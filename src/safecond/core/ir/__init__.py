"""
safecond intermediate representation: AST nodes and runtime values.
"""

from safecond.core.ir.expressions import (
    BinaryExpr,
    BinaryOp,
    BooleanLiteral,
    Expr,
    Identifier,
    NumberLiteral,
    UnaryExpr,
    UnaryOp,
    render,
)
from safecond.core.ir.values import (
    FALSE,
    TRUE,
    Boolean,
    Environment,
    Number,
    Value,
    ValueKind,
    boolean,
    from_python,
    number,
    to_boolean,
    to_environment,
    to_number,
    to_python,
)

__all__ = [
    # AST
    "BinaryExpr",
    "BinaryOp",
    "BooleanLiteral",
    "Expr",
    "Identifier",
    "NumberLiteral",
    "UnaryExpr",
    "UnaryOp",
    "render",
    # Values
    "Boolean",
    "Environment",
    "FALSE",
    "Number",
    "TRUE",
    "Value",
    "ValueKind",
    "boolean",
    "from_python",
    "number",
    "to_boolean",
    "to_environment",
    "to_number",
    "to_python",
]
