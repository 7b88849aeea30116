"""
safecond - safe restricted-expression evaluator.

Evaluates arithmetic and boolean conditions such as ``x < 10 && y > 5``
against a mapping of numbers and booleans, without calling into Python's
eval(), attribute lookup or any function.
"""

from __future__ import annotations

from safecond._version import get_version
from safecond.api import (
    CompiledExpression,
    SafeExpressionEvaluator,
    compile,
    evaluate,
    evaluate_condition,
    safe_evaluator,
)
from safecond.config import ExpressionLimits, load_limits
from safecond.core.errors import (
    BlockedIdentifierError,
    EvalError,
    ExpressionError,
    LexError,
    ParseError,
    UndefinedVariableError,
    UnsupportedVariableTypeError,
)
from safecond.core.ir.values import Boolean, Number, Value

__version__ = get_version()

__all__ = [
    "__version__",
    # Entry points
    "CompiledExpression",
    "SafeExpressionEvaluator",
    "compile",
    "evaluate",
    "evaluate_condition",
    "safe_evaluator",
    # Configuration
    "ExpressionLimits",
    "load_limits",
    # Values
    "Boolean",
    "Number",
    "Value",
    # Errors
    "BlockedIdentifierError",
    "EvalError",
    "ExpressionError",
    "LexError",
    "ParseError",
    "UndefinedVariableError",
    "UnsupportedVariableTypeError",
]
