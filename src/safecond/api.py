"""
Public entry points for safecond.

- evaluate(): lex, parse and evaluate in one call, nothing cached
- compile(): lex and parse once, then run() the same tree against many
  variable mappings
- evaluate_condition(): opt-in helper for rule engines that treat any
  failure as "condition did not match"

Usage:
    from safecond import compile, evaluate

    evaluate("x < 10 && y > 5", {"x": 5, "y": 10})
    # Boolean(value=True)

    rule = compile("amount > limit || flagged")
    for record in records:
        if rule.run(record).value:
            ...
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from safecond.config import DEFAULT_LIMITS, ExpressionLimits
from safecond.core.errors import ExpressionError
from safecond.core.expression_lang.analysis import infer_kind, referenced_variables
from safecond.core.expression_lang.evaluator import evaluate as evaluate_ast
from safecond.core.expression_lang.parser import parse_tokens
from safecond.core.expression_lang.tokenizer import tokenize
from safecond.core.ir.expressions import Expr
from safecond.core.ir.values import Value, ValueKind, to_boolean, to_environment

logger = logging.getLogger(__name__)

Variables = Mapping[str, object]


def _parse(expression: str, limits: ExpressionLimits) -> Expr:
    tokens = tokenize(expression, max_length=limits.max_length)
    return parse_tokens(tokens, max_depth=limits.max_depth)


class CompiledExpression:
    """A parsed expression that can be evaluated repeatedly.

    The tree is immutable, so one instance may be shared between threads
    as long as each caller passes its own (or an unchanging) mapping.
    """

    __slots__ = ("_source", "_ast", "_variables")

    def __init__(self, source: str, ast: Expr) -> None:
        self._source = source
        self._ast = ast
        self._variables = referenced_variables(ast)

    @property
    def source(self) -> str:
        return self._source

    @property
    def ast(self) -> Expr:
        return self._ast

    @property
    def variables(self) -> frozenset[str]:
        """Names of the variables the expression reads."""
        return self._variables

    @property
    def result_kind(self) -> ValueKind:
        """Statically inferred kind of the result (ANY for a bare variable)."""
        return infer_kind(self._ast)

    def run(self, variables: Variables | None = None) -> Value:
        """Evaluate the cached tree against variables.

        Raises:
            UnsupportedVariableTypeError: If a variable is not a number or
                boolean.
            UndefinedVariableError: If a referenced variable is missing.
        """
        env = to_environment(variables)
        return evaluate_ast(self._ast, env)

    __call__ = run

    def __repr__(self) -> str:
        return f"CompiledExpression({self._source!r})"


def compile(expression: str, *, limits: ExpressionLimits | None = None) -> CompiledExpression:
    """Lex and parse an expression once for repeated evaluation.

    Raises:
        LexError: If tokenization fails.
        ParseError: If the expression is invalid.
    """
    ast = _parse(expression, limits or DEFAULT_LIMITS)
    compiled = CompiledExpression(expression, ast)
    logger.debug(
        "Compiled expression (%d chars, variables=%s)",
        len(expression),
        sorted(compiled.variables),
    )
    return compiled


def evaluate(
    expression: str,
    variables: Variables | None = None,
    *,
    limits: ExpressionLimits | None = None,
) -> Value:
    """Evaluate an expression string against variables.

    Variables are validated before the expression is touched, so an
    unsupported value is reported even when the expression is also
    malformed.

    Raises:
        UnsupportedVariableTypeError: For non number/boolean variables.
        LexError, ParseError, EvalError: First failure in the pipeline.
    """
    env = to_environment(variables)
    ast = _parse(expression, limits or DEFAULT_LIMITS)
    return evaluate_ast(ast, env)


def evaluate_condition(
    expression: str,
    variables: Variables | None = None,
    *,
    limits: ExpressionLimits | None = None,
) -> bool:
    """Evaluate a condition, treating any failure as False.

    The result is coerced with the language's boolean rules (non-zero
    numbers are true). Failures are logged, never raised.
    """
    try:
        result = evaluate(expression, variables, limits=limits)
    except ExpressionError as e:
        logger.warning("Condition rejected: %s: %s", type(e).__name__, e)
        return False
    return to_boolean(result)


class SafeExpressionEvaluator:
    """
    Evaluator bound to a fixed set of limits.

    Usage:
        evaluator = SafeExpressionEvaluator(ExpressionLimits(max_length=200))
        evaluator.evaluate("x < 10 && y > 5", {"x": 5, "y": 10})
        check = evaluator.parse("x > 3")
        check.run({"x": 4})
    """

    def __init__(self, limits: ExpressionLimits | None = None) -> None:
        self.limits = limits or DEFAULT_LIMITS

    def evaluate(self, expression: str, variables: Variables | None = None) -> Value:
        return evaluate(expression, variables, limits=self.limits)

    def parse(self, expression: str) -> CompiledExpression:
        return compile(expression, limits=self.limits)

    def evaluate_condition(self, expression: str, variables: Variables | None = None) -> bool:
        return evaluate_condition(expression, variables, limits=self.limits)


# Shared default instance
safe_evaluator = SafeExpressionEvaluator()
