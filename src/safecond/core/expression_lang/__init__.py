"""
safecond expression language.

Tokenizer, parser, evaluator, and static analysis for restricted
arithmetic/boolean conditions.

Usage:
    from safecond.core.expression_lang import evaluate, parse_expr

    expr = parse_expr("x < 10 && y > 5")
    result = evaluate(expr, {"x": number(5), "y": number(10)})
    # result == Boolean(value=True)
"""

from safecond.core.expression_lang.analysis import infer_kind, referenced_variables
from safecond.core.expression_lang.evaluator import evaluate
from safecond.core.expression_lang.parser import parse_expr, parse_tokens
from safecond.core.expression_lang.tokenizer import tokenize

__all__ = [
    "evaluate",
    "infer_kind",
    "parse_expr",
    "parse_tokens",
    "referenced_variables",
    "tokenize",
]
