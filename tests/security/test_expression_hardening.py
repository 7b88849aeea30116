"""Hardening tests for the expression evaluator.

Covers:
- Identifier blocklist, enforced at tokenize time for every listed name
- Blocked names never leak into error messages
- No call, member access or indexing syntax
- Input length and nesting bounds
- No lookups outside the supplied variables
"""

from __future__ import annotations

import pytest

from safecond import ExpressionLimits, compile, evaluate, evaluate_condition
from safecond.core.errors import (
    BlockedIdentifierError,
    ExpressionTooDeepError,
    ExpressionTooLongError,
    LexError,
    ParseError,
    UndefinedVariableError,
)
from safecond.core.expression_lang.blocklist import BLOCKED_IDENTIFIERS, is_blocked
from safecond.core.expression_lang.tokenizer import tokenize


class TestBlocklist:
    """Blocklisted names are rejected before parsing."""

    @pytest.mark.parametrize("name", sorted(BLOCKED_IDENTIFIERS))
    def test_every_blocked_name_fails(self, name: str) -> None:
        with pytest.raises(BlockedIdentifierError) as exc_info:
            evaluate(name, {})
        assert exc_info.value.name == name

    @pytest.mark.parametrize("name", sorted(BLOCKED_IDENTIFIERS))
    def test_blocked_even_when_supplied_as_variable(self, name: str) -> None:
        with pytest.raises(BlockedIdentifierError):
            evaluate(name, {name: 1})

    def test_blocked_in_dead_code(self) -> None:
        # Tokenizing fails even though the name would never be read
        with pytest.raises(BlockedIdentifierError):
            evaluate("1 || (0 && __proto__)", {})

    def test_blocked_before_syntax_errors_later_in_input(self) -> None:
        with pytest.raises(BlockedIdentifierError):
            evaluate("constructor + + +", {})

    def test_categories_present(self) -> None:
        for name in ("__proto__", "constructor", "prototype", "__class__"):
            assert is_blocked(name)
        for name in ("eval", "Function", "globalThis", "__builtins__", "getattr"):
            assert is_blocked(name)
        for name in ("require", "import", "module", "__import__", "os"):
            assert is_blocked(name)

    def test_similar_names_are_allowed(self) -> None:
        assert not is_blocked("proto")
        assert not is_blocked("Eval")
        assert evaluate("evaluation + module_count", {"evaluation": 1, "module_count": 2}).value == 3

    def test_blocklist_is_immutable(self) -> None:
        assert isinstance(BLOCKED_IDENTIFIERS, frozenset)


class TestErrorMessages:
    """Error text never reveals which name was blocked."""

    @pytest.mark.parametrize("name", ["__proto__", "constructor", "eval", "require"])
    def test_message_omits_name(self, name: str) -> None:
        with pytest.raises(BlockedIdentifierError) as exc_info:
            evaluate(f"x + {name}", {"x": 1})
        err = exc_info.value
        assert str(err) == "Blocked identifier"
        assert name not in str(err)
        assert name not in repr(err.args)

    def test_position_is_reported(self) -> None:
        with pytest.raises(BlockedIdentifierError) as exc_info:
            tokenize("a + eval")
        assert exc_info.value.pos == 4


class TestNoCallOrMemberSyntax:
    """Calls, member access and indexing cannot be expressed."""

    @pytest.mark.parametrize(
        "source",
        [
            "x.y",
            "x[0]",
            "x['a']",
            "a, b",
            "x = 1",
            "`cmd`",
            "x; y",
            "{}",
            '"str"',
            "x?.y",
        ],
    )
    def test_rejected_at_lex_time(self, source: str) -> None:
        with pytest.raises(LexError):
            evaluate(source, {"x": 1, "y": 2, "a": 1, "b": 2})

    @pytest.mark.parametrize("source", ["f(1)", "x (1)", "(x)(y)", "x y"])
    def test_call_shapes_rejected_at_parse_time(self, source: str) -> None:
        with pytest.raises(ParseError):
            evaluate(source, {"f": 1, "x": 1, "y": 2})


class TestResourceBounds:
    def test_oversized_identifier(self) -> None:
        with pytest.raises(ExpressionTooLongError):
            evaluate("a" * 1001, {})

    def test_deep_parentheses(self) -> None:
        source = "(" * 200 + "1" + ")" * 200
        with pytest.raises(ExpressionTooDeepError):
            evaluate(source, {})

    def test_deep_negation(self) -> None:
        with pytest.raises(ExpressionTooDeepError):
            evaluate("-" * 500 + "1", {})

    def test_worst_case_flat_input_evaluates(self) -> None:
        # Longest left-leaning chain the default length cap allows
        source = "+".join(["1"] * 500)
        assert len(source) <= 1000
        assert evaluate(source, {}).value == 500

    def test_worst_case_flat_input_renders(self) -> None:
        source = "+".join(["1"] * 500)
        rendered = str(compile(source).ast)
        assert rendered.startswith("(" * 499 + "1 + 1)")
        assert rendered.endswith(" + 1)")

    def test_raised_length_limit_chain(self) -> None:
        source = "+".join(["1"] * 5000)
        limits = ExpressionLimits(max_length=len(source))
        assert evaluate(source, {}, limits=limits).value == 5000
        assert evaluate_condition(source, {}, limits=limits) is True
        assert len(str(compile(source, limits=limits).ast)) > len(source)

    def test_raised_depth_limit_stays_typed(self) -> None:
        source = "(" * 400 + "1" + ")" * 400
        limits = ExpressionLimits(max_depth=200)
        with pytest.raises(ExpressionTooDeepError):
            evaluate(source, {}, limits=limits)
        assert evaluate_condition(source, {}, limits=limits) is False


class TestNoAmbientScope:
    @pytest.mark.parametrize("name", ["x", "len", "print", "open_file", "safecond", "pytest"])
    def test_only_supplied_variables_resolve(self, name: str) -> None:
        with pytest.raises(UndefinedVariableError):
            evaluate(name, {})

    def test_variables_are_not_mutated(self) -> None:
        variables = {"x": 1, "y": True}
        evaluate("x + y > 0 && !y", variables)
        assert variables == {"x": 1, "y": True}
