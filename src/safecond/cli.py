"""
safecond command-line interface.

Commands:
- eval:   evaluate an expression against --var NAME=VALUE bindings
- check:  parse only; show canonical form, variables and result kind
- tokens: show the token stream
"""

from __future__ import annotations

import json
import logging
import math
import sys
import tomllib
from pathlib import Path
from typing import NoReturn

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from safecond._version import get_version
from safecond.api import compile, evaluate
from safecond.config import DEFAULT_LIMITS, ExpressionLimits, limits_from_env, load_limits
from safecond.core.errors import ExpressionError
from safecond.core.expression_lang.tokenizer import tokenize

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    help="safecond - evaluate restricted arithmetic/boolean conditions",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"safecond {get_version()}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="TOML file with a [safecond] or [tool.safecond] limits table",
    ),
) -> None:
    """safecond CLI main callback for global options."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
    try:
        limits = load_limits(config) if config is not None else DEFAULT_LIMITS
        ctx.obj = limits_from_env(limits)
    except (ValidationError, tomllib.TOMLDecodeError) as e:
        err_console.print(f"[red]Invalid limits configuration:[/red] {escape(str(e))}")
        raise typer.Exit(code=2) from e


def _limits(ctx: typer.Context) -> ExpressionLimits:
    return ctx.obj if isinstance(ctx.obj, ExpressionLimits) else DEFAULT_LIMITS


def _parse_var(raw: str) -> tuple[str, float | bool]:
    name, sep, value = raw.partition("=")
    name = name.strip()
    value = value.strip()
    if not sep or not name:
        raise typer.BadParameter(f"expected NAME=VALUE, got {raw!r}", param_hint="--var")
    if value == "true":
        return name, True
    if value == "false":
        return name, False
    try:
        return name, float(value)
    except ValueError:
        raise typer.BadParameter(
            f"value for {name!r} must be a number, true or false", param_hint="--var"
        ) from None


def _fail(error: ExpressionError, expression: str) -> NoReturn:
    err_console.print(f"[red]Error:[/red] {escape(error.format_with_source(expression))}")
    raise typer.Exit(code=1)


@app.command(name="eval")
def eval_command(
    ctx: typer.Context,
    expression: str = typer.Argument(..., help="Expression, e.g. 'x < 10 && y > 5'"),
    var: list[str] = typer.Option(
        [],
        "--var",
        help="Variable binding NAME=VALUE (repeatable)",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print result as JSON"),
) -> None:
    """Evaluate an expression."""
    variables = dict(_parse_var(v) for v in var)
    try:
        result = evaluate(expression, variables, limits=_limits(ctx))
    except ExpressionError as e:
        _fail(e, expression)

    if as_json:
        value: float | bool | str = result.value
        if isinstance(value, float) and not math.isfinite(value):
            # JSON has no Infinity or NaN literals
            value = str(result)
        typer.echo(json.dumps({"kind": str(result.kind), "value": value}, allow_nan=False))
    else:
        typer.echo(str(result))


@app.command(name="check")
def check_command(
    ctx: typer.Context,
    expression: str = typer.Argument(..., help="Expression to parse"),
) -> None:
    """Parse an expression without evaluating it."""
    try:
        compiled = compile(expression, limits=_limits(ctx))
    except ExpressionError as e:
        _fail(e, expression)

    console.print("[green]OK[/green]")
    console.print(f"  Parsed:    {escape(str(compiled.ast))}")
    names = ", ".join(sorted(compiled.variables)) or "-"
    console.print(f"  Variables: {escape(names)}")
    console.print(f"  Result:    {compiled.result_kind}")


@app.command(name="tokens")
def tokens_command(
    ctx: typer.Context,
    expression: str = typer.Argument(..., help="Expression to tokenize"),
) -> None:
    """Show the token stream for an expression."""
    try:
        tokens = tokenize(expression, max_length=_limits(ctx).max_length)
    except ExpressionError as e:
        _fail(e, expression)

    table = Table(title="Tokens")
    table.add_column("Pos", justify="right")
    table.add_column("Kind")
    table.add_column("Value")
    for tok in tokens:
        table.add_row(str(tok.pos), str(tok.kind), escape(repr(tok.value)))
    console.print(table)


def main(argv: list[str] | None = None) -> None:
    app(args=argv if argv is not None else sys.argv[1:], standalone_mode=True)


if __name__ == "__main__":
    main()
