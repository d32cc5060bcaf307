"""calcforge CLI entry point."""

import dataclasses
import logging

import click

from calcforge.config import PERCENT_MODES, EngineConfig
from calcforge.engine import (
    EngineError,
    compute,
    format_ast,
    format_result,
    parse,
    render_error,
    tokenize,
)


@click.group()
@click.option(
    "--percent-mode",
    type=click.Choice(PERCENT_MODES),
    default=None,
    help="How '%' after + or - is read. Defaults to $CALCFORGE_PERCENT_MODE or 'calculator'.",
)
@click.option(
    "--precision",
    type=click.IntRange(1, 17),
    default=None,
    help="Significant digits in displayed results.",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
@click.pass_context
def cli(ctx, percent_mode: str | None, precision: int | None, verbose: bool):
    """calcforge: arithmetic expression calculator.

    Expressions starting with '-' must follow '--', e.g. calcforge eval -- -5!
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    try:
        config = EngineConfig.from_env()
    except ValueError as e:
        raise click.ClickException(str(e))

    overrides = {}
    if percent_mode is not None:
        overrides["percent_mode"] = percent_mode
    if precision is not None:
        overrides["precision"] = precision
    ctx.obj = dataclasses.replace(config, **overrides)


def _fail(source: str, error: EngineError):
    click.echo(click.style(render_error(source, error), fg="red"), err=True)
    raise SystemExit(1)


@cli.command("eval")
@click.argument("expression")
@click.pass_obj
def eval_cmd(config: EngineConfig, expression: str):
    """Evaluate EXPRESSION and print the result."""
    try:
        result = compute(expression, config)
    except EngineError as e:
        _fail(expression, e)
    click.echo(format_result(result, config.precision))


@cli.command("tokens")
@click.argument("expression")
def tokens_cmd(expression: str):
    """Print the tokens of EXPRESSION, one per line."""
    try:
        tokens = tokenize(expression)
    except EngineError as e:
        _fail(expression, e)
    for token in tokens:
        value = "" if token.value is None else token.value
        click.echo(f"{token.position:>4}  {token.type.name:<10} {value}")


@cli.command("ast")
@click.argument("expression")
def ast_cmd(expression: str):
    """Print the syntax tree of EXPRESSION."""
    try:
        ast = parse(expression)
    except EngineError as e:
        _fail(expression, e)
    click.echo(format_ast(ast))


# Register subcommands
from calcforge.cli.repl_cmd import repl  # noqa: E402

cli.add_command(repl)
