"""Interactive read-evaluate-print loop."""

import click

from calcforge.config import EngineConfig
from calcforge.engine import EngineError, compute, format_result, render_error

EXIT_COMMANDS = {"quit", "exit"}


@click.command()
@click.pass_obj
def repl(config: EngineConfig):
    """Evaluate expressions interactively.

    Type 'history' to list this session's results, 'clear' to forget them,
    and 'quit' or Ctrl-D to leave.
    """
    history: list[tuple[str, str]] = []

    while True:
        try:
            line = click.prompt("calc", prompt_suffix="> ", default="", show_default=False)
        except click.Abort:
            click.echo()
            break

        expression = line.strip()
        if not expression:
            continue
        if expression.lower() in EXIT_COMMANDS:
            break

        if expression.lower() == "history":
            if not history:
                click.echo("(no history)")
            for entry, result in history:
                click.echo(f"{entry} = {result}")
            continue

        if expression.lower() == "clear":
            history.clear()
            continue

        try:
            value = compute(expression, config)
        except EngineError as e:
            click.echo(click.style(render_error(expression, e), fg="red"), err=True)
            continue

        result = format_result(value, config.precision)
        history.append((expression, result))
        click.echo(result)
