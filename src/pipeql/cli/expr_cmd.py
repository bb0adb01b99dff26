"""Expression CLI commands: tokens, parse, check, format."""

import json

import click
import yaml

from pipeql.config import ParserConfig
from pipeql.expressions import (
    ExpressionError,
    format_expression,
    parse,
    parse_or_raise,
    to_dict,
    tokenize,
)


def _read_source(expression: str) -> str:
    """Return the expression text, reading stdin when given '-'."""
    if expression == "-":
        return click.get_text_stream("stdin").read().strip()
    return expression


def _fail(error: ExpressionError) -> None:
    click.echo(click.style(f"Error: {error}", fg="red"), err=True)
    raise SystemExit(1)


@click.command()
@click.argument("expression")
def tokens(expression: str):
    """Print the tokens EXPRESSION lexes into."""
    source = _read_source(expression)
    try:
        lexed = tokenize(source)
    except ExpressionError as e:
        _fail(e)

    for token in lexed:
        click.echo(f"{token.position:>4}  {token.kind.name:<9}  {token.value!r}")


@click.command("parse")
@click.argument("expression")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "yaml"]),
    default="json",
    show_default=True,
    help="Output format for the AST.",
)
@click.pass_obj
def parse_cmd(config: ParserConfig, expression: str, output_format: str):
    """Parse EXPRESSION and print its AST."""
    source = _read_source(expression)
    try:
        ast = parse_or_raise(source, config)
    except ExpressionError as e:
        _fail(e)

    data = to_dict(ast)
    if output_format == "yaml":
        click.echo(yaml.safe_dump(data, sort_keys=False), nl=False)
    else:
        click.echo(json.dumps(data, indent=2))


@click.command()
@click.argument("expressions", nargs=-1, required=True)
@click.pass_obj
def check(config: ParserConfig, expressions: tuple[str, ...]):
    """Check that each EXPRESSION parses."""
    failures = 0

    for expression in expressions:
        source = _read_source(expression)
        result = parse(source, config)
        if result.ok:
            click.echo(click.style(f"  ✓ {source}", fg="green"))
        else:
            failures += 1
            click.echo(click.style(f"  ✗ {source}: {result.error}", fg="red"))

    if failures:
        click.echo(
            click.style(f"\n{failures} expression(s) failed to parse", fg="red", bold=True)
        )
        raise SystemExit(1)

    click.echo(click.style(f"\nAll {len(expressions)} expression(s) parse.", fg="green"))


@click.command("format")
@click.argument("expression")
@click.pass_obj
def format_cmd(config: ParserConfig, expression: str):
    """Print EXPRESSION in canonical form."""
    source = _read_source(expression)
    try:
        ast = parse_or_raise(source, config)
    except ExpressionError as e:
        _fail(e)

    click.echo(format_expression(ast))
