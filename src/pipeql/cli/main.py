"""PipeQL CLI entry point."""

import logging

import click

from pipeql.config import ParserConfig


@click.group()
@click.option(
    "--max-depth",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum nesting of ( [ { groups. Defaults to $PIPEQL_MAX_DEPTH or 100.",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, max_depth: int | None, verbose: bool):
    """PipeQL: inspect how expressions lex and parse."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)

    if max_depth is not None:
        config = ParserConfig(max_depth=max_depth)
    else:
        try:
            config = ParserConfig.from_env()
        except ValueError as e:
            raise click.UsageError(str(e))

    ctx.obj = config


# Register subcommands
from pipeql.cli.expr_cmd import check, format_cmd, parse_cmd, tokens  # noqa: E402

cli.add_command(tokens)
cli.add_command(parse_cmd)
cli.add_command(check)
cli.add_command(format_cmd)
