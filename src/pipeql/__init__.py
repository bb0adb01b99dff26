"""PipeQL: parser for a small pipeline expression language."""

from pipeql.config import ParserConfig
from pipeql.expressions import (
    ExpressionError,
    LexError,
    ParseError,
    ParseResult,
    format_expression,
    parse,
    parse_or_raise,
    to_dict,
)

__version__ = "0.1.0"

__all__ = [
    "ExpressionError",
    "LexError",
    "ParseError",
    "ParseResult",
    "ParserConfig",
    "format_expression",
    "parse",
    "parse_or_raise",
    "to_dict",
]
