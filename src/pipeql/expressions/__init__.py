"""PipeQL expression language front end.

This module provides:
- Lexer: Tokenizes expression strings
- Parser: Produces AST from tokens
- Nodes: The four AST node types and helpers to build and walk them
- Serializer: AST to evaluator dicts and back to source text
"""

from pipeql.expressions.errors import ExpressionError, LexError, ParseError
from pipeql.expressions.lexer import Lexer, Token, TokenKind, tokenize
from pipeql.expressions.nodes import (
    Application,
    Literal,
    Node,
    Pipeline,
    Reference,
    ValueType,
    make_application,
    make_pipeline,
    references,
    walk,
)
from pipeql.expressions.parser import (
    ParseResult,
    Parser,
    parse,
    parse_or_raise,
)
from pipeql.expressions.serializer import format_expression, to_dict

__all__ = [
    # Errors
    "ExpressionError",
    "LexError",
    "ParseError",
    # Lexer
    "Lexer",
    "Token",
    "TokenKind",
    "tokenize",
    # Nodes
    "Application",
    "Literal",
    "Node",
    "Pipeline",
    "Reference",
    "ValueType",
    "make_application",
    "make_pipeline",
    "references",
    "walk",
    # Parser
    "ParseResult",
    "Parser",
    "parse",
    "parse_or_raise",
    # Serializer
    "format_expression",
    "to_dict",
]
