"""Exceptions raised while turning source text into an AST."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pipeql.expressions.lexer import Token


class ExpressionError(Exception):
    """Base class for lexing and parsing failures.

    Attributes:
        position: Character offset in the source (0-indexed)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """

    def __init__(self, message: str, position: int, line: int = 1, column: int = 1):
        self.position = position
        self.line = line
        self.column = column
        super().__init__(message)


class LexError(ExpressionError):
    """A character that cannot begin any token, or a literal with no value.

    ``character`` is the first character of the offending text.
    """

    def __init__(
        self,
        character: str,
        position: int,
        line: int = 1,
        column: int = 1,
        reason: str | None = None,
    ):
        self.character = character
        self.reason = reason or f"Unexpected character '{character}'"
        super().__init__(
            f"{self.reason} at line {line}, column {column}",
            position,
            line,
            column,
        )


class ParseError(ExpressionError):
    """A token sequence that does not reduce to a single complete expression.

    ``token`` is the offending token, or None when the input ended early.
    """

    def __init__(
        self,
        message: str,
        position: int,
        token: Token | None = None,
        line: int = 1,
        column: int = 1,
    ):
        self.reason = message
        self.token = token
        if token is not None:
            line, column = token.line, token.column
        super().__init__(f"{message} at position {position}", position, line, column)
