"""Lexer/tokenizer for the PipeQL expression language.

Converts expression strings into a list of tokens for the parser.

Token kinds:
- VALUE: number, string, boolean and null literals
- REFERENCE: identifiers and the root marker ``@``
- SPECIAL: structural symbols ( ) [ ] { } | . , :
"""

import logging
import math
import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterator

from pipeql.expressions.errors import LexError

logger = logging.getLogger(__name__)


class TokenKind(Enum):
    """Kinds of tokens in the expression language."""

    VALUE = auto()
    REFERENCE = auto()
    SPECIAL = auto()


@dataclass(frozen=True)
class Token:
    """A single token from the lexer.

    Attributes:
        kind: The token kind
        value: Literal value, atom text, or symbol text
        position: Character position in the source string
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        text: The raw source text of the token (not compared)
    """

    kind: TokenKind
    value: str | int | float | bool | None
    position: int
    line: int = 1
    column: int = 1
    text: str = field(default="", compare=False)

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.value!r}, pos={self.position})"

    def end(self) -> tuple[int, int, int]:
        """(position, line, column) just past the token's source text."""
        newlines = self.text.count("\n")
        if newlines:
            return (
                self.position + len(self.text),
                self.line + newlines,
                len(self.text) - self.text.rfind("\n"),
            )
        return self.position + len(self.text), self.line, self.column + len(self.text)

    def is_special(self, *symbols: str) -> bool:
        """True if this is a structural symbol, optionally one of ``symbols``."""
        if self.kind != TokenKind.SPECIAL:
            return False
        return not symbols or self.value in symbols


ROOT_MARKER = "@"

# Token patterns (order matters - numbers before identifiers)
TOKEN_PATTERNS = [
    # Whitespace (skip)
    (r"\s+", None),

    # Structural symbols
    (r"[()\[\]{}|.,:]", TokenKind.SPECIAL),

    # Numbers (integer and decimal)
    (r"\d+\.\d+", TokenKind.VALUE),
    (r"\d+", TokenKind.VALUE),

    # Double quoted strings, \" and \\ escapes only
    (r'"(?:[^"\\]|\\.)*"', TokenKind.VALUE),

    # Keywords and identifiers
    (r"[A-Za-z_][A-Za-z0-9_]*", TokenKind.REFERENCE),

    # Root marker
    (r"@", TokenKind.REFERENCE),
]

# Keywords that lex as literal values rather than reference atoms
KEYWORDS = {
    "true": True,
    "false": False,
    "null": None,
}

_COMPILED_PATTERNS = [
    (re.compile(pattern), kind) for pattern, kind in TOKEN_PATTERNS
]

_STRING_ESCAPE = re.compile(r'\\(["\\])')


class Lexer:
    """Tokenizer for the expression language.

    Usage:
        lexer = Lexer('@.items | map (pick "name")')
        for token in lexer:
            print(token)
    """

    def __init__(self, source: str):
        self.source = source
        self.position = 0
        self.line = 1
        self.column = 1

    def __iter__(self) -> Iterator[Token]:
        """Iterate over all tokens in the source."""
        while True:
            token = self.next_token()
            if token is None:
                break
            yield token

    def next_token(self) -> Token | None:
        """Get the next token from the source, or None at end of input."""
        while self.position < len(self.source):
            for pattern, kind in _COMPILED_PATTERNS:
                match = pattern.match(self.source, self.position)
                if match:
                    break
            else:
                # No pattern matched
                raise LexError(
                    self.source[self.position],
                    self.position,
                    self.line,
                    self.column,
                )

            text = match.group()
            start_pos = self.position
            start_line = self.line
            start_column = self.column
            self._advance(len(text))

            # Skip whitespace
            if kind is None:
                continue

            token_value: str | int | float | bool | None = text

            if kind == TokenKind.VALUE:
                if text.startswith('"'):
                    token_value = _STRING_ESCAPE.sub(r"\1", text[1:-1])
                else:
                    token_value = self._number(text, start_pos, start_line, start_column)

            elif kind == TokenKind.REFERENCE and text in KEYWORDS:
                kind = TokenKind.VALUE
                token_value = KEYWORDS[text]

            return Token(kind, token_value, start_pos, start_line, start_column, text)

        return None

    def _number(self, text: str, position: int, line: int, column: int) -> int | float:
        """Convert a numeric literal, rejecting ones Python cannot represent."""
        try:
            value: int | float = float(text) if "." in text else int(text)
        except ValueError:
            # int() refuses strings past sys.get_int_max_str_digits()
            value = math.inf

        if isinstance(value, float) and not math.isfinite(value):
            raise LexError(
                text[0], position, line, column, reason="Numeric literal out of range"
            )
        return value

    def _advance(self, count: int) -> None:
        """Advance position by count characters, updating line/column."""
        for _ in range(count):
            if self.position < len(self.source):
                if self.source[self.position] == "\n":
                    self.line += 1
                    self.column = 1
                else:
                    self.column += 1
                self.position += 1

    def tokenize(self) -> list[Token]:
        """Tokenize the entire source and return list of tokens."""
        tokens = list(self)
        logger.debug("Lexed %d token(s) from %d character(s)", len(tokens), len(self.source))
        return tokens


def tokenize(source: str) -> list[Token]:
    """Convenience function to tokenize an expression string."""
    return Lexer(source).tokenize()
