"""Parser for the PipeQL expression language.

Converts a list of tokens into an Abstract Syntax Tree (AST).
Uses recursive descent over an explicit token cursor: every rule takes
the index of the next unread token and returns the node it built along
with the index just past it. The parser itself holds no position.

Binding (lowest to highest):
1. |            (pipeline)
2. juxtaposition (application)
3. literals, references, [ ], { }, ( )
"""

import logging
from dataclasses import dataclass

from pipeql.config import ParserConfig
from pipeql.expressions.errors import ExpressionError, ParseError
from pipeql.expressions.lexer import ROOT_MARKER, Lexer, Token, TokenKind
from pipeql.expressions.nodes import (
    Node,
    Reference,
    array,
    literal_for,
    make_application,
    make_pipeline,
    obj,
)

logger = logging.getLogger(__name__)

# Symbols that open a nested primary
OPENERS = ("(", "[", "{")


class Parser:
    """Recursive descent parser for the expression language.

    Usage:
        parser = Parser.from_source('@.items | count')
        ast = parser.parse()
    """

    def __init__(
        self,
        tokens: list[Token],
        source: str = "",
        config: ParserConfig | None = None,
    ):
        self.tokens = tuple(tokens)
        self.source = source
        self.config = config or ParserConfig()

    @classmethod
    def from_source(cls, source: str, config: ParserConfig | None = None) -> "Parser":
        """Tokenize ``source`` and build a parser over the result."""
        return cls(Lexer(source).tokenize(), source, config)

    def parse(self) -> Node:
        """Parse the whole token list and return the AST root."""
        if not self.tokens:
            raise self._error("Empty expression", 0)

        try:
            ast, pos = self.parse_pipeline(0)
        except RecursionError:
            # max_depth set beyond what the interpreter stack can hold
            raise self._error("Expression nested too deeply", 0) from None

        if pos < len(self.tokens):
            token = self.tokens[pos]
            raise self._error(f"Unexpected token '{token.value}'", pos)

        return ast

    # -------------------------------------------------------------------------
    # Helper methods
    # -------------------------------------------------------------------------

    def _peek(self, pos: int) -> Token | None:
        """Token at ``pos``, or None past the end."""
        if pos < len(self.tokens):
            return self.tokens[pos]
        return None

    def _is_special(self, pos: int, *symbols: str) -> bool:
        token = self._peek(pos)
        return token is not None and token.is_special(*symbols)

    def _starts_primary(self, pos: int) -> bool:
        """True if the token at ``pos`` can begin a primary expression."""
        token = self._peek(pos)
        if token is None:
            return False
        if token.kind in (TokenKind.VALUE, TokenKind.REFERENCE):
            return True
        return token.is_special(*OPENERS)

    def _expect(self, pos: int, symbol: str, message: str) -> int:
        """Consume ``symbol`` at ``pos`` and return the next cursor, or raise."""
        if self._is_special(pos, symbol):
            return pos + 1
        raise self._error(message, pos)

    def _error(self, message: str, pos: int) -> ParseError:
        """Build a ParseError pointing at the token at ``pos``."""
        token = self._peek(pos)
        if token is not None:
            return ParseError(message, token.position, token)

        # Past the end: point just after the last character
        if not self.source and self.tokens:
            end, line, column = self.tokens[-1].end()
        else:
            end = len(self.source)
            line = self.source.count("\n") + 1
            column = end - (self.source.rfind("\n") + 1) + 1
        return ParseError(message, end, None, line, column)

    def _nest(self, pos: int, depth: int) -> int:
        """Depth for a group opened at ``pos``, or raise when too deep."""
        depth += 1
        if depth > self.config.max_depth:
            raise self._error(
                f"Expression nested deeper than {self.config.max_depth} levels", pos
            )
        return depth

    # -------------------------------------------------------------------------
    # Grammar rules (lowest to highest binding)
    # -------------------------------------------------------------------------

    def parse_pipeline(self, pos: int, depth: int = 0) -> tuple[Node, int]:
        """Parse applications separated by ``|``."""
        stage, pos = self.parse_application(pos, depth)
        stages = [stage]

        while self._is_special(pos, "|"):
            pos += 1
            if not self._starts_primary(pos):
                raise self._error("Expected expression after '|'", pos)
            stage, pos = self.parse_application(pos, depth)
            stages.append(stage)

        return make_pipeline(stages), pos

    def parse_application(self, pos: int, depth: int = 0) -> tuple[Node, int]:
        """Parse a primary followed by any number of argument primaries.

        Arguments are collected greedily and stop at the first token that
        cannot begin a primary, so a ``|`` always closes the argument list.
        """
        function, pos = self.parse_primary(pos, depth)

        arguments: list[Node] = []
        while self._starts_primary(pos):
            argument, pos = self.parse_primary(pos, depth)
            arguments.append(argument)

        return make_application(function, arguments), pos

    def parse_primary(self, pos: int, depth: int = 0) -> tuple[Node, int]:
        """Parse a literal, reference, array, object or parenthesized group."""
        token = self._peek(pos)

        if token is None:
            raise self._error("Unexpected end of expression", pos)

        # Literals
        if token.kind == TokenKind.VALUE:
            return literal_for(token.value), pos + 1

        # References (bare name or @, with .name segments)
        if token.kind == TokenKind.REFERENCE:
            return self._parse_reference(pos)

        # Grouped expression
        if token.is_special("("):
            return self._parse_group(pos, depth)

        # Array literal
        if token.is_special("["):
            return self._parse_array_literal(pos, depth)

        # Object literal
        if token.is_special("{"):
            return self._parse_object_literal(pos, depth)

        if token.is_special("|"):
            raise self._error("Expected expression before '|'", pos)

        raise self._error(f"Unexpected token '{token.value}'", pos)

    def _parse_reference(self, pos: int) -> tuple[Reference, int]:
        """Parse ``name(.name)*`` or ``@(.name)*``."""
        path = [str(self.tokens[pos].value)]
        pos += 1

        while self._is_special(pos, "."):
            segment = self._peek(pos + 1)
            if (
                segment is None
                or segment.kind != TokenKind.REFERENCE
                or segment.value == ROOT_MARKER
            ):
                raise self._error("Expected identifier after '.'", pos + 1)
            path.append(str(segment.value))
            pos += 2

        return Reference(path), pos

    def _parse_group(self, pos: int, depth: int) -> tuple[Node, int]:
        """Parse ``( pipeline )``; the parentheses leave no node behind."""
        open_token = self.tokens[pos]
        depth = self._nest(pos, depth)

        if self._is_special(pos + 1, ")"):
            raise self._error("Empty parenthetical expression", pos)

        expr, pos = self.parse_pipeline(pos + 1, depth)
        pos = self._expect(
            pos, ")", f"Expected ')' to close '(' at position {open_token.position}"
        )
        return expr, pos

    def _parse_array_literal(self, pos: int, depth: int) -> tuple[Node, int]:
        """Parse an array literal [a, b, c]."""
        depth = self._nest(pos, depth)
        pos += 1

        elements: list[Node] = []

        if self._is_special(pos, "]"):
            return array(elements), pos + 1

        while True:
            element, pos = self.parse_pipeline(pos, depth)
            elements.append(element)

            if self._is_special(pos, ","):
                pos += 1
            elif self._is_special(pos, "]"):
                return array(elements), pos + 1
            elif self._peek(pos) is None:
                raise self._error("Unterminated array literal", pos)
            else:
                raise self._error("Expected ',' or ']' after array element", pos)

    def _parse_object_literal(self, pos: int, depth: int) -> tuple[Node, int]:
        """Parse an object literal {"key": value, other: value}."""
        depth = self._nest(pos, depth)
        pos += 1

        pairs: dict[str, Node] = {}

        if self._is_special(pos, "}"):
            return obj(pairs), pos + 1

        while True:
            key, pos = self._parse_object_key(pos)
            pos = self._expect(pos, ":", "Expected ':' after object key")
            value, pos = self.parse_pipeline(pos, depth)
            pairs[key] = value

            if self._is_special(pos, ","):
                pos += 1
            elif self._is_special(pos, "}"):
                return obj(pairs), pos + 1
            elif self._peek(pos) is None:
                raise self._error("Unterminated object literal", pos)
            else:
                raise self._error("Expected ',' or '}' after object value", pos)

    def _parse_object_key(self, pos: int) -> tuple[str, int]:
        """Parse an object key: a string literal or a bare identifier."""
        token = self._peek(pos)

        if token is not None:
            if token.kind == TokenKind.VALUE and isinstance(token.value, str):
                return token.value, pos + 1
            if token.kind == TokenKind.REFERENCE and token.value != ROOT_MARKER:
                return str(token.value), pos + 1

        raise self._error("Expected string or identifier as object key", pos)


# -----------------------------------------------------------------------------
# Entry points
# -----------------------------------------------------------------------------


@dataclass
class ParseResult:
    """Outcome of ``parse``: exactly one of ``expression`` or ``error`` is set."""

    expression: Node | None = None
    error: ExpressionError | None = None

    def __post_init__(self) -> None:
        if (self.expression is None) == (self.error is None):
            raise ValueError("ParseResult needs exactly one of expression or error")

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Node:
        """Return the expression, or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.expression


def parse_or_raise(source: str, config: ParserConfig | None = None) -> Node:
    """Parse an expression string, raising LexError or ParseError on failure.

    Args:
        source: The expression string
        config: Parser limits; ParserConfig() when omitted

    Returns:
        The AST root node
    """
    return Parser.from_source(source, config).parse()


def parse(source: str, config: ParserConfig | None = None) -> ParseResult:
    """Parse an expression string without raising.

    Lex and parse failures are returned in ``ParseResult.error``.
    """
    try:
        return ParseResult(expression=parse_or_raise(source, config))
    except ExpressionError as e:
        logger.debug("Failed to parse %r: %s", source, e)
        return ParseResult(error=e)
