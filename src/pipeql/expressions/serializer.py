"""Serialization of PipeQL ASTs.

- to_dict: the plain-dict shape handed to the evaluator
- format_expression: canonical source text that parses back to an equal AST
"""

import math
from decimal import Decimal
from typing import Any

from pipeql.expressions.nodes import (
    Application,
    Literal,
    Node,
    Pipeline,
    Reference,
    ValueType,
)


def to_dict(node: Node) -> dict[str, Any]:
    """Convert an AST into nested dicts, lists and primitives.

    Example:
        to_dict(parse_or_raise("sup nernd"))
        # {"type": "application",
        #  "function": {"type": "reference", "path": ["sup"]},
        #  "arguments": [{"type": "reference", "path": ["nernd"]}]}
    """
    if isinstance(node, Literal):
        value: Any = node.value
        if node.value_type == ValueType.ARRAY:
            value = [to_dict(element) for element in node.value]
        elif node.value_type == ValueType.OBJECT:
            value = {key: to_dict(item) for key, item in node.value.items()}
        return {
            "type": "literal",
            "valueType": node.value_type.value,
            "value": value,
        }

    if isinstance(node, Reference):
        return {"type": "reference", "path": list(node.path)}

    if isinstance(node, Application):
        return {
            "type": "application",
            "function": to_dict(node.function),
            "arguments": [to_dict(argument) for argument in node.arguments],
        }

    if isinstance(node, Pipeline):
        return {
            "type": "pipeline",
            "stages": [to_dict(stage) for stage in node.stages],
        }

    raise TypeError(f"Unknown node type: {type(node).__name__}")


def format_expression(node: Node) -> str:
    """Render an AST as source text.

    Parentheses are emitted only where the grammar needs them: around an
    application or pipeline used as a function or argument, and around a
    pipeline used as a pipeline stage.
    """
    if isinstance(node, Literal):
        return _format_literal(node)

    if isinstance(node, Reference):
        return ".".join(node.path)

    if isinstance(node, Application):
        parts = [_group(node.function, Application, Pipeline)]
        parts.extend(_group(argument, Application, Pipeline) for argument in node.arguments)
        return " ".join(parts)

    if isinstance(node, Pipeline):
        return " | ".join(_group(stage, Pipeline) for stage in node.stages)

    raise TypeError(f"Unknown node type: {type(node).__name__}")


def _group(node: Node, *needs_parens: type) -> str:
    text = format_expression(node)
    if isinstance(node, needs_parens):
        return f"({text})"
    return text


def _format_literal(node: Literal) -> str:
    value_type = node.value_type

    if value_type == ValueType.NULL:
        return "null"
    if value_type == ValueType.BOOLEAN:
        return "true" if node.value else "false"
    if value_type == ValueType.NUMBER:
        return _format_number(node.value)
    if value_type == ValueType.STRING:
        return _quote(node.value)
    if value_type == ValueType.ARRAY:
        return "[" + ", ".join(format_expression(e) for e in node.value) + "]"
    if value_type == ValueType.OBJECT:
        pairs = (f"{_quote(k)}: {format_expression(v)}" for k, v in node.value.items())
        return "{" + ", ".join(pairs) + "}"

    raise ValueError(f"Unknown literal type: {value_type}")


def _quote(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _format_number(value: int | float) -> str:
    """Write a number using only digits and an optional decimal point."""
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"Number {value!r} has no source representation")
    if value < 0 or math.copysign(1, value) < 0:
        raise ValueError(f"Negative number {value!r} has no source representation")

    if isinstance(value, int):
        return str(value)

    text = repr(value)
    if "e" in text or "E" in text:
        text = format(Decimal(text), "f")
    if "." not in text:
        # keep it a float when re-lexed
        text += ".0"
    return text
