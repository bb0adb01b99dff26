"""AST node types for the PipeQL expression language.

The tree has exactly four node kinds:

- Literal: string, number, boolean, null, array or object value
- Reference: a dotted path, optionally rooted at ``@``
- Application: a function expression applied to one or more arguments
- Pipeline: two or more stages threaded left to right

Parentheses never appear in the tree. ``make_application`` and
``make_pipeline`` collapse the degenerate cases (no arguments, one stage)
so callers never build a node that breaks these invariants.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Union


class ValueType(str, Enum):
    """The type tag carried by a Literal."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    NULL = "null"


# -----------------------------------------------------------------------------
# AST Node Types
# -----------------------------------------------------------------------------


@dataclass
class Literal:
    """A literal value.

    ``value`` is a primitive for scalar types, a list of nodes for arrays,
    and a dict of string keys to nodes for objects.
    """

    value_type: ValueType
    value: Any

    def __post_init__(self) -> None:
        self.value_type = ValueType(self.value_type)


@dataclass
class Reference:
    """A path lookup (e.g. ``somefn``, ``@.hello.there``)."""

    path: list[str]

    def __post_init__(self) -> None:
        if not self.path:
            raise ValueError("Reference path must not be empty")

    @property
    def is_rooted(self) -> bool:
        return self.path[0] == "@"


@dataclass
class Application:
    """Function application by juxtaposition (e.g. ``sup nernd hi``)."""

    function: "Node"
    arguments: list["Node"]

    def __post_init__(self) -> None:
        if not self.arguments:
            raise ValueError("Application requires at least one argument")


@dataclass
class Pipeline:
    """Left-to-right pipeline (e.g. ``hello | there``)."""

    stages: list["Node"]

    def __post_init__(self) -> None:
        if len(self.stages) < 2:
            raise ValueError("Pipeline requires at least two stages")


Node = Union[Literal, Reference, Application, Pipeline]


# -----------------------------------------------------------------------------
# Construction helpers
# -----------------------------------------------------------------------------


def make_application(function: Node, arguments: list[Node]) -> Node:
    """Apply ``function`` to ``arguments``, or return it alone when there are none."""
    if not arguments:
        return function
    return Application(function, list(arguments))


def make_pipeline(stages: list[Node]) -> Node:
    """Build a pipeline, unwrapping a single stage."""
    if not stages:
        raise ValueError("Pipeline requires at least one stage")
    if len(stages) == 1:
        return stages[0]
    return Pipeline(list(stages))


def string(value: str) -> Literal:
    return Literal(ValueType.STRING, value)


def number(value: int | float) -> Literal:
    return Literal(ValueType.NUMBER, value)


def boolean(value: bool) -> Literal:
    return Literal(ValueType.BOOLEAN, value)


def null() -> Literal:
    return Literal(ValueType.NULL, None)


def array(elements: list[Node]) -> Literal:
    return Literal(ValueType.ARRAY, list(elements))


def obj(pairs: dict[str, Node]) -> Literal:
    return Literal(ValueType.OBJECT, dict(pairs))


def literal_for(value: str | int | float | bool | None) -> Literal:
    """Wrap a scalar token value in a Literal with the matching type tag."""
    # bool before int: True is an int
    if value is None:
        return null()
    if isinstance(value, bool):
        return boolean(value)
    if isinstance(value, (int, float)):
        return number(value)
    if isinstance(value, str):
        return string(value)
    raise TypeError(f"Unsupported literal value: {value!r}")


def ref(*path: str) -> Reference:
    """Shorthand for ``Reference(list(path))``."""
    return Reference(list(path))


# -----------------------------------------------------------------------------
# Traversal
# -----------------------------------------------------------------------------


def children(node: Node) -> list[Node]:
    """Direct child nodes, in source order."""
    if isinstance(node, Literal):
        if node.value_type == ValueType.ARRAY:
            return list(node.value)
        if node.value_type == ValueType.OBJECT:
            return list(node.value.values())
        return []
    if isinstance(node, Reference):
        return []
    if isinstance(node, Application):
        return [node.function, *node.arguments]
    if isinstance(node, Pipeline):
        return list(node.stages)
    raise TypeError(f"Unknown node type: {type(node).__name__}")


def walk(node: Node) -> Iterator[Node]:
    """Yield ``node`` and all of its descendants, depth-first pre-order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(children(current)))


def references(node: Node) -> Iterator[list[str]]:
    """Yield the path of every Reference in the tree, in source order."""
    for current in walk(node):
        if isinstance(current, Reference):
            yield list(current.path)
