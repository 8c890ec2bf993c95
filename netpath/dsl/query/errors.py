"""Errors raised while parsing and evaluating query paths."""

from __future__ import annotations


class ParseError(ValueError):
    """A query path string could not be parsed."""


class EmptyPathError(ParseError):
    def __init__(self) -> None:
        super().__init__("Query path cannot be empty")


class InvalidIndexError(ParseError):
    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Invalid index: {detail}")


class UnexpectedEndError(ParseError):
    def __init__(self) -> None:
        super().__init__("Unexpected end of path")


class InvalidCharacterError(ParseError):
    def __init__(self, char: str, position: int) -> None:
        self.char = char
        self.position = position
        super().__init__(f"Invalid character '{char}' at position {position}")


class QueryError(Exception):
    """A parsed query could not be evaluated against the network."""


class NodeNotFoundError(QueryError):
    def __init__(self, node_id: str) -> None:
        self.node_id = node_id
        super().__init__(f"Node '{node_id}' not found")


class PropertyNotFoundError(QueryError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Property '{name}' not found")


class IndexOutOfRangeError(QueryError):
    def __init__(self, index: int, length: int) -> None:
        self.index = index
        self.length = length
        super().__init__(f"Index {index} out of range (length: {length})")


class InvalidTypeError(QueryError):
    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Invalid type: {detail}")


class QueryParseError(QueryError):
    """Wraps a ParseError raised while running a query string."""

    def __init__(self, error: ParseError) -> None:
        self.error = error
        super().__init__(f"Parse error: {error}")
