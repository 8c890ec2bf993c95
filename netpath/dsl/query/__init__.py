"""Query path language.

Usage:
    from netpath.dsl.query import QueryExecutor, parse_query_path

    path = parse_query_path("branch-4/blocks[type=Compressor]")
    result = QueryExecutor(network, resolver).execute(path)
"""

from .conditions import evaluate_condition, lookup_field, matches_value
from .errors import (
    EmptyPathError,
    IndexOutOfRangeError,
    InvalidCharacterError,
    InvalidIndexError,
    InvalidTypeError,
    NodeNotFoundError,
    ParseError,
    PropertyNotFoundError,
    QueryError,
    QueryParseError,
    UnexpectedEndError,
)
from .execute import QueryContext, QueryExecutor, UnitFormatter, execute, run_query
from .format import format_query_result
from .parse import parse_filter_expression, parse_query_path
from .schema import (
    FilterOperator,
    FilterPath,
    IndexPath,
    NodePath,
    PropertyPath,
    QueryPath,
    RangePath,
    ScopeResolvePath,
)

__all__ = [
    # Schema
    "QueryPath",
    "NodePath",
    "PropertyPath",
    "IndexPath",
    "RangePath",
    "FilterPath",
    "ScopeResolvePath",
    "FilterOperator",
    # Parsing
    "parse_query_path",
    "parse_filter_expression",
    # Evaluation
    "QueryExecutor",
    "QueryContext",
    "UnitFormatter",
    "execute",
    "run_query",
    "evaluate_condition",
    "matches_value",
    "lookup_field",
    # Output
    "format_query_result",
    # Errors
    "ParseError",
    "EmptyPathError",
    "InvalidIndexError",
    "UnexpectedEndError",
    "InvalidCharacterError",
    "QueryError",
    "NodeNotFoundError",
    "PropertyNotFoundError",
    "IndexOutOfRangeError",
    "InvalidTypeError",
    "QueryParseError",
]
