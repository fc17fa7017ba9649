"""Query engine: query types, instances, writers and dispatch."""

from travel_tables.queries import q01, q02, q03, q04, q05, q06, q07, q08, q09, q10
from travel_tables.queries.dispatcher import dispatch
from travel_tables.queries.instance import (
    QueryInstance,
    QueryInstanceList,
    load_query_file,
    parse_query_line,
    parse_query_lines,
)
from travel_tables.queries.query_type import QueryType, QueryTypeRegistry
from travel_tables.queries.writer import QueryWriter

QUERY_MODULES = (q01, q02, q03, q04, q05, q06, q07, q08, q09, q10)


def default_registry() -> QueryTypeRegistry:
    """Return a registry holding the ten built-in query types."""
    return QueryTypeRegistry(module.QUERY_TYPE for module in QUERY_MODULES)


__all__ = [
    "QueryInstance",
    "QueryInstanceList",
    "QueryType",
    "QueryTypeRegistry",
    "QueryWriter",
    "default_registry",
    "dispatch",
    "load_query_file",
    "parse_query_line",
    "parse_query_lines",
]
