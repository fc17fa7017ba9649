"""Parsed query instances and the list that groups them by type."""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from operator import attrgetter
from pathlib import Path
from typing import Any, Iterable, Iterator

from travel_tables.errors import ParseError, QueryFileError
from travel_tables.parsing.delimited import LineTokenizer
from travel_tables.parsing.query_parser import QueryParser
from travel_tables.queries.query_type import QueryTypeRegistry

logger = logging.getLogger(__name__)


@dataclass
class QueryInstance:
    """One query to run, with its arguments already parsed."""

    type_number: int
    formatted: bool
    arguments: Any
    index: int = 0  # Position in the instance list, in input order
    line_number: int = 0  # 1-based line of the query file


class QueryInstanceList:
    """Append-only list of query instances."""

    def __init__(self, instances: Iterable[QueryInstance] = ()) -> None:
        self._instances: list[QueryInstance] = []
        for instance in instances:
            self.append(instance)

    def append(self, instance: QueryInstance) -> QueryInstance:
        """Append an instance, recording its position."""
        instance.index = len(self._instances)
        self._instances.append(instance)
        return instance

    def __iter__(self) -> Iterator[QueryInstance]:
        """Iterate in insertion order."""
        return iter(self._instances)

    def __len__(self) -> int:
        return len(self._instances)

    def __getitem__(self, index: int) -> QueryInstance:
        return self._instances[index]

    def iter_by_type(self) -> Iterator[tuple[int, list[QueryInstance]]]:
        """Yield ``(type_number, group)`` for every run of same-type instances.

        Groups come in type order; each group keeps insertion order.
        """
        ordered = sorted(self._instances, key=attrgetter("type_number", "index"))
        for type_number, group in itertools.groupby(ordered, key=attrgetter("type_number")):
            yield type_number, list(group)


def parse_query_line(
    line: str,
    line_number: int,
    registry: QueryTypeRegistry,
    parser: QueryParser | None = None,
) -> QueryInstance | None:
    """Parse one query line, returning None if it must be dropped."""
    if parser is None:
        parser = QueryParser()

    try:
        query_line = parser.parse(line)
    except SyntaxError as e:
        logger.debug("Query line %d dropped: %s", line_number, e)
        return None

    query_type = registry.get(query_line.type_number)
    if query_type is None:
        logger.debug("Query line %d dropped: unknown type %d", line_number, query_line.type_number)
        return None

    try:
        arguments = query_type.parse_arguments(query_line.arguments)
    except ParseError as e:
        logger.debug("Query line %d dropped: %s", line_number, e)
        return None

    return QueryInstance(
        type_number=query_line.type_number,
        formatted=query_line.formatted,
        arguments=arguments,
        line_number=line_number,
    )


def parse_query_lines(lines: Iterable[str], registry: QueryTypeRegistry) -> QueryInstanceList:
    """Parse every line, keeping only the valid queries."""
    parser = QueryParser()
    instances = QueryInstanceList()
    for line_number, line in enumerate(lines, start=1):
        instance = parse_query_line(line, line_number, registry, parser)
        if instance is not None:
            instances.append(instance)
    return instances


def load_query_file(path: Path, registry: QueryTypeRegistry) -> QueryInstanceList:
    """Parse a query file.

    Raises:
        QueryFileError: If the file cannot be read.
    """
    try:
        with open(path, encoding="utf-8") as stream:
            return parse_query_lines(LineTokenizer(stream), registry)
    except OSError as e:
        raise QueryFileError(f"Cannot read query file {path}: {e}") from e
