"""Interactive mode: type query lines and see their results."""

from __future__ import annotations

import readline  # noqa: F401 - enables line editing in input()
import sys
from typing import Iterable, Iterator

from travel_tables.database import Database
from travel_tables.parsing.query_parser import QueryParser
from travel_tables.queries import (
    QueryInstanceList,
    QueryTypeRegistry,
    QueryWriter,
    default_registry,
    dispatch,
    parse_query_line,
)

HELP_TEXT = """\
Queries are typed as in a query file, e.g.:
  1 <user id>              summary of a user, flight or reservation
  2F <user id> flights     add F for record style output
  5 LIS "2023/01/01 00:00:00" "2023/12/31 23:59:59"
Type 'exit' or 'quit' to leave."""


def _prompt_lines() -> Iterator[str]:
    while True:
        try:
            yield input("> ")
        except EOFError:
            print()
            return


def run_query(
    database: Database,
    line: str,
    registry: QueryTypeRegistry,
    parser: QueryParser | None = None,
) -> QueryWriter | None:
    """Run a single query line; return its in-memory writer, or None if it is invalid."""
    instance = parse_query_line(line, 1, registry, parser)
    if instance is None:
        return None
    writer = QueryWriter(formatted=instance.formatted)
    dispatch(database, QueryInstanceList([instance]), [writer], registry)
    return writer


def run_interactive(
    database: Database,
    registry: QueryTypeRegistry | None = None,
    lines: Iterable[str] | None = None,
) -> int:
    """Read query lines until exit, printing each result."""
    registry = registry if registry is not None else default_registry()
    parser = QueryParser()

    print("Travel Tables - type 'help' for examples, 'exit' to quit.")
    for raw in lines if lines is not None else _prompt_lines():
        line = raw.strip()
        if not line:
            continue
        if line in ("exit", "quit"):
            break
        if line == "help":
            print(HELP_TEXT)
            continue

        writer = run_query(database, line, registry, parser)
        if writer is None:
            print(f"Error: invalid query: {line}", file=sys.stderr)
            continue
        output = writer.getvalue()
        if output:
            print(output, end="")
        else:
            print("(no results)")

    return 0
