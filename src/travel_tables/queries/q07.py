"""Query 7: airports with the largest median departure delay."""

from __future__ import annotations

from travel_tables.database import Database
from travel_tables.errors import QueryArgumentError
from travel_tables.queries.instance import QueryInstance
from travel_tables.queries.query_type import QueryType
from travel_tables.queries.writer import QueryWriter
from travel_tables.types import datetime_diff, format_airport_code, parse_positive_int


def parse_arguments(args: list[str]) -> int:
    if len(args) != 1:
        raise QueryArgumentError(f"Query 7 takes one argument, got {len(args)}")
    return parse_positive_int(args[0])


def median(values: list[int]) -> int:
    """Median of a non-empty list; the mean of the middle pair is truncated."""
    ordered = sorted(values)
    middle = len(ordered) // 2
    if len(ordered) % 2:
        return ordered[middle]
    return int((ordered[middle - 1] + ordered[middle]) / 2)


def generate_statistics(
    database: Database, instances: list[QueryInstance]
) -> list[tuple[str, int]]:
    """Rank every origin airport by its median delay, once for the batch."""
    delays: dict[int, list[int]] = {}
    for flight in database.flights:
        delays.setdefault(flight.origin, []).append(
            datetime_diff(flight.real_departure, flight.schedule_departure)
        )

    ranking = [(format_airport_code(airport), median(values)) for airport, values in delays.items()]
    ranking.sort(key=lambda item: (-item[1], item[0]))
    return ranking


def execute(
    database: Database,
    statistics: list[tuple[str, int]],
    instance: QueryInstance,
    writer: QueryWriter,
) -> None:
    for name, delay in statistics[: instance.arguments]:
        writer.write_record([("name", name), ("median", delay)])


QUERY_TYPE = QueryType(
    number=7,
    name="median delays",
    parse_arguments=parse_arguments,
    generate_statistics=generate_statistics,
    free_statistics=list.clear,
    execute=execute,
)
