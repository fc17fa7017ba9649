"""Query 6: busiest airports of a year, by passengers."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass

from travel_tables.database import Database
from travel_tables.errors import QueryArgumentError
from travel_tables.queries.instance import QueryInstance
from travel_tables.queries.query_type import QueryType
from travel_tables.queries.writer import QueryWriter
from travel_tables.types import date_year, datetime_date, format_airport_code, parse_positive_int


@dataclass(frozen=True)
class Arguments:
    year: int
    limit: int


def parse_arguments(args: list[str]) -> Arguments:
    if len(args) != 2:
        raise QueryArgumentError(f"Query 6 takes two arguments, got {len(args)}")
    year = parse_positive_int(args[0])
    if year > 9999:
        raise QueryArgumentError(f"Invalid year: {args[0]!r}")
    return Arguments(year, parse_positive_int(args[1]))


def generate_statistics(
    database: Database, instances: list[QueryInstance]
) -> dict[int, list[tuple[str, int]]]:
    """Rank airports for every requested year.

    Every flight counts its confirmed passengers at both its origin and its
    destination.
    """
    years = {instance.arguments.year for instance in instances}
    counts: dict[int, Counter[str]] = {year: Counter() for year in years}

    for flight in database.flights:
        year = date_year(datetime_date(flight.schedule_departure))
        if year in counts:
            counts[year][format_airport_code(flight.origin)] += flight.confirmed_passengers
            counts[year][format_airport_code(flight.destination)] += flight.confirmed_passengers

    return {
        year: sorted(counter.items(), key=lambda item: (-item[1], item[0]))
        for year, counter in counts.items()
    }


def execute(
    database: Database,
    statistics: dict[int, list[tuple[str, int]]],
    instance: QueryInstance,
    writer: QueryWriter,
) -> None:
    arguments: Arguments = instance.arguments
    for name, passengers in statistics[arguments.year][: arguments.limit]:
        writer.write_record([("name", name), ("passengers", passengers)])


QUERY_TYPE = QueryType(
    number=6,
    name="busiest airports",
    parse_arguments=parse_arguments,
    generate_statistics=generate_statistics,
    free_statistics=dict.clear,
    execute=execute,
)
