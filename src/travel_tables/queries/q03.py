"""Query 3: average rating of a hotel."""

from __future__ import annotations

from travel_tables.database import Database
from travel_tables.errors import QueryArgumentError
from travel_tables.queries.instance import QueryInstance
from travel_tables.queries.query_type import QueryType
from travel_tables.queries.writer import QueryWriter
from travel_tables.types import parse_hotel_id


def parse_arguments(args: list[str]) -> int:
    if len(args) != 1:
        raise QueryArgumentError(f"Query 3 takes one argument, got {len(args)}")
    return parse_hotel_id(args[0])


def generate_statistics(
    database: Database, instances: list[QueryInstance]
) -> dict[int, tuple[int, int]]:
    """Return ``hotel_id -> (rating sum, rated reservations)`` for requested hotels."""
    ratings: dict[int, tuple[int, int]] = {}
    for hotel_id in {instance.arguments for instance in instances}:
        total = count = 0
        for reservation in database.reservations.by_hotel(hotel_id):
            if reservation.rating is not None:
                total += reservation.rating
                count += 1
        ratings[hotel_id] = (total, count)
    return ratings


def execute(
    database: Database,
    statistics: dict[int, tuple[int, int]],
    instance: QueryInstance,
    writer: QueryWriter,
) -> None:
    total, count = statistics.get(instance.arguments, (0, 0))
    if count == 0:
        return
    writer.write_record([("rating", f"{total / count:.3f}")])


QUERY_TYPE = QueryType(
    number=3,
    name="hotel rating",
    parse_arguments=parse_arguments,
    generate_statistics=generate_statistics,
    free_statistics=dict.clear,
    execute=execute,
)
