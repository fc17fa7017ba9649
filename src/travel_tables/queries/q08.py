"""Query 8: revenue of a hotel between two dates."""

from __future__ import annotations

from dataclasses import dataclass

from travel_tables.database import Database
from travel_tables.entities import Reservation
from travel_tables.errors import QueryArgumentError
from travel_tables.queries.instance import QueryInstance
from travel_tables.queries.query_type import QueryType
from travel_tables.queries.writer import QueryWriter
from travel_tables.types import date_ordinal, parse_date, parse_hotel_id


@dataclass(frozen=True)
class Arguments:
    hotel_id: int
    begin: int
    end: int


def parse_arguments(args: list[str]) -> Arguments:
    if len(args) != 3:
        raise QueryArgumentError(f"Query 8 takes three arguments, got {len(args)}")
    return Arguments(parse_hotel_id(args[0]), parse_date(args[1]), parse_date(args[2]))


def reservation_revenue(reservation: Reservation, arguments: Arguments) -> int:
    """Price of the reservation's days inside ``[begin, end]``, both ends included."""
    first = max(date_ordinal(reservation.begin_date), date_ordinal(arguments.begin))
    last = min(date_ordinal(reservation.end_date), date_ordinal(arguments.end))
    if last < first:
        return 0
    return reservation.price_per_night * (last - first + 1)


def generate_statistics(
    database: Database, instances: list[QueryInstance]
) -> dict[Arguments, int]:
    """Compute the revenue of every requested range in one pass over reservations."""
    revenues: dict[Arguments, int] = {instance.arguments: 0 for instance in instances}
    by_hotel: dict[int, list[Arguments]] = {}
    for arguments in revenues:
        by_hotel.setdefault(arguments.hotel_id, []).append(arguments)

    for reservation in database.reservations:
        for arguments in by_hotel.get(reservation.hotel_id, ()):
            revenues[arguments] += reservation_revenue(reservation, arguments)
    return revenues


def execute(
    database: Database,
    statistics: dict[Arguments, int],
    instance: QueryInstance,
    writer: QueryWriter,
) -> None:
    writer.write_record([("revenue", statistics[instance.arguments])])


QUERY_TYPE = QueryType(
    number=8,
    name="hotel revenue",
    parse_arguments=parse_arguments,
    generate_statistics=generate_statistics,
    free_statistics=dict.clear,
    execute=execute,
)
