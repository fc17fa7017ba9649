"""Query 4: reservations of a hotel, most recent first."""

from __future__ import annotations

from travel_tables.database import Database
from travel_tables.entities import Reservation
from travel_tables.errors import QueryArgumentError
from travel_tables.queries.instance import QueryInstance
from travel_tables.queries.query_type import QueryType
from travel_tables.queries.writer import QueryWriter
from travel_tables.types import format_date, format_reservation_id, parse_hotel_id


def parse_arguments(args: list[str]) -> int:
    if len(args) != 1:
        raise QueryArgumentError(f"Query 4 takes one argument, got {len(args)}")
    return parse_hotel_id(args[0])


def generate_statistics(
    database: Database, instances: list[QueryInstance]
) -> dict[int, list[Reservation]]:
    """Sort the reservations of every requested hotel once."""
    return {
        hotel_id: sorted(
            database.reservations.by_hotel(hotel_id),
            key=lambda reservation: (-reservation.begin_date, reservation.id),
        )
        for hotel_id in {instance.arguments for instance in instances}
    }


def execute(
    database: Database,
    statistics: dict[int, list[Reservation]],
    instance: QueryInstance,
    writer: QueryWriter,
) -> None:
    for reservation in statistics.get(instance.arguments, ()):
        writer.write_record(
            [
                ("id", format_reservation_id(reservation.id)),
                ("begin_date", format_date(reservation.begin_date)),
                ("end_date", format_date(reservation.end_date)),
                ("user_id", reservation.user_id),
                ("rating", "" if reservation.rating is None else reservation.rating),
                ("total_price", f"{reservation.total_price:.3f}"),
            ]
        )


QUERY_TYPE = QueryType(
    number=4,
    name="hotel reservations",
    parse_arguments=parse_arguments,
    generate_statistics=generate_statistics,
    free_statistics=dict.clear,
    execute=execute,
)
