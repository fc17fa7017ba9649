"""Query 2: flights and reservations of a user, most recent first."""

from __future__ import annotations

from dataclasses import dataclass

from travel_tables.database import Database
from travel_tables.errors import QueryArgumentError
from travel_tables.queries.instance import QueryInstance
from travel_tables.queries.query_type import QueryType
from travel_tables.queries.writer import QueryWriter
from travel_tables.types import (
    datetime_date,
    format_date,
    format_flight_id,
    format_reservation_id,
    make_datetime,
)

FILTERS = ("flights", "reservations")


@dataclass(frozen=True)
class Arguments:
    user_id: str
    filter: str | None = None  # "flights", "reservations" or both when None


def parse_arguments(args: list[str]) -> Arguments:
    if len(args) == 1:
        return Arguments(args[0])
    if len(args) == 2:
        if args[1] not in FILTERS:
            raise QueryArgumentError(f"Unknown query 2 filter: {args[1]!r}")
        return Arguments(args[0], args[1])
    raise QueryArgumentError(f"Query 2 takes one or two arguments, got {len(args)}")


def execute(
    database: Database, statistics: None, instance: QueryInstance, writer: QueryWriter
) -> None:
    arguments: Arguments = instance.arguments
    user = database.users.get_by_id(arguments.user_id)
    if user is None or not user.active:
        return

    # (datetime, id, type)
    entries: list[tuple[int, str, str]] = []
    if arguments.filter in (None, "flights"):
        for flight_id in database.users.flights_of(user.id):
            flight = database.flights.get_by_id(flight_id)
            if flight is not None:
                entries.append((flight.schedule_departure, format_flight_id(flight.id), "flight"))
    if arguments.filter in (None, "reservations"):
        for reservation_id in database.users.reservations_of(user.id):
            reservation = database.reservations.get_by_id(reservation_id)
            if reservation is not None:
                entries.append(
                    (
                        make_datetime(reservation.begin_date),
                        format_reservation_id(reservation.id),
                        "reservation",
                    )
                )

    entries.sort(key=lambda entry: (-entry[0], entry[1]))
    for moment, entry_id, entry_type in entries:
        fields = [("id", entry_id), ("date", format_date(datetime_date(moment)))]
        if arguments.filter is None:
            fields.append(("type", entry_type))
        writer.write_record(fields)


QUERY_TYPE = QueryType(
    number=2,
    name="user travels",
    parse_arguments=parse_arguments,
    execute=execute,
)
