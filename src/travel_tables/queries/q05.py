"""Query 5: flights departing from an airport within a time window."""

from __future__ import annotations

from dataclasses import dataclass

from travel_tables.database import Database
from travel_tables.errors import QueryArgumentError
from travel_tables.queries.instance import QueryInstance
from travel_tables.queries.query_type import QueryType
from travel_tables.queries.writer import QueryWriter
from travel_tables.types import (
    format_airport_code,
    format_datetime,
    format_flight_id,
    parse_airport_code,
    parse_datetime,
)


@dataclass(frozen=True)
class Arguments:
    airport: int
    begin: int
    end: int


def parse_arguments(args: list[str]) -> Arguments:
    if len(args) != 3:
        raise QueryArgumentError(f"Query 5 takes three arguments, got {len(args)}")
    return Arguments(
        airport=parse_airport_code(args[0]),
        begin=parse_datetime(args[1]),
        end=parse_datetime(args[2]),
    )


def execute(
    database: Database, statistics: None, instance: QueryInstance, writer: QueryWriter
) -> None:
    arguments: Arguments = instance.arguments
    flights = [
        flight
        for flight in database.flights.by_origin(arguments.airport)
        if arguments.begin <= flight.schedule_departure <= arguments.end
    ]
    flights.sort(key=lambda flight: (-flight.schedule_departure, flight.id))

    for flight in flights:
        writer.write_record(
            [
                ("id", format_flight_id(flight.id)),
                ("schedule_departure_date", format_datetime(flight.schedule_departure)),
                ("destination", format_airport_code(flight.destination)),
                ("airline", flight.airline),
                ("plane_model", flight.plane_model),
            ]
        )


QUERY_TYPE = QueryType(
    number=5,
    name="airport departures",
    parse_arguments=parse_arguments,
    execute=execute,
)
