"""Query 1: summary of a single user, flight or reservation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from travel_tables.database import Database
from travel_tables.errors import ParseError, QueryArgumentError
from travel_tables.queries.instance import QueryInstance
from travel_tables.queries.query_type import QueryType
from travel_tables.queries.writer import QueryWriter
from travel_tables.types import (
    age_at,
    datetime_diff,
    format_airport_code,
    format_country_code,
    format_date,
    format_datetime,
    format_hotel_id,
    format_includes_breakfast,
    parse_flight_id,
    parse_reservation_id,
)


class EntityKind(Enum):
    USER = "user"
    FLIGHT = "flight"
    RESERVATION = "reservation"


@dataclass(frozen=True)
class Arguments:
    kind: EntityKind
    key: str | int


@dataclass
class UserSummary:
    number_of_flights: int = 0
    number_of_reservations: int = 0
    total_spent: float = 0.0


def parse_arguments(args: list[str]) -> Arguments:
    """Classify the id: all digits is a flight, ``Book...`` a reservation."""
    if len(args) != 1:
        raise QueryArgumentError(f"Query 1 takes one argument, got {len(args)}")
    text = args[0]
    if text.isascii() and text.isdigit():
        try:
            return Arguments(EntityKind.FLIGHT, parse_flight_id(text))
        except ParseError:
            pass
    elif text.startswith("Book"):
        try:
            return Arguments(EntityKind.RESERVATION, parse_reservation_id(text))
        except ParseError:
            pass
    return Arguments(EntityKind.USER, text)


def summarize_user(database: Database, user_id: str) -> UserSummary:
    summary = UserSummary(number_of_flights=len(database.users.flights_of(user_id)))
    for reservation_id in database.users.reservations_of(user_id):
        reservation = database.reservations.get_by_id(reservation_id)
        if reservation is None:
            continue
        summary.number_of_reservations += 1
        summary.total_spent += reservation.total_price
    return summary


def generate_statistics(
    database: Database, instances: list[QueryInstance]
) -> dict[str, UserSummary]:
    """Summarize every user asked about in the batch, once per user."""
    summaries: dict[str, UserSummary] = {}
    for instance in instances:
        arguments: Arguments = instance.arguments
        if arguments.kind is EntityKind.USER and arguments.key not in summaries:
            summaries[arguments.key] = summarize_user(database, arguments.key)  # type: ignore[index]
    return summaries


def _write_user(
    database: Database, summaries: dict[str, UserSummary], user_id: str, writer: QueryWriter
) -> None:
    user = database.users.get_by_id(user_id)
    if user is None or not user.active:
        return
    summary = summaries.get(user_id) or summarize_user(database, user_id)
    writer.write_record(
        [
            ("name", user.name),
            ("sex", user.sex.value),
            ("age", age_at(user.birth_date, database.reference_date)),
            ("country_code", format_country_code(user.country_code)),
            ("passport", user.passport),
            ("number_of_flights", summary.number_of_flights),
            ("number_of_reservations", summary.number_of_reservations),
            ("total_spent", f"{summary.total_spent:.3f}"),
        ]
    )


def _write_flight(database: Database, flight_id: int, writer: QueryWriter) -> None:
    flight = database.flights.get_by_id(flight_id)
    if flight is None:
        return
    writer.write_record(
        [
            ("airline", flight.airline),
            ("plane_model", flight.plane_model),
            ("origin", format_airport_code(flight.origin)),
            ("destination", format_airport_code(flight.destination)),
            ("schedule_departure_date", format_datetime(flight.schedule_departure)),
            ("schedule_arrival_date", format_datetime(flight.schedule_arrival)),
            ("passengers", flight.confirmed_passengers),
            ("delay", datetime_diff(flight.real_departure, flight.schedule_departure)),
        ]
    )


def _write_reservation(database: Database, reservation_id: int, writer: QueryWriter) -> None:
    reservation = database.reservations.get_by_id(reservation_id)
    if reservation is None:
        return
    writer.write_record(
        [
            ("hotel_id", format_hotel_id(reservation.hotel_id)),
            ("hotel_name", database.reservations.hotel_name(reservation.hotel_id)),
            ("hotel_stars", reservation.hotel_stars),
            ("begin_date", format_date(reservation.begin_date)),
            ("end_date", format_date(reservation.end_date)),
            ("includes_breakfast", format_includes_breakfast(reservation.includes_breakfast)),
            ("nights", reservation.nights),
            ("total_price", f"{reservation.total_price:.3f}"),
        ]
    )


def execute(
    database: Database,
    statistics: dict[str, UserSummary],
    instance: QueryInstance,
    writer: QueryWriter,
) -> None:
    arguments: Arguments = instance.arguments
    if arguments.kind is EntityKind.FLIGHT:
        _write_flight(database, arguments.key, writer)  # type: ignore[arg-type]
    elif arguments.kind is EntityKind.RESERVATION:
        _write_reservation(database, arguments.key, writer)  # type: ignore[arg-type]
    else:
        _write_user(database, statistics, arguments.key, writer)  # type: ignore[arg-type]


QUERY_TYPE = QueryType(
    number=1,
    name="entity summary",
    parse_arguments=parse_arguments,
    generate_statistics=generate_statistics,
    execute=execute,
)
