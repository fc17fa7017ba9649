"""Query 10: activity counts per year, month or day."""

from __future__ import annotations

from dataclasses import dataclass, field

from travel_tables.database import Database
from travel_tables.errors import QueryArgumentError
from travel_tables.queries.instance import QueryInstance
from travel_tables.queries.query_type import QueryType
from travel_tables.queries.writer import QueryWriter
from travel_tables.types import (
    date_day,
    date_month,
    date_year,
    datetime_date,
    parse_positive_int,
)

# A scope is () for all years, (year,) for one year, (year, month) for a month
Scope = tuple[int, ...]


@dataclass
class Bucket:
    users: int = 0
    flights: int = 0
    passengers: int = 0
    unique_passengers: int = 0
    reservations: int = 0


@dataclass
class ScopeStatistics:
    buckets: dict[int, Bucket] = field(default_factory=dict)

    def bucket(self, key: int) -> Bucket:
        return self.buckets.setdefault(key, Bucket())


def parse_arguments(args: list[str]) -> Scope:
    if len(args) > 2:
        raise QueryArgumentError(f"Query 10 takes at most two arguments, got {len(args)}")
    scope = tuple(parse_positive_int(arg) for arg in args)
    if scope and not 1 <= scope[0] <= 9999:
        raise QueryArgumentError(f"Invalid year: {args[0]!r}")
    if len(scope) == 2 and not 1 <= scope[1] <= 12:
        raise QueryArgumentError(f"Invalid month: {args[1]!r}")
    return scope


def bucket_key(scope: Scope, date: int) -> int | None:
    """Return the year, month or day bucket of a date, or None if out of scope."""
    if not scope:
        return date_year(date)
    if date_year(date) != scope[0]:
        return None
    if len(scope) == 1:
        return date_month(date)
    if date_month(date) != scope[1]:
        return None
    return date_day(date)


def generate_statistics(
    database: Database, instances: list[QueryInstance]
) -> dict[Scope, ScopeStatistics]:
    """Count events for every requested scope in one pass over the database."""
    scopes: dict[Scope, ScopeStatistics] = {
        instance.arguments: ScopeStatistics() for instance in instances
    }

    def each_bucket(date: int):
        for scope, stats in scopes.items():
            key = bucket_key(scope, date)
            if key is not None:
                yield scope, key, stats.bucket(key)

    for user in database.users:
        for _, _, bucket in each_bucket(datetime_date(user.account_creation)):
            bucket.users += 1

        counted: set[tuple[Scope, int]] = set()
        for flight_id in database.users.flights_of(user.id):
            flight = database.flights.get_by_id(flight_id)
            if flight is None:
                continue
            for scope, key, bucket in each_bucket(datetime_date(flight.schedule_departure)):
                bucket.passengers += 1
                if (scope, key) not in counted:
                    counted.add((scope, key))
                    bucket.unique_passengers += 1

    for flight in database.flights:
        for _, _, bucket in each_bucket(datetime_date(flight.schedule_departure)):
            bucket.flights += 1

    for reservation in database.reservations:
        for _, _, bucket in each_bucket(reservation.begin_date):
            bucket.reservations += 1

    return scopes


def execute(
    database: Database,
    statistics: dict[Scope, ScopeStatistics],
    instance: QueryInstance,
    writer: QueryWriter,
) -> None:
    scope: Scope = instance.arguments
    label = ("year", "month", "day")[len(scope)]
    for key, bucket in sorted(statistics[scope].buckets.items()):
        writer.write_record(
            [
                (label, key),
                ("users", bucket.users),
                ("flights", bucket.flights),
                ("passengers", bucket.passengers),
                ("unique_passengers", bucket.unique_passengers),
                ("reservations", bucket.reservations),
            ]
        )


QUERY_TYPE = QueryType(
    number=10,
    name="activity summary",
    parse_arguments=parse_arguments,
    generate_statistics=generate_statistics,
    free_statistics=dict.clear,
    execute=execute,
)
