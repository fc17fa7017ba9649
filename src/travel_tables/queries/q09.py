"""Query 9: active users whose name starts with a prefix."""

from __future__ import annotations

import unicodedata

from travel_tables.database import Database
from travel_tables.entities import User
from travel_tables.errors import QueryArgumentError
from travel_tables.queries.instance import QueryInstance
from travel_tables.queries.query_type import QueryType
from travel_tables.queries.writer import QueryWriter


def parse_arguments(args: list[str]) -> str:
    if len(args) != 1:
        raise QueryArgumentError(f"Query 9 takes one argument, got {len(args)}")
    return args[0]


def collation_key(text: str) -> tuple[str, str]:
    """Dictionary-like ordering: accents, case and punctuation only break ties."""
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(c for c in decomposed if not unicodedata.combining(c))
    return ("".join(c for c in base.casefold() if c.isalnum()), text)


def generate_statistics(database: Database, instances: list[QueryInstance]) -> list[User]:
    """Sort the active users once for the whole batch."""
    users = [user for user in database.users if user.active]
    users.sort(key=lambda user: (collation_key(user.name), collation_key(user.id)))
    return users


def execute(
    database: Database, statistics: list[User], instance: QueryInstance, writer: QueryWriter
) -> None:
    prefix: str = instance.arguments
    for user in statistics:
        if user.name.startswith(prefix):
            writer.write_record([("id", user.id), ("name", user.name)])


QUERY_TYPE = QueryType(
    number=9,
    name="users by name prefix",
    parse_arguments=parse_arguments,
    generate_statistics=generate_statistics,
    free_statistics=list.clear,
    execute=execute,
)
