"""Query type records and the registry that maps type numbers to them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterable, Iterator

if TYPE_CHECKING:
    from travel_tables.database import Database
    from travel_tables.queries.instance import QueryInstance
    from travel_tables.queries.writer import QueryWriter

# Turns the textual arguments of a line into an immutable argument value;
# raises QueryArgumentError when they are invalid.
ParseArguments = Callable[[list[str]], Any]
GenerateStatistics = Callable[["Database", "list[QueryInstance]"], Any]
FreeStatistics = Callable[[Any], None]
Execute = Callable[["Database", Any, "QueryInstance", "QueryWriter"], None]


@dataclass(frozen=True)
class QueryType:
    """The operations of one kind of query.

    ``generate_statistics`` runs once per batch of same-type instances and its
    result is handed to every ``execute`` call of that batch.
    """

    number: int
    name: str
    parse_arguments: ParseArguments
    execute: Execute
    generate_statistics: GenerateStatistics | None = None
    free_statistics: FreeStatistics | None = None


class QueryTypeRegistry:
    """Maps query type numbers to their definitions."""

    def __init__(self, query_types: Iterable[QueryType] = ()) -> None:
        self._types: dict[int, QueryType] = {}
        for query_type in query_types:
            self.register(query_type)

    def register(self, query_type: QueryType) -> None:
        if query_type.number in self._types:
            raise ValueError(f"Query type {query_type.number} is already registered")
        self._types[query_type.number] = query_type

    def get(self, number: int) -> QueryType | None:
        return self._types.get(number)

    def __contains__(self, number: object) -> bool:
        return number in self._types

    def __iter__(self) -> Iterator[QueryType]:
        return iter(sorted(self._types.values(), key=lambda t: t.number))

    def __len__(self) -> int:
        return len(self._types)
