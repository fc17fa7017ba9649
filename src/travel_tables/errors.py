"""Exception hierarchy for Travel Tables."""

from __future__ import annotations

from enum import Enum


class TravelTablesError(Exception):
    """Base class for all errors raised by this package."""


class ParseError(TravelTablesError, ValueError):
    """A field or value failed to parse or validate."""


class DelimitedErrorKind(Enum):
    """Structural failures of a delimited line."""

    TOO_MANY = "too many tokens"
    NOT_ENOUGH = "not enough tokens"


class DelimitedParseError(ParseError):
    """A delimited line had the wrong number of tokens."""

    def __init__(self, kind: DelimitedErrorKind, expected: int, found: int) -> None:
        super().__init__(f"{kind.value}: expected {expected}, found {found}")
        self.kind = kind
        self.expected = expected
        self.found = found


class QueryArgumentError(ParseError):
    """The arguments of a query line are invalid for its type."""


class PoolError(TravelTablesError):
    """Invalid use of a pool allocator."""


class FrozenError(TravelTablesError):
    """Mutation attempted on a frozen structure."""


class DatasetError(TravelTablesError):
    """Fatal failure while loading a dataset."""


class QueryFileError(TravelTablesError):
    """Fatal failure while reading a query file or creating its outputs."""
