"""Travel Tables - an in-memory analytics engine for travel datasets."""

from travel_tables.config import Settings
from travel_tables.database import Database, DatabaseBuilder
from travel_tables.dataset import DatasetLoader, load_dataset
from travel_tables.entities import Flight, Passenger, Reservation, User
from travel_tables.errors import (
    DatasetError,
    ParseError,
    QueryArgumentError,
    QueryFileError,
    TravelTablesError,
)
from travel_tables.pool import Handle, Pool
from travel_tables.queries import (
    QueryInstance,
    QueryInstanceList,
    QueryType,
    QueryTypeRegistry,
    QueryWriter,
    default_registry,
    dispatch,
)
from travel_tables.string_pool import DedupStringPool, StringPool

__all__ = [
    # Main API
    "DatasetLoader",
    "load_dataset",
    "Database",
    "DatabaseBuilder",
    "Settings",
    # Entities
    "User",
    "Flight",
    "Passenger",
    "Reservation",
    # Queries
    "QueryType",
    "QueryTypeRegistry",
    "QueryInstance",
    "QueryInstanceList",
    "QueryWriter",
    "default_registry",
    "dispatch",
    # Allocators
    "Pool",
    "Handle",
    "StringPool",
    "DedupStringPool",
    # Errors
    "TravelTablesError",
    "ParseError",
    "QueryArgumentError",
    "DatasetError",
    "QueryFileError",
]

__version__ = "0.1.0"
