"""Parsing of dataset lines and query lines."""

from travel_tables.parsing.delimited import FixedDelimParser, LineTokenizer
from travel_tables.parsing.query_parser import QueryLine, QueryParser

__all__ = [
    "FixedDelimParser",
    "LineTokenizer",
    "QueryLine",
    "QueryParser",
]
