"""Runs a list of query instances, one statistics pass per query type."""

from __future__ import annotations

import logging
import time
from typing import Callable, Sequence

from travel_tables.database import Database
from travel_tables.queries.instance import QueryInstanceList
from travel_tables.queries.query_type import QueryTypeRegistry
from travel_tables.queries.writer import QueryWriter

logger = logging.getLogger(__name__)

# Receives a phase label and its duration in seconds
Profiler = Callable[[str, float], None]


def dispatch(
    database: Database,
    instances: QueryInstanceList,
    writers: Sequence[QueryWriter],
    registry: QueryTypeRegistry,
    profiler: Profiler | None = None,
) -> None:
    """Execute every instance, writing instance k's output to ``writers[k]``.

    Instances are grouped by type. A failing statistics pass skips its whole
    group; a failing instance is skipped alone. Both are logged.

    Args:
        database: The frozen database to query.
        instances: Parsed instances, in input order.
        writers: One writer per instance, in the same order.
        registry: Query type definitions.
        profiler: Optional callback receiving the duration of each phase.
    """
    if len(writers) != len(instances):
        raise ValueError(f"Expected {len(instances)} writers, got {len(writers)}")

    for type_number, group in instances.iter_by_type():
        query_type = registry.get(type_number)
        if query_type is None:
            logger.error("No query type %d registered; skipping %d queries", type_number, len(group))
            continue

        statistics = None
        if query_type.generate_statistics is not None:
            started = time.perf_counter()
            try:
                statistics = query_type.generate_statistics(database, group)
            except Exception:
                logger.exception("Statistics for query type %d failed", type_number)
                continue
            if profiler is not None:
                profiler(f"query {type_number} statistics", time.perf_counter() - started)

        try:
            for instance in group:
                started = time.perf_counter()
                try:
                    query_type.execute(database, statistics, instance, writers[instance.index])
                except Exception:
                    logger.exception(
                        "Query %d on line %d failed", type_number, instance.line_number
                    )
                    continue
                if profiler is not None:
                    profiler(
                        f"query {type_number} line {instance.line_number}",
                        time.perf_counter() - started,
                    )
        finally:
            if query_type.free_statistics is not None:
                query_type.free_statistics(statistics)
