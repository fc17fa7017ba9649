"""Batch mode: load a dataset, run a query file, write one file per query."""

from __future__ import annotations

import logging
from pathlib import Path

from travel_tables.config import Settings
from travel_tables.dataset import DatasetLoader
from travel_tables.errors import QueryFileError
from travel_tables.queries import (
    QueryInstanceList,
    QueryTypeRegistry,
    QueryWriter,
    default_registry,
    dispatch,
    load_query_file,
)
from travel_tables.queries.dispatcher import Profiler

logger = logging.getLogger(__name__)


def output_path(output_dir: Path, line_number: int) -> Path:
    """Return the result file of the query on a given query file line."""
    return output_dir / f"command{line_number}_output.txt"


def _create_outputs(output_dir: Path, instances: QueryInstanceList) -> list[Path]:
    """Create an empty result file for every parsed query."""
    paths = []
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        for instance in instances:
            path = output_path(output_dir, instance.line_number)
            path.write_text("", encoding="utf-8")
            paths.append(path)
    except OSError as e:
        raise QueryFileError(f"Cannot create query output: {e}") from e
    return paths


def run_batch(
    dataset_dir: Path,
    query_file: Path,
    settings: Settings | None = None,
    registry: QueryTypeRegistry | None = None,
    profiler: Profiler | None = None,
) -> int:
    """Run every query of a query file against a dataset.

    Returns:
        The number of queries that were run.

    Raises:
        DatasetError: If the dataset cannot be loaded.
        QueryFileError: If the query file or an output file is unusable.
    """
    settings = settings if settings is not None else Settings()
    registry = registry if registry is not None else default_registry()

    with DatasetLoader(dataset_dir, settings=settings).load() as database:
        instances = load_query_file(query_file, registry)
        logger.info("Parsed %d queries from %s", len(instances), query_file)

        paths = _create_outputs(settings.output_dir, instances)
        writers = [QueryWriter(formatted=instance.formatted) for instance in instances]
        dispatch(database, instances, writers, registry, profiler)

        try:
            for path, writer in zip(paths, writers):
                with open(path, "w", encoding="utf-8", newline="\n") as stream:
                    stream.write(writer.getvalue())
        except OSError as e:
            raise QueryFileError(f"Cannot write query output: {e}") from e

    return len(instances)
