"""Command line entry point."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from travel_tables.batch import run_batch
from travel_tables.config import Settings
from travel_tables.dataset import DatasetLoader
from travel_tables.errors import TravelTablesError
from travel_tables.interactive import run_interactive

logger = logging.getLogger(__name__)


def _profile(label: str, seconds: float) -> None:
    logger.debug("%s took %.6fs", label, seconds)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    arg_parser = argparse.ArgumentParser(
        prog="travel-tables",
        description="Load a travel dataset and run queries against it",
    )
    arg_parser.add_argument(
        "dataset_dir",
        type=Path,
        help="Directory containing users.csv, flights.csv, passengers.csv and reservations.csv",
    )
    arg_parser.add_argument(
        "query_file",
        type=Path,
        nargs="?",
        default=None,
        help="File with one query per line; starts interactive mode if omitted",
    )
    arg_parser.add_argument(
        "-o", "--output-dir",
        type=Path,
        help="Directory for command<N>_output.txt files (default: Resultados)",
    )
    arg_parser.add_argument(
        "-e", "--errors-dir",
        type=Path,
        help="Directory for <entity>_errors.csv files (default: the output directory)",
    )
    arg_parser.add_argument(
        "-d", "--delimiter",
        type=str,
        help="Field delimiter of the dataset files (default: ';')",
    )
    arg_parser.add_argument(
        "--overbooking-policy",
        choices=["reject_passenger", "invalidate_flight"],
        help="What to do with passengers beyond a flight's seats",
    )
    arg_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug messages, including rejected lines and timings",
    )

    args = arg_parser.parse_args(argv)

    overrides = {
        "output_dir": args.output_dir,
        "errors_dir": args.errors_dir,
        "delimiter": args.delimiter,
        "overbooking_policy": args.overbooking_policy,
    }
    try:
        settings = Settings(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as e:
        print(f"Error: Invalid configuration: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if not args.dataset_dir.is_dir():
        print(f"Error: Dataset directory not found: {args.dataset_dir}", file=sys.stderr)
        return 1

    try:
        if args.query_file is None:
            with DatasetLoader(args.dataset_dir, settings=settings).load() as database:
                return run_interactive(database)

        run_batch(
            args.dataset_dir,
            args.query_file,
            settings,
            profiler=_profile if args.verbose else None,
        )
    except TravelTablesError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
