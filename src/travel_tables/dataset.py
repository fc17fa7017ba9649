"""Loading of the four dataset files into a Database."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Sequence, TextIO

from travel_tables.config import Settings
from travel_tables.database import Database, DatabaseBuilder
from travel_tables.entities import (
    FLIGHT_GRAMMAR,
    PASSENGER_GRAMMAR,
    RESERVATION_GRAMMAR,
    USER_GRAMMAR,
    Flight,
    Passenger,
    Reservation,
    User,
)
from travel_tables.errors import DatasetError, ParseError
from travel_tables.managers import EntityManager
from travel_tables.parsing.delimited import FixedDelimParser, LineTokenizer, TokenCallback
from travel_tables.types import parse_date

logger = logging.getLogger(__name__)


class ErrorOutput:
    """An ``<entity>_errors.csv`` file, created on the first reported line.

    The first line written is the header of the source file.
    """

    def __init__(self, path: Path, header: str | None = None) -> None:
        self.path = path
        self.header = header
        self.count = 0
        self._file: TextIO | None = None

    def _open(self) -> TextIO:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            file = open(self.path, "w", encoding="utf-8", newline="\n")
        except OSError as e:
            raise DatasetError(f"Cannot create error file {self.path}: {e}") from e
        if self.header is not None:
            file.write(self.header + "\n")
        return file

    def write(self, line: str) -> None:
        """Append an offending input line verbatim."""
        if self._file is None:
            self._file = self._open()
        self._file.write(line + "\n")
        self.count += 1

    @property
    def created(self) -> bool:
        return self._file is not None

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> ErrorOutput:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()


class DatasetLoader:
    """Loads ``users.csv``, ``flights.csv``, ``passengers.csv`` and
    ``reservations.csv`` from a dataset directory."""

    def __init__(
        self,
        dataset_dir: Path,
        errors_dir: Path | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the loader.

        Args:
            dataset_dir: Directory holding the four CSV files.
            errors_dir: Where ``<entity>_errors.csv`` files are written.
                Defaults to the configured errors directory.
            settings: Runtime configuration; read from the environment if omitted.
        """
        self.settings = settings if settings is not None else Settings()
        self.dataset_dir = Path(dataset_dir)
        self.errors_dir = (
            Path(errors_dir) if errors_dir is not None else self.settings.effective_errors_dir
        )
        self.error_counts: dict[str, int] = {}
        self.line_counts: dict[str, int] = {}

    def load(self) -> Database:
        """Load every file, reconcile and return the frozen database.

        Raises:
            DatasetError: If a dataset file cannot be read or an error file
                cannot be created.
        """
        builder = DatabaseBuilder(
            self.settings.pool_block_size, parse_date(self.settings.reference_date)
        )
        try:
            # Later files resolve references into earlier ones
            self._load_file("users", USER_GRAMMAR, User, builder.users, builder.users.check_unique)
            self._load_file(
                "flights", FLIGHT_GRAMMAR, Flight, builder.flights, builder.flights.check_unique
            )
            self._load_file(
                "passengers",
                PASSENGER_GRAMMAR,
                Passenger,
                builder.passengers,
                lambda passenger: self._check_passenger(builder, passenger),
            )
            self._load_file(
                "reservations",
                RESERVATION_GRAMMAR,
                Reservation,
                builder.reservations,
                lambda reservation: self._check_reservation(builder, reservation),
            )
            return builder.freeze()
        except BaseException:
            builder.close()
            raise

    def _check_passenger(self, builder: DatabaseBuilder, passenger: Passenger) -> None:
        flight = builder.flights.get_by_id(passenger.flight_id)
        if flight is None:
            raise ParseError(f"Unknown flight {passenger.flight_id}")
        if builder.users.get_by_id(passenger.user_id) is None:
            raise ParseError(f"Unknown user {passenger.user_id!r}")
        builder.passengers.check_unique(passenger)
        if (
            self.settings.overbooking_policy == "reject_passenger"
            and builder.passengers.count_for_flight(flight.id) >= flight.total_seats
        ):
            raise ParseError(f"Flight {flight.id} has no free seats")

    def _check_reservation(self, builder: DatabaseBuilder, reservation: Reservation) -> None:
        if builder.users.get_by_id(reservation.user_id) is None:
            raise ParseError(f"Unknown user {reservation.user_id!r}")
        builder.reservations.check_unique(reservation)

    def _open(self, name: str) -> TextIO:
        path = self.dataset_dir / f"{name}.csv"
        try:
            return open(path, encoding="utf-8")
        except OSError as e:
            raise DatasetError(f"Cannot read dataset file {path}: {e}") from e

    def _load_file(
        self,
        name: str,
        grammar: Sequence[TokenCallback],
        factory: Callable[[], Any],
        manager: EntityManager[Any],
        check: Callable[[Any], None],
    ) -> None:
        """Load one file, reporting every rejected line to its error file."""
        parser = FixedDelimParser(self.settings.delimiter, grammar)
        total = 0

        with self._open(name) as stream:
            tokenizer = LineTokenizer(stream)
            lines = iter(tokenizer)
            header = next(lines, None)

            with ErrorOutput(self.errors_dir / f"{name}_errors.csv", header) as errors:
                for line in lines:
                    if not line:
                        continue
                    total += 1
                    entity = factory()
                    try:
                        parser.parse(line, entity)
                        entity.check_invariants()
                        check(entity)
                    except ParseError as e:
                        logger.debug("%s line %d rejected: %s", name, tokenizer.line_number, e)
                        entity.invalidate()
                        errors.write(line)
                    manager.add(entity)

                self.error_counts[name] = errors.count

        self.line_counts[name] = total
        logger.info("Loaded %s: %d lines, %d rejected", name, total, self.error_counts[name])


def load_dataset(
    dataset_dir: Path, errors_dir: Path | None = None, settings: Settings | None = None
) -> Database:
    """Load a dataset directory into a frozen Database."""
    return DatasetLoader(dataset_dir, errors_dir, settings).load()
