"""The in-memory travel database and its two-phase lifecycle."""

from __future__ import annotations

import logging
from typing import Any

from travel_tables.entities import Flight
from travel_tables.errors import FrozenError
from travel_tables.managers import FlightManager, PassengerManager, ReservationManager, UserManager
from travel_tables.pool import Pool
from travel_tables.types import make_date

logger = logging.getLogger(__name__)

DEFAULT_REFERENCE_DATE = make_date(2023, 10, 1)


class Database:
    """Read-only view over the four entity managers.

    Instances are produced by ``DatabaseBuilder.freeze``.
    """

    def __init__(
        self,
        users: UserManager,
        flights: FlightManager,
        passengers: PassengerManager,
        reservations: ReservationManager,
        reference_date: int = DEFAULT_REFERENCE_DATE,
    ) -> None:
        self._users = users
        self._flights = flights
        self._passengers = passengers
        self._reservations = reservations
        self._reference_date = reference_date

    @property
    def users(self) -> UserManager:
        return self._users

    @property
    def flights(self) -> FlightManager:
        return self._flights

    @property
    def passengers(self) -> PassengerManager:
        return self._passengers

    @property
    def reservations(self) -> ReservationManager:
        return self._reservations

    @property
    def reference_date(self) -> int:
        """The date treated as "today", e.g. for ages."""
        return self._reference_date

    def close(self) -> None:
        """Release every manager, in reverse load order."""
        self._reservations.close()
        self._passengers.close()
        self._flights.close()
        self._users.close()

    def __enter__(self) -> Database:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()


class DatabaseBuilder:
    """Mutable database used during the load phase."""

    def __init__(
        self,
        block_size: int = Pool.DEFAULT_BLOCK_CAPACITY,
        reference_date: int = DEFAULT_REFERENCE_DATE,
    ) -> None:
        self.reference_date = reference_date
        self.users = UserManager(block_size)
        self.flights = FlightManager(block_size)
        self.passengers = PassengerManager(block_size)
        self.reservations = ReservationManager(block_size)
        self._reconciled = False
        self._consumed = False

    def _check_usable(self) -> None:
        if self._consumed:
            raise FrozenError("This builder has already been frozen")

    def invalidate_flight(self, flight: Flight) -> None:
        """Invalidate a flight and unlink all of its passengers."""
        self._check_usable()
        for user_id in self.flights.passengers_of(flight.id):
            self.users.detach_flight(user_id, flight.id)
        for passenger in self.passengers.of_flight(flight.id):
            self.passengers.invalidate(passenger)
        self.flights.invalidate(flight)

    def reconcile(self) -> None:
        """Cross-link entities once every file has been loaded.

        1. Passengers whose flight or user is missing are dropped; the others
           are attached to both sides and counted on the flight.
        2. Reservations whose user is missing are invalidated; the others are
           attached to their user.
        3. Flights with more confirmed passengers than seats are invalidated
           together with their passengers.
        """
        self._check_usable()
        if self._reconciled:
            return

        dropped_passengers = 0
        for passenger in list(self.passengers):
            flight = self.flights.get_by_id(passenger.flight_id)
            user = self.users.get_by_id(passenger.user_id)
            if flight is None or user is None:
                self.passengers.invalidate(passenger)
                dropped_passengers += 1
                continue
            self.flights.attach_passenger(flight.id, user.id)
            self.users.attach_flight(user.id, flight.id)

        dropped_reservations = 0
        for reservation in list(self.reservations):
            if self.users.get_by_id(reservation.user_id) is None:
                self.reservations.invalidate(reservation)
                dropped_reservations += 1
                continue
            self.users.attach_reservation(reservation.user_id, reservation.id)

        overbooked = [f for f in self.flights if f.confirmed_passengers > f.total_seats]
        for flight in overbooked:
            self.invalidate_flight(flight)

        logger.debug(
            "Reconciliation dropped %d passengers, %d reservations, %d flights",
            dropped_passengers,
            dropped_reservations,
            len(overbooked),
        )
        self._reconciled = True

    def freeze(self) -> Database:
        """Reconcile if needed and hand the managers over to a read-only Database.

        The builder cannot be used afterwards.
        """
        self.reconcile()
        for manager in (self.users, self.flights, self.passengers, self.reservations):
            manager.freeze()
        self._consumed = True
        return Database(
            self.users, self.flights, self.passengers, self.reservations, self.reference_date
        )

    def close(self) -> None:
        """Release the managers of a builder that was never frozen."""
        if self._consumed:
            return
        self.reservations.close()
        self.passengers.close()
        self.flights.close()
        self.users.close()
        self._consumed = True

    def __enter__(self) -> DatabaseBuilder:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if exc_type is not None:
            self.close()
