"""Entity managers: pooled storage plus primary and secondary indices."""

from __future__ import annotations

from typing import Any, Callable, Generic, Hashable, Iterator, TypeVar

from travel_tables.entities import Flight, Passenger, Reservation, User
from travel_tables.errors import FrozenError, ParseError
from travel_tables.pool import Handle, Pool
from travel_tables.string_pool import DedupStringPool, StringPool

E = TypeVar("E", User, Flight, Passenger, Reservation)


class EntityManager(Generic[E]):
    """Common pool and primary-index handling for all managers.

    Every record is stored in the pool, valid or not. Only valid records are
    reachable through indices and iteration.
    """

    entity_name = "record"

    def __init__(self, block_size: int = Pool.DEFAULT_BLOCK_CAPACITY) -> None:
        self._pool: Pool[E] = Pool(block_size)
        self._by_key: dict[Hashable, Handle] = {}
        self._frozen = False

    def _key(self, entity: E) -> Hashable:
        raise NotImplementedError

    def _intern(self, entity: E) -> None:
        """Move string fields into the manager's string pools."""

    def _index(self, handle: Handle, entity: E) -> None:
        """Insert a valid entity into secondary indices."""

    def _unindex(self, handle: Handle, entity: E) -> None:
        """Remove an entity from secondary indices."""

    def _check_mutable(self) -> None:
        if self._frozen:
            raise FrozenError(f"The {self.entity_name} manager is frozen")

    def check_unique(self, entity: E) -> None:
        """Raise ParseError if a valid record with the same key exists."""
        if self._key(entity) in self._by_key:
            raise ParseError(f"Duplicate {self.entity_name} id: {self._key(entity)!r}")

    def add(self, entity: E) -> Handle:
        """Store an entity; index it if it is valid.

        Returns:
            The pool handle of the stored entity.
        """
        self._check_mutable()
        self._intern(entity)
        handle = self._pool.allocate(entity)
        if entity.valid:
            if self._key(entity) in self._by_key:
                entity.invalidate()
            else:
                self._by_key[self._key(entity)] = handle
                self._index(handle, entity)
        return handle

    def invalidate(self, entity: E) -> None:
        """Mark an entity invalid and drop it from every index."""
        self._check_mutable()
        if not entity.valid:
            return
        entity.invalidate()
        handle = self._by_key.pop(self._key(entity), None)
        if handle is not None:
            self._unindex(handle, entity)

    def _get(self, key: Hashable) -> E | None:
        handle = self._by_key.get(key)
        if handle is None:
            return None
        return self._pool.get(handle)

    def __iter__(self) -> Iterator[E]:
        """Iterate over valid entities in load order."""
        return (entity for entity in self._pool if entity.valid)

    def iter(self, callback: Callable[[Any, E], Any], user_data: Any = None) -> Any:
        """Call ``callback(user_data, entity)`` for each valid entity.

        Stops at and returns the first truthy callback result.
        """
        for entity in self:
            result = callback(user_data, entity)
            if result:
                return result
        return None

    def records(self) -> Iterator[E]:
        """Iterate over every stored entity, invalid ones included."""
        return iter(self._pool)

    def __len__(self) -> int:
        """Return the number of valid entities."""
        return len(self._by_key)

    @property
    def pool_size(self) -> int:
        """Return the number of stored entities, invalid ones included."""
        return len(self._pool)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        self._frozen = True
        self._pool.freeze()

    def close(self) -> None:
        self._by_key.clear()
        self._pool.close()


class UserManager(EntityManager[User]):
    """Users indexed by id, with the flights and reservations of each user."""

    entity_name = "user"

    def __init__(self, block_size: int = Pool.DEFAULT_BLOCK_CAPACITY) -> None:
        super().__init__(block_size)
        self._strings = StringPool(block_size)
        self._pay_methods = DedupStringPool(block_size)
        self._flights: dict[str, list[int]] = {}
        self._reservations: dict[str, list[int]] = {}

    def _key(self, entity: User) -> str:
        return entity.id

    def _intern(self, entity: User) -> None:
        put = self._strings.put
        entity.id = put(entity.id)
        entity.name = put(entity.name)
        entity.email = put(entity.email)
        entity.phone = put(entity.phone)
        entity.passport = put(entity.passport)
        entity.address = put(entity.address)
        entity.pay_method = self._pay_methods.put(entity.pay_method)

    def _unindex(self, handle: Handle, entity: User) -> None:
        self._flights.pop(entity.id, None)
        self._reservations.pop(entity.id, None)

    def get_by_id(self, user_id: str) -> User | None:
        return self._get(user_id)

    def attach_flight(self, user_id: str, flight_id: int) -> None:
        self._check_mutable()
        self._flights.setdefault(user_id, []).append(flight_id)

    def detach_flight(self, user_id: str, flight_id: int) -> None:
        self._check_mutable()
        flights = self._flights.get(user_id)
        if flights and flight_id in flights:
            flights.remove(flight_id)

    def attach_reservation(self, user_id: str, reservation_id: int) -> None:
        self._check_mutable()
        self._reservations.setdefault(user_id, []).append(reservation_id)

    def flights_of(self, user_id: str) -> list[int]:
        """Return the ids of the flights a user is a confirmed passenger of."""
        return list(self._flights.get(user_id, ()))

    def reservations_of(self, user_id: str) -> list[int]:
        """Return the ids of a user's valid reservations."""
        return list(self._reservations.get(user_id, ()))

    def close(self) -> None:
        super().close()
        self._flights.clear()
        self._reservations.clear()
        self._strings.close()
        self._pay_methods.close()


class FlightManager(EntityManager[Flight]):
    """Flights indexed by id and by origin airport."""

    entity_name = "flight"

    def __init__(self, block_size: int = Pool.DEFAULT_BLOCK_CAPACITY) -> None:
        super().__init__(block_size)
        self._airlines = DedupStringPool(block_size)
        self._plane_models = DedupStringPool(block_size)
        self._by_origin: dict[int, list[Handle]] = {}
        self._passengers: dict[int, list[str]] = {}

    def _key(self, entity: Flight) -> int:
        return entity.id

    def _intern(self, entity: Flight) -> None:
        entity.airline = self._airlines.put(entity.airline)
        entity.plane_model = self._plane_models.put(entity.plane_model)

    def _index(self, handle: Handle, entity: Flight) -> None:
        self._by_origin.setdefault(entity.origin, []).append(handle)

    def _unindex(self, handle: Handle, entity: Flight) -> None:
        handles = self._by_origin.get(entity.origin)
        if handles is not None:
            handles.remove(handle)
        self._passengers.pop(entity.id, None)

    def get_by_id(self, flight_id: int) -> Flight | None:
        return self._get(flight_id)

    def by_origin(self, airport: int) -> list[Flight]:
        """Return the valid flights departing from an airport, in load order."""
        return [self._pool.get(handle) for handle in self._by_origin.get(airport, ())]

    def attach_passenger(self, flight_id: int, user_id: str) -> None:
        """Confirm a passenger, counting it on the flight."""
        self._check_mutable()
        flight = self.get_by_id(flight_id)
        if flight is None:
            raise KeyError(flight_id)
        self._passengers.setdefault(flight_id, []).append(user_id)
        flight.confirmed_passengers += 1

    def passengers_of(self, flight_id: int) -> list[str]:
        """Return the user ids of a flight's confirmed passengers."""
        return list(self._passengers.get(flight_id, ()))

    def close(self) -> None:
        super().close()
        self._by_origin.clear()
        self._passengers.clear()
        self._airlines.close()
        self._plane_models.close()


class PassengerManager(EntityManager[Passenger]):
    """Passenger links indexed by (flight, user) and by flight."""

    entity_name = "passenger"

    def __init__(self, block_size: int = Pool.DEFAULT_BLOCK_CAPACITY) -> None:
        super().__init__(block_size)
        self._user_ids = DedupStringPool(block_size)
        self._by_flight: dict[int, list[Handle]] = {}

    def _key(self, entity: Passenger) -> tuple[int, str]:
        return entity.key

    def _intern(self, entity: Passenger) -> None:
        entity.user_id = self._user_ids.put(entity.user_id)

    def _index(self, handle: Handle, entity: Passenger) -> None:
        self._by_flight.setdefault(entity.flight_id, []).append(handle)

    def _unindex(self, handle: Handle, entity: Passenger) -> None:
        handles = self._by_flight.get(entity.flight_id)
        if handles is not None:
            handles.remove(handle)

    def contains(self, flight_id: int, user_id: str) -> bool:
        return (flight_id, user_id) in self._by_key

    def of_flight(self, flight_id: int) -> list[Passenger]:
        """Return the valid passenger links of a flight."""
        return [self._pool.get(handle) for handle in self._by_flight.get(flight_id, ())]

    def count_for_flight(self, flight_id: int) -> int:
        return len(self._by_flight.get(flight_id, ()))

    def close(self) -> None:
        super().close()
        self._by_flight.clear()
        self._user_ids.close()


class ReservationManager(EntityManager[Reservation]):
    """Reservations indexed by id and by hotel."""

    entity_name = "reservation"

    def __init__(self, block_size: int = Pool.DEFAULT_BLOCK_CAPACITY) -> None:
        super().__init__(block_size)
        self._hotel_names = DedupStringPool(block_size)
        self._user_ids = DedupStringPool(block_size)
        self._addresses = StringPool(block_size)
        self._by_hotel: dict[int, list[Handle]] = {}
        self._canonical_names: dict[int, str] = {}

    def _key(self, entity: Reservation) -> int:
        return entity.id

    def _intern(self, entity: Reservation) -> None:
        entity.hotel_name = self._hotel_names.put(entity.hotel_name)
        entity.user_id = self._user_ids.put(entity.user_id)
        entity.address = self._addresses.put(entity.address)

    def _index(self, handle: Handle, entity: Reservation) -> None:
        self._by_hotel.setdefault(entity.hotel_id, []).append(handle)
        self._canonical_names.setdefault(entity.hotel_id, entity.hotel_name)

    def _unindex(self, handle: Handle, entity: Reservation) -> None:
        handles = self._by_hotel.get(entity.hotel_id)
        if handles is not None:
            handles.remove(handle)

    def check_unique(self, entity: Reservation) -> None:
        """Reject duplicate ids and hotel names that contradict earlier lines."""
        super().check_unique(entity)
        name = self._canonical_names.get(entity.hotel_id)
        if name is not None and name != entity.hotel_name:
            raise ParseError(
                f"Hotel {entity.hotel_id} is named {entity.hotel_name!r}, "
                f"previously {name!r}"
            )

    def get_by_id(self, reservation_id: int) -> Reservation | None:
        return self._get(reservation_id)

    def by_hotel(self, hotel_id: int) -> list[Reservation]:
        """Return the valid reservations of a hotel, in load order."""
        return [self._pool.get(handle) for handle in self._by_hotel.get(hotel_id, ())]

    def hotel_name(self, hotel_id: int) -> str | None:
        """Return the canonical name of a hotel."""
        return self._canonical_names.get(hotel_id)

    def close(self) -> None:
        super().close()
        self._by_hotel.clear()
        self._canonical_names.clear()
        self._hotel_names.close()
        self._user_ids.close()
        self._addresses.close()
