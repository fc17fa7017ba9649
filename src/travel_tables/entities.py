"""Entity records of the travel dataset.

Each entity module-level ``*_GRAMMAR`` is a tuple of token callbacks in file
column order, ready to hand to a ``FixedDelimParser``.
"""

from __future__ import annotations

from dataclasses import dataclass

from travel_tables.errors import ParseError
from travel_tables.types import (
    UINT32_MAX,
    AccountStatus,
    Sex,
    date_diff,
    datetime_date,
    parse_account_status,
    parse_airport_code,
    parse_country_code,
    parse_date,
    parse_datetime,
    parse_flight_id,
    parse_hotel_id,
    parse_includes_breakfast,
    parse_phone,
    parse_positive_int,
    parse_reservation_id,
    parse_sex,
    require_non_empty,
    validate_email,
)


@dataclass
class User:
    """A registered user."""

    id: str = ""
    name: str = ""
    email: str = ""
    phone: str = ""
    birth_date: int = 0
    sex: Sex = Sex.M
    passport: str = ""
    country_code: int = 0
    address: str = ""
    account_creation: int = 0  # Date-time
    pay_method: str = ""
    account_status: AccountStatus = AccountStatus.ACTIVE
    valid: bool = True

    @property
    def active(self) -> bool:
        return self.account_status is AccountStatus.ACTIVE

    def invalidate(self) -> None:
        self.valid = False

    def check_invariants(self) -> None:
        if date_diff(datetime_date(self.account_creation), self.birth_date) < 0:
            raise ParseError("Account created before birth date")


@dataclass
class Flight:
    """A scheduled flight."""

    id: int = 0
    airline: str = ""
    plane_model: str = ""
    total_seats: int = 0
    origin: int = 0
    destination: int = 0
    schedule_departure: int = 0
    schedule_arrival: int = 0
    real_departure: int = 0
    real_arrival: int = 0
    confirmed_passengers: int = 0
    valid: bool = True

    def invalidate(self) -> None:
        self.valid = False

    def check_invariants(self) -> None:
        if self.schedule_arrival < self.schedule_departure:
            raise ParseError("Scheduled arrival before scheduled departure")
        if self.real_arrival < self.real_departure:
            raise ParseError("Real arrival before real departure")
        if self.origin == self.destination:
            raise ParseError("Origin and destination are the same airport")


@dataclass
class Passenger:
    """Links a user to a flight."""

    flight_id: int = 0
    user_id: str = ""
    valid: bool = True

    @property
    def key(self) -> tuple[int, str]:
        return (self.flight_id, self.user_id)

    def invalidate(self) -> None:
        self.valid = False

    def check_invariants(self) -> None:
        pass


@dataclass
class Reservation:
    """A hotel reservation."""

    id: int = 0
    user_id: str = ""
    hotel_id: int = 0
    hotel_name: str = ""
    hotel_stars: int = 0
    city_tax: int = 0
    address: str = ""
    begin_date: int = 0
    end_date: int = UINT32_MAX  # Lets either date be set first
    price_per_night: int = 0
    includes_breakfast: bool = False
    rating: int | None = None
    valid: bool = True

    def invalidate(self) -> None:
        self.valid = False

    def set_begin_date(self, date: int) -> None:
        if date > self.end_date:
            raise ParseError("Reservation begins after it ends")
        self.begin_date = date

    def set_end_date(self, date: int) -> None:
        if date < self.begin_date:
            raise ParseError("Reservation ends before it begins")
        self.end_date = date

    def check_invariants(self) -> None:
        if self.end_date < self.begin_date:
            raise ParseError("Reservation ends before it begins")

    @property
    def nights(self) -> int:
        return date_diff(self.end_date, self.begin_date)

    @property
    def total_price(self) -> float:
        """Price of all nights, city tax included."""
        base = self.price_per_night * self.nights
        return base + base / 100 * self.city_tax


def _bounded_int(text: str, field_name: str, low: int, high: int | None = None) -> int:
    value = parse_positive_int(text)
    if value < low or (high is not None and value > high):
        raise ParseError(f"{field_name} out of range: {text!r}")
    return value


def _ignore(entity: object, token: str, index: int) -> None:
    pass


def _require(field_name: str):
    def check(entity: object, token: str, index: int) -> None:
        require_non_empty(token, field_name)

    return check


# Users


def _user_id(user: User, token: str, index: int) -> None:
    user.id = require_non_empty(token, "user id")


def _user_name(user: User, token: str, index: int) -> None:
    user.name = require_non_empty(token, "name")


def _user_email(user: User, token: str, index: int) -> None:
    user.email = validate_email(token)


def _user_phone(user: User, token: str, index: int) -> None:
    user.phone = parse_phone(token)


def _user_birth_date(user: User, token: str, index: int) -> None:
    user.birth_date = parse_date(token)


def _user_sex(user: User, token: str, index: int) -> None:
    user.sex = parse_sex(token)


def _user_passport(user: User, token: str, index: int) -> None:
    user.passport = require_non_empty(token, "passport")


def _user_country_code(user: User, token: str, index: int) -> None:
    user.country_code = parse_country_code(token)


def _user_address(user: User, token: str, index: int) -> None:
    user.address = require_non_empty(token, "address")


def _user_account_creation(user: User, token: str, index: int) -> None:
    user.account_creation = parse_datetime(token)


def _user_pay_method(user: User, token: str, index: int) -> None:
    user.pay_method = require_non_empty(token, "pay method")


def _user_account_status(user: User, token: str, index: int) -> None:
    user.account_status = parse_account_status(token)


USER_GRAMMAR = (
    _user_id,
    _user_name,
    _user_email,
    _user_phone,
    _user_birth_date,
    _user_sex,
    _user_passport,
    _user_country_code,
    _user_address,
    _user_account_creation,
    _user_pay_method,
    _user_account_status,
)


# Flights


def _flight_id(flight: Flight, token: str, index: int) -> None:
    flight.id = parse_flight_id(token)


def _flight_airline(flight: Flight, token: str, index: int) -> None:
    flight.airline = require_non_empty(token, "airline")


def _flight_plane_model(flight: Flight, token: str, index: int) -> None:
    flight.plane_model = require_non_empty(token, "plane model")


def _flight_total_seats(flight: Flight, token: str, index: int) -> None:
    flight.total_seats = _bounded_int(token, "total_seats", 1)


def _flight_origin(flight: Flight, token: str, index: int) -> None:
    flight.origin = parse_airport_code(token)


def _flight_destination(flight: Flight, token: str, index: int) -> None:
    flight.destination = parse_airport_code(token)


def _flight_schedule_departure(flight: Flight, token: str, index: int) -> None:
    flight.schedule_departure = parse_datetime(token)


def _flight_schedule_arrival(flight: Flight, token: str, index: int) -> None:
    flight.schedule_arrival = parse_datetime(token)


def _flight_real_departure(flight: Flight, token: str, index: int) -> None:
    flight.real_departure = parse_datetime(token)


def _flight_real_arrival(flight: Flight, token: str, index: int) -> None:
    flight.real_arrival = parse_datetime(token)


FLIGHT_GRAMMAR = (
    _flight_id,
    _flight_airline,
    _flight_plane_model,
    _flight_total_seats,
    _flight_origin,
    _flight_destination,
    _flight_schedule_departure,
    _flight_schedule_arrival,
    _flight_real_departure,
    _flight_real_arrival,
    _require("pilot"),
    _require("copilot"),
    _ignore,  # notes
)


# Passengers


def _passenger_flight_id(passenger: Passenger, token: str, index: int) -> None:
    passenger.flight_id = parse_flight_id(token)


def _passenger_user_id(passenger: Passenger, token: str, index: int) -> None:
    passenger.user_id = require_non_empty(token, "user id")


PASSENGER_GRAMMAR = (_passenger_flight_id, _passenger_user_id)


# Reservations


def _reservation_id(reservation: Reservation, token: str, index: int) -> None:
    reservation.id = parse_reservation_id(token)


def _reservation_user_id(reservation: Reservation, token: str, index: int) -> None:
    reservation.user_id = require_non_empty(token, "user id")


def _reservation_hotel_id(reservation: Reservation, token: str, index: int) -> None:
    reservation.hotel_id = parse_hotel_id(token)


def _reservation_hotel_name(reservation: Reservation, token: str, index: int) -> None:
    reservation.hotel_name = require_non_empty(token, "hotel name")


def _reservation_hotel_stars(reservation: Reservation, token: str, index: int) -> None:
    reservation.hotel_stars = _bounded_int(token, "hotel_stars", 1, 5)


def _reservation_city_tax(reservation: Reservation, token: str, index: int) -> None:
    reservation.city_tax = _bounded_int(token, "city_tax", 0)


def _reservation_address(reservation: Reservation, token: str, index: int) -> None:
    reservation.address = require_non_empty(token, "address")


def _reservation_begin_date(reservation: Reservation, token: str, index: int) -> None:
    reservation.set_begin_date(parse_date(token))


def _reservation_end_date(reservation: Reservation, token: str, index: int) -> None:
    reservation.set_end_date(parse_date(token))


def _reservation_price_per_night(reservation: Reservation, token: str, index: int) -> None:
    reservation.price_per_night = _bounded_int(token, "price_per_night", 1)


def _reservation_includes_breakfast(reservation: Reservation, token: str, index: int) -> None:
    reservation.includes_breakfast = parse_includes_breakfast(token)


def _reservation_rating(reservation: Reservation, token: str, index: int) -> None:
    reservation.rating = _bounded_int(token, "rating", 1, 5) if token else None


RESERVATION_GRAMMAR = (
    _reservation_id,
    _reservation_user_id,
    _reservation_hotel_id,
    _reservation_hotel_name,
    _reservation_hotel_stars,
    _reservation_city_tax,
    _reservation_address,
    _reservation_begin_date,
    _reservation_end_date,
    _reservation_price_per_night,
    _reservation_includes_breakfast,
    _ignore,  # room_details
    _reservation_rating,
    _ignore,  # comment
)
