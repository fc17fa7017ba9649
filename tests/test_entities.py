"""Tests for entity records and their line grammars."""

import pytest
from conftest import flight_line, reservation_line, user_line

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
from travel_tables.errors import DelimitedParseError, ParseError
from travel_tables.parsing import FixedDelimParser
from travel_tables.types import (
    AccountStatus,
    Sex,
    format_airport_code,
    format_country_code,
    format_date,
    format_datetime,
    parse_date,
)


def parse(grammar, entity, line):
    FixedDelimParser(";", grammar).parse(line, entity)
    entity.check_invariants()
    return entity


class TestUser:
    """Tests for user lines."""

    def test_parse_valid_line(self):
        user = parse(USER_GRAMMAR, User(), user_line())

        assert user.id == "JéssiTavares910"
        assert user.name == "Jéssica Tavares"
        assert user.sex is Sex.F
        assert format_date(user.birth_date) == "1979/04/24"
        assert format_country_code(user.country_code) == "PT"
        assert format_datetime(user.account_creation) == "2014/03/24 06:03:03"
        assert user.account_status is AccountStatus.ACTIVE
        assert user.active

    def test_inactive_status(self):
        user = parse(USER_GRAMMAR, User(), user_line(status="Inactive"))
        assert not user.active

    @pytest.mark.parametrize(
        "overrides",
        [
            {"user_id": ""},
            {"name": ""},
            {"email": "not-an-email"},
            {"phone": ""},
            {"birth_date": "1979/13/24"},
            {"sex": "X"},
            {"passport": ""},
            {"country": "PRT"},
            {"address": ""},
            {"account_creation": "2014/03/24"},
            {"pay_method": ""},
            {"status": "blocked"},
        ],
    )
    def test_invalid_fields(self, overrides):
        with pytest.raises(ParseError):
            parse(USER_GRAMMAR, User(), user_line(**overrides))

    def test_account_created_before_birth(self):
        with pytest.raises(ParseError):
            parse(USER_GRAMMAR, User(), user_line(account_creation="1970/01/01 00:00:00"))

    def test_wrong_token_count(self):
        with pytest.raises(DelimitedParseError):
            parse(USER_GRAMMAR, User(), user_line() + ";extra")


class TestFlight:
    """Tests for flight lines."""

    def test_parse_valid_line(self):
        flight = parse(FLIGHT_GRAMMAR, Flight(), flight_line(origin="lis"))

        assert flight.id == 1
        assert flight.airline == "TAP"
        assert flight.total_seats == 100
        assert format_airport_code(flight.origin) == "LIS"
        assert format_airport_code(flight.destination) == "OPO"
        assert flight.confirmed_passengers == 0

    def test_notes_may_be_empty(self):
        flight = parse(FLIGHT_GRAMMAR, Flight(), flight_line(notes=""))
        assert flight.valid

    @pytest.mark.parametrize(
        "overrides",
        [
            {"flight_id": "F1"},
            {"airline": ""},
            {"plane_model": ""},
            {"seats": "0"},
            {"seats": "-3"},
            {"origin": "LISB"},
            {"destination": "OP"},
            {"departure": "2023/05/01"},
            {"pilot": ""},
            {"copilot": ""},
        ],
    )
    def test_invalid_fields(self, overrides):
        with pytest.raises(ParseError):
            parse(FLIGHT_GRAMMAR, Flight(), flight_line(**overrides))

    def test_arrival_before_departure(self):
        with pytest.raises(ParseError):
            parse(FLIGHT_GRAMMAR, Flight(), flight_line(arrival="2023/05/01 09:00:00"))
        with pytest.raises(ParseError):
            parse(FLIGHT_GRAMMAR, Flight(), flight_line(real_arrival="2023/05/01 10:00:00"))

    def test_same_origin_and_destination(self):
        with pytest.raises(ParseError):
            parse(FLIGHT_GRAMMAR, Flight(), flight_line(origin="opo"))


class TestPassenger:
    """Tests for passenger lines."""

    def test_parse_valid_line(self):
        passenger = parse(PASSENGER_GRAMMAR, Passenger(), "0000000003;JéssiTavares910")
        assert passenger.key == (3, "JéssiTavares910")

    def test_invalid_lines(self):
        with pytest.raises(ParseError):
            parse(PASSENGER_GRAMMAR, Passenger(), "abc;JéssiTavares910")
        with pytest.raises(ParseError):
            parse(PASSENGER_GRAMMAR, Passenger(), "0000000003;")


class TestReservation:
    """Tests for reservation lines."""

    def test_parse_valid_line(self):
        reservation = parse(RESERVATION_GRAMMAR, Reservation(), reservation_line())

        assert reservation.id == 1
        assert reservation.hotel_id == 1001
        assert reservation.hotel_stars == 4
        assert reservation.includes_breakfast is True
        assert reservation.rating == 4
        assert reservation.nights == 3
        assert reservation.total_price == pytest.approx(315.0)

    def test_empty_rating(self):
        reservation = parse(RESERVATION_GRAMMAR, Reservation(), reservation_line(rating=""))
        assert reservation.rating is None

    def test_empty_breakfast_means_false(self):
        reservation = parse(RESERVATION_GRAMMAR, Reservation(), reservation_line(breakfast=""))
        assert reservation.includes_breakfast is False

    @pytest.mark.parametrize(
        "overrides",
        [
            {"reservation_id": "0000000001"},
            {"user_id": ""},
            {"hotel_id": "H1001"},
            {"hotel_name": ""},
            {"stars": "0"},
            {"stars": "6"},
            {"city_tax": "-1"},
            {"address": ""},
            {"price": "0"},
            {"breakfast": "maybe"},
            {"rating": "6"},
        ],
    )
    def test_invalid_fields(self, overrides):
        with pytest.raises(ParseError):
            parse(RESERVATION_GRAMMAR, Reservation(), reservation_line(**overrides))

    def test_end_before_begin(self):
        with pytest.raises(ParseError):
            parse(RESERVATION_GRAMMAR, Reservation(), reservation_line(end="2023/05/31"))

    def test_date_setters_are_order_independent(self):
        reservation = Reservation()
        reservation.set_end_date(parse_date("2023/06/04"))
        reservation.set_begin_date(parse_date("2023/06/01"))
        assert reservation.nights == 3

        with pytest.raises(ParseError):
            reservation.set_begin_date(parse_date("2023/06/05"))
