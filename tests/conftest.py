"""Shared fixtures: small on-disk datasets."""

from pathlib import Path

import pytest

from travel_tables import Settings

USERS_HEADER = (
    "id;name;email;phone_number;birth_date;sex;passport;country_code;address;"
    "account_creation;pay_method;account_status"
)
FLIGHTS_HEADER = (
    "id;airline;plane_model;total_seats;origin;destination;schedule_departure_date;"
    "schedule_arrival_date;real_departure_date;real_arrival_date;pilot;copilot;notes"
)
PASSENGERS_HEADER = "flight_id;user_id"
RESERVATIONS_HEADER = (
    "id;user_id;hotel_id;hotel_name;hotel_stars;city_tax;address;begin_date;end_date;"
    "price_per_night;includes_breakfast;room_details;rating;comment"
)


def user_line(
    user_id="JéssiTavares910",
    name="Jéssica Tavares",
    email="jessica.tavares@hotmail.com",
    phone="+351 912 345 678",
    birth_date="1979/04/24",
    sex="F",
    passport="LR750534",
    country="PT",
    address="Rua das Flores 12",
    account_creation="2014/03/24 06:03:03",
    pay_method="debit_card",
    status="active",
):
    return ";".join(
        [user_id, name, email, phone, birth_date, sex, passport, country, address,
         account_creation, pay_method, status]
    )


def flight_line(
    flight_id="0000000001",
    airline="TAP",
    plane_model="A320",
    seats="100",
    origin="LIS",
    destination="OPO",
    departure="2023/05/01 10:00:00",
    arrival="2023/05/01 11:00:00",
    real_departure="2023/05/01 10:10:00",
    real_arrival="2023/05/01 11:05:00",
    pilot="Ana Costa",
    copilot="Rui Lopes",
    notes="",
):
    return ";".join(
        [flight_id, airline, plane_model, seats, origin, destination, departure, arrival,
         real_departure, real_arrival, pilot, copilot, notes]
    )


def reservation_line(
    reservation_id="Book0000000001",
    user_id="JéssiTavares910",
    hotel_id="HTL1001",
    hotel_name="Hotel Lisboa",
    stars="4",
    city_tax="5",
    address="Avenida da Liberdade 1",
    begin="2023/06/01",
    end="2023/06/04",
    price="100",
    breakfast="true",
    room_details="Suite",
    rating="4",
    comment="Nice stay",
):
    return ";".join(
        [reservation_id, user_id, hotel_id, hotel_name, stars, city_tax, address, begin, end,
         price, breakfast, room_details, rating, comment]
    )


def write_dataset(directory: Path, users=(), flights=(), passengers=(), reservations=()) -> Path:
    """Write the four dataset files (header plus lines) into a directory."""
    directory.mkdir(parents=True, exist_ok=True)
    files = {
        "users": (USERS_HEADER, users),
        "flights": (FLIGHTS_HEADER, flights),
        "passengers": (PASSENGERS_HEADER, passengers),
        "reservations": (RESERVATIONS_HEADER, reservations),
    }
    for name, (header, lines) in files.items():
        content = "\n".join([header, *lines]) + "\n"
        (directory / f"{name}.csv").write_text(content, encoding="utf-8")
    return directory


@pytest.fixture
def make_dataset(tmp_path):
    """Return a function that writes a dataset under tmp_path/dataset."""

    def make(**files):
        return write_dataset(tmp_path / "dataset", **files)

    return make


@pytest.fixture
def settings(tmp_path):
    """Settings writing every output under tmp_path/Resultados."""
    return Settings(output_dir=tmp_path / "Resultados")
