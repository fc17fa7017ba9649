"""Tests for loading dataset directories."""

import pytest
from conftest import PASSENGERS_HEADER, USERS_HEADER, flight_line, reservation_line, user_line

from travel_tables import Settings
from travel_tables.dataset import DatasetLoader, ErrorOutput, load_dataset
from travel_tables.errors import DatasetError


def read_lines(path):
    return path.read_text(encoding="utf-8").splitlines()


class TestErrorOutput:
    """Tests for ErrorOutput."""

    def test_created_lazily_with_header(self, tmp_path):
        path = tmp_path / "out" / "users_errors.csv"
        with ErrorOutput(path, "h1;h2") as errors:
            assert not path.exists()
            errors.write("bad;line")
            errors.write("worse;line")
            assert errors.created
        assert read_lines(path) == ["h1;h2", "bad;line", "worse;line"]
        assert errors.count == 2

    def test_no_file_without_errors(self, tmp_path):
        path = tmp_path / "users_errors.csv"
        with ErrorOutput(path, "header"):
            pass
        assert not path.exists()


class TestLoading:
    """Tests for DatasetLoader."""

    def test_loads_valid_dataset(self, make_dataset, settings):
        dataset = make_dataset(
            users=[user_line()],
            flights=[flight_line()],
            passengers=["0000000001;JéssiTavares910"],
            reservations=[reservation_line()],
        )
        loader = DatasetLoader(dataset, settings=settings)
        with loader.load() as database:
            assert len(database.users) == 1
            assert database.flights.get_by_id(1).confirmed_passengers == 1
            assert database.users.reservations_of("JéssiTavares910") == [1]

        assert loader.line_counts == {"users": 1, "flights": 1, "passengers": 1, "reservations": 1}
        assert loader.error_counts == {"users": 0, "flights": 0, "passengers": 0, "reservations": 0}
        assert not settings.output_dir.exists()

    def test_invalid_lines_go_to_error_files(self, make_dataset, settings):
        """Test that each rejected line is copied verbatim after the header."""
        bad = user_line(user_id="Bad1", email="nope")
        dataset = make_dataset(users=[user_line(), bad, "too;few;tokens"])

        with load_dataset(dataset, settings=settings) as database:
            assert len(database.users) == 1
            assert database.users.pool_size == 3

        errors = settings.output_dir / "users_errors.csv"
        assert read_lines(errors) == [USERS_HEADER, bad, "too;few;tokens"]
        assert not (settings.output_dir / "flights_errors.csv").exists()

    def test_blank_lines_are_skipped(self, make_dataset, settings):
        dataset = make_dataset(users=["", user_line(), ""])
        loader = DatasetLoader(dataset, settings=settings)
        with loader.load() as database:
            assert len(database.users) == 1
        assert loader.line_counts["users"] == 1

    def test_separate_errors_dir(self, make_dataset, settings, tmp_path):
        dataset = make_dataset(users=["broken"])
        load_dataset(dataset, errors_dir=tmp_path / "errs", settings=settings).close()
        assert (tmp_path / "errs" / "users_errors.csv").exists()

    def test_every_line_is_valid_or_reported(self, make_dataset, settings):
        """Test that valid plus reported lines account for every non-empty line."""
        users = [user_line(user_id=f"U{i}") for i in range(5)] + [user_line(sex="?")]
        flights = [flight_line(flight_id=f"{i:010d}") for i in range(1, 4)]
        flights.append(flight_line(flight_id="0000000009", seats="0"))
        passengers = ["0000000001;U0", "0000000001;U0", "0000000002;U9", "0000000009;U1"]
        reservations = [
            reservation_line(reservation_id="Book0000000001", user_id="U1"),
            reservation_line(reservation_id="Book0000000001", user_id="U2"),
            reservation_line(reservation_id="Book0000000002", user_id="nobody"),
        ]
        dataset = make_dataset(
            users=users, flights=flights, passengers=passengers, reservations=reservations
        )
        loader = DatasetLoader(dataset, settings=settings)

        with loader.load() as database:
            valid = {
                "users": len(database.users),
                "flights": len(database.flights),
                "passengers": len(database.passengers),
                "reservations": len(database.reservations),
            }

        for name, total in loader.line_counts.items():
            assert valid[name] + loader.error_counts[name] == total
            path = settings.output_dir / f"{name}_errors.csv"
            if loader.error_counts[name]:
                assert len(read_lines(path)) == loader.error_counts[name] + 1
        assert valid == {"users": 5, "flights": 3, "passengers": 1, "reservations": 1}

    def test_loading_is_deterministic(self, make_dataset, tmp_path):
        """Test that loading the same files twice produces the same results."""
        dataset = make_dataset(users=[user_line(), user_line(user_id="X", email="bad")])
        contents = []
        for run in ("a", "b"):
            settings = Settings(output_dir=tmp_path / run)
            with load_dataset(dataset, settings=settings) as database:
                contents.append([u.id for u in database.users])
            contents.append((tmp_path / run / "users_errors.csv").read_text(encoding="utf-8"))
        assert contents[0] == contents[2]
        assert contents[1] == contents[3]

    def test_custom_delimiter(self, tmp_path):
        dataset = tmp_path / "dataset"
        dataset.mkdir()
        (dataset / "users.csv").write_text(
            USERS_HEADER.replace(";", ",") + "\n" + user_line().replace(";", ",") + "\n",
            encoding="utf-8",
        )
        for name in ("flights", "passengers", "reservations"):
            (dataset / f"{name}.csv").write_text("header\n", encoding="utf-8")
        settings = Settings(output_dir=tmp_path / "out", delimiter=",")

        with load_dataset(dataset, settings=settings) as database:
            assert database.users.get_by_id("JéssiTavares910") is not None

    def test_missing_file(self, tmp_path, settings):
        (tmp_path / "empty").mkdir()
        with pytest.raises(DatasetError):
            load_dataset(tmp_path / "empty", settings=settings)


class TestCrossReferences:
    """Tests for passengers and reservations that reference other files."""

    def test_overbooked_passenger_rejected(self, make_dataset, settings):
        dataset = make_dataset(
            users=[user_line(user_id="A"), user_line(user_id="B")],
            flights=[flight_line(seats="1")],
            passengers=["0000000001;A", "0000000001;B"],
        )
        with load_dataset(dataset, settings=settings) as database:
            flight = database.flights.get_by_id(1)
            assert flight is not None
            assert flight.confirmed_passengers == 1
            assert database.flights.passengers_of(1) == ["A"]

        errors = settings.output_dir / "passengers_errors.csv"
        assert read_lines(errors) == [PASSENGERS_HEADER, "0000000001;B"]

    def test_overbooked_flight_invalidated(self, make_dataset, tmp_path):
        settings = Settings(output_dir=tmp_path / "out", overbooking_policy="invalidate_flight")
        dataset = make_dataset(
            users=[user_line(user_id="A"), user_line(user_id="B")],
            flights=[flight_line(seats="1")],
            passengers=["0000000001;A", "0000000001;B"],
        )
        with load_dataset(dataset, settings=settings) as database:
            assert database.flights.get_by_id(1) is None
            assert len(database.passengers) == 0
            assert database.users.flights_of("A") == []
        assert not (settings.output_dir / "passengers_errors.csv").exists()

    def test_reservation_of_rejected_user(self, make_dataset, settings):
        """Test that a reservation of an invalid user is stored but unreachable."""
        line = reservation_line(user_id="Ghost")
        dataset = make_dataset(
            users=[user_line(user_id="Ghost", email="invalid")],
            reservations=[line],
        )
        with load_dataset(dataset, settings=settings) as database:
            assert database.reservations.pool_size == 1
            assert database.reservations.get_by_id(1) is None
            assert database.reservations.by_hotel(1001) == []
            assert database.users.reservations_of("Ghost") == []

        errors = settings.output_dir / "reservations_errors.csv"
        assert read_lines(errors)[1:] == [line]

    def test_unknown_passenger_references(self, make_dataset, settings):
        dataset = make_dataset(
            users=[user_line(user_id="A")],
            flights=[flight_line()],
            passengers=["0000000002;A", "0000000001;Nobody", "0000000001;A"],
        )
        with load_dataset(dataset, settings=settings) as database:
            assert database.flights.passengers_of(1) == ["A"]
        errors = settings.output_dir / "passengers_errors.csv"
        assert read_lines(errors)[1:] == ["0000000002;A", "0000000001;Nobody"]

    def test_conflicting_hotel_name(self, make_dataset, settings):
        dataset = make_dataset(
            users=[user_line()],
            reservations=[
                reservation_line(reservation_id="Book0000000001"),
                reservation_line(reservation_id="Book0000000002", hotel_name="Other Name"),
            ],
        )
        with load_dataset(dataset, settings=settings) as database:
            assert [r.id for r in database.reservations.by_hotel(1001)] == [1]
        assert (settings.output_dir / "reservations_errors.csv").exists()
