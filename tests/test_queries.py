"""Tests for the ten built-in query types."""

import pytest
from conftest import flight_line, reservation_line, user_line, write_dataset

from travel_tables import Settings, load_dataset
from travel_tables.errors import QueryArgumentError
from travel_tables.queries import (
    QueryInstanceList,
    QueryWriter,
    default_registry,
    dispatch,
    parse_query_line,
)
from travel_tables.queries.q01 import EntityKind
from travel_tables.queries.q01 import parse_arguments as q01_arguments
from travel_tables.queries.q07 import median
from travel_tables.queries.q09 import collation_key
from travel_tables.queries.q10 import bucket_key
from travel_tables.queries.q10 import parse_arguments as q10_arguments
from travel_tables.types import parse_date

USERS = [
    user_line(user_id="A", name="Ana Silva", birth_date="1990/01/15", passport="P1",
              account_creation="2020/03/10 10:00:00"),
    user_line(user_id="B", name="Bruno Costa", sex="M", account_creation="2021/07/04 09:00:00"),
    user_line(user_id="C", name="Ágata Lopes", account_creation="2021/07/20 12:00:00"),
    user_line(user_id="D", name="Ana Inativa", status="inactive"),
]
FLIGHTS = [
    flight_line(flight_id="0000000001"),
    flight_line(flight_id="0000000002", destination="MAD",
                departure="2023/05/03 08:00:00", arrival="2023/05/03 10:00:00",
                real_departure="2023/05/03 08:00:00", real_arrival="2023/05/03 10:00:00"),
    flight_line(flight_id="0000000003", origin="OPO", destination="LIS",
                departure="2022/01/10 12:00:00", arrival="2022/01/10 13:00:00",
                real_departure="2022/01/10 12:30:00", real_arrival="2022/01/10 13:30:00"),
]
PASSENGERS = ["0000000001;A", "0000000001;B", "0000000002;A", "0000000003;A", "0000000001;D"]
RESERVATIONS = [
    reservation_line(reservation_id="Book0000000001", user_id="A"),
    reservation_line(reservation_id="Book0000000002", user_id="B",
                     begin="2023/07/10", end="2023/07/12", rating=""),
    reservation_line(reservation_id="Book0000000003", user_id="A",
                     begin="2023/07/11", end="2023/07/15", price="80", rating="2"),
    reservation_line(reservation_id="Book0000000004", user_id="A", hotel_id="HTL2002",
                     hotel_name="Hotel Porto", begin="2022/02/01", end="2022/02/03",
                     price="50", city_tax="0", rating="5"),
]


@pytest.fixture(scope="module")
def database(tmp_path_factory):
    root = tmp_path_factory.mktemp("queries")
    dataset = write_dataset(
        root / "dataset",
        users=USERS,
        flights=FLIGHTS,
        passengers=PASSENGERS,
        reservations=RESERVATIONS,
    )
    with load_dataset(dataset, settings=Settings(output_dir=root / "out")) as database:
        yield database


def run(database, line):
    """Run one query line and return its output lines."""
    registry = default_registry()
    instance = parse_query_line(line, 1, registry)
    assert instance is not None, line
    writer = QueryWriter(formatted=instance.formatted)
    dispatch(database, QueryInstanceList([instance]), [writer], registry)
    return writer.lines


class TestQuery1:
    """Entity summaries."""

    def test_argument_kinds(self):
        assert q01_arguments(["0000000001"]).kind is EntityKind.FLIGHT
        assert q01_arguments(["Book0000000001"]).kind is EntityKind.RESERVATION
        assert q01_arguments(["A"]).kind is EntityKind.USER
        assert q01_arguments(["Booker"]).kind is EntityKind.USER
        with pytest.raises(QueryArgumentError):
            q01_arguments([])

    def test_user(self, database):
        assert run(database, "1 A") == ["Ana Silva;F;33;PT;P1;3;3;751.000"]

    def test_user_formatted(self, database):
        assert run(database, "1F B") == [
            "--- 1 ---",
            "name: Bruno Costa",
            "sex: M",
            "age: 44",
            "country_code: PT",
            "passport: LR750534",
            "number_of_flights: 1",
            "number_of_reservations: 1",
            "total_spent: 210.000",
        ]

    def test_inactive_or_unknown_user(self, database):
        assert run(database, "1 D") == []
        assert run(database, "1 Nobody") == []

    def test_flight(self, database):
        assert run(database, "1 0000000001") == [
            "TAP;A320;LIS;OPO;2023/05/01 10:00:00;2023/05/01 11:00:00;3;600"
        ]

    def test_reservation(self, database):
        assert run(database, "1 Book0000000002") == [
            "HTL1001;Hotel Lisboa;4;2023/07/10;2023/07/12;True;2;210.000"
        ]

    def test_unknown_ids(self, database):
        assert run(database, "1 0000000099") == []
        assert run(database, "1 Book0000000099") == []


class TestQuery2:
    """Travels of a user."""

    def test_all(self, database):
        assert run(database, "2 A") == [
            "Book0000000003;2023/07/11;reservation",
            "Book0000000001;2023/06/01;reservation",
            "0000000002;2023/05/03;flight",
            "0000000001;2023/05/01;flight",
            "Book0000000004;2022/02/01;reservation",
            "0000000003;2022/01/10;flight",
        ]

    def test_flights_only(self, database):
        assert run(database, "2 A flights") == [
            "0000000002;2023/05/03",
            "0000000001;2023/05/01",
            "0000000003;2022/01/10",
        ]

    def test_reservations_only(self, database):
        assert run(database, "2 B reservations") == ["Book0000000002;2023/07/10"]

    def test_inactive_user(self, database):
        assert run(database, "2 D") == []


class TestQuery3:
    """Average hotel rating."""

    def test_unrated_reservations_are_ignored(self, database):
        assert run(database, "3 HTL1001") == ["3.000"]

    def test_formatted(self, database):
        assert run(database, "3F HTL2002") == ["--- 1 ---", "rating: 5.000"]

    def test_unknown_hotel(self, database):
        assert run(database, "3 HTL9999") == []


class TestQuery4:
    """Reservations of a hotel."""

    def test_most_recent_first(self, database):
        assert run(database, "4 HTL1001") == [
            "Book0000000003;2023/07/11;2023/07/15;A;2;336.000",
            "Book0000000002;2023/07/10;2023/07/12;B;;210.000",
            "Book0000000001;2023/06/01;2023/06/04;A;4;315.000",
        ]


class TestQuery5:
    """Departures from an airport."""

    def test_window(self, database):
        line = '5 LIS "2023/05/01 00:00:00" "2023/05/31 23:59:59"'
        assert run(database, line) == [
            "0000000002;2023/05/03 08:00:00;MAD;TAP;A320",
            "0000000001;2023/05/01 10:00:00;OPO;TAP;A320",
        ]

    def test_bounds_are_inclusive(self, database):
        line = '5 LIS "2023/05/01 10:00:00" "2023/05/03 07:59:59"'
        assert run(database, line) == ["0000000001;2023/05/01 10:00:00;OPO;TAP;A320"]

    def test_airport_code_case(self, database):
        line = '5 opo "2022/01/01 00:00:00" "2022/12/31 23:59:59"'
        assert run(database, line) == ["0000000003;2022/01/10 12:00:00;LIS;TAP;A320"]

    def test_requires_quoted_date_times(self):
        assert parse_query_line("5 LIS 2023/05/01 2023/05/31", 1, default_registry()) is None


class TestQuery6:
    """Busiest airports of a year."""

    def test_ranking(self, database):
        assert run(database, "6 2023 10") == ["LIS;4", "OPO;3", "MAD;1"]

    def test_limit(self, database):
        assert run(database, "6 2023 2") == ["LIS;4", "OPO;3"]

    def test_ties_by_name(self, database):
        assert run(database, "6 2022 5") == ["LIS;1", "OPO;1"]

    def test_year_without_flights(self, database):
        assert run(database, "6 2019 5") == []


class TestQuery7:
    """Median departure delays."""

    def test_ranking(self, database):
        assert run(database, "7 10") == ["OPO;1800", "LIS;300"]
        assert run(database, "7 1") == ["OPO;1800"]

    @pytest.mark.parametrize(
        "values,expected",
        [([5], 5), ([3, 1, 2], 2), ([0, 600], 300), ([1, 2], 1), ([10, 1, 7, 4], 5)],
    )
    def test_median(self, values, expected):
        assert median(values) == expected


class TestQuery8:
    """Hotel revenue."""

    def test_partial_overlap(self, database):
        assert run(database, "8 HTL1001 2023/07/11 2023/07/12") == ["360"]

    def test_whole_year(self, database):
        assert run(database, "8 HTL1001 2023/01/01 2023/12/31") == ["1100"]

    def test_clipped_end_date_is_charged(self, database):
        assert run(database, "8 HTL1001 2023/06/01 2023/06/30") == ["400"]
        assert run(database, "8 HTL1001 2023/06/04 2023/06/04") == ["100"]
        assert run(database, "8 HTL1001 2023/06/03 2023/06/03") == ["100"]

    def test_no_reservations(self, database):
        assert run(database, "8 HTL9999 2023/01/01 2023/12/31") == ["0"]


class TestQuery9:
    """Users by name prefix."""

    def test_prefix(self, database):
        assert run(database, "9 Ana") == ["A;Ana Silva"]

    def test_quoted_prefix(self, database):
        assert run(database, '9 "Bruno C"') == ["B;Bruno Costa"]

    def test_all_active_users_sorted(self, database):
        assert run(database, '9 ""') == ["C;Ágata Lopes", "A;Ana Silva", "B;Bruno Costa"]

    def test_collation_key(self):
        assert collation_key("Ágata") < collation_key("Ana")
        assert collation_key("ana") < collation_key("Ana Maria")
        assert collation_key("O'Neil")[0] == "oneil"


class TestQuery10:
    """Activity summaries."""

    def test_years(self, database):
        assert run(database, "10") == [
            "2014;1;0;0;0;0",
            "2020;1;0;0;0;0",
            "2021;2;0;0;0;0",
            "2022;0;1;1;1;1",
            "2023;0;2;4;3;3",
        ]

    def test_months(self, database):
        assert run(database, "10 2023") == [
            "5;0;2;4;3;0",
            "6;0;0;0;0;1",
            "7;0;0;0;0;2",
        ]

    def test_days(self, database):
        assert run(database, "10F 2023 5") == [
            "--- 1 ---",
            "day: 1",
            "users: 0",
            "flights: 1",
            "passengers: 3",
            "unique_passengers: 3",
            "reservations: 0",
            "",
            "--- 2 ---",
            "day: 3",
            "users: 0",
            "flights: 1",
            "passengers: 1",
            "unique_passengers: 1",
            "reservations: 0",
        ]

    def test_arguments(self):
        assert q10_arguments([]) == ()
        assert q10_arguments(["2023", "05"]) == (2023, 5)
        with pytest.raises(QueryArgumentError):
            q10_arguments(["2023", "13"])
        with pytest.raises(QueryArgumentError):
            q10_arguments(["1", "2", "3"])

    def test_bucket_key(self):
        date = parse_date("2023/05/17")
        assert bucket_key((), date) == 2023
        assert bucket_key((2023,), date) == 5
        assert bucket_key((2023, 5), date) == 17
        assert bucket_key((2022,), date) is None
        assert bucket_key((2023, 6), date) is None


class TestBatchOfMixedQueries:
    """Several queries run together."""

    def test_statistics_shared_within_type(self, database):
        registry = default_registry()
        lines = ["1 A", "3 HTL1001", "1 B", "1 A"]
        instances = QueryInstanceList(parse_query_line(line, 1, registry) for line in lines)
        writers = [QueryWriter() for _ in instances]

        dispatch(database, instances, writers, registry)

        assert writers[0].lines == writers[3].lines == ["Ana Silva;F;33;PT;P1;3;3;751.000"]
        assert writers[1].lines == ["3.000"]
        assert writers[2].lines[0].startswith("Bruno Costa;M;44")
