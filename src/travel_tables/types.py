"""Typed value parsers and their packed integer encodings.

Every packed value is an ``int``. Callers should only go through the named
``make_*``, getter and ``format_*`` helpers below and never assume a layout.
"""

from __future__ import annotations

import re
from enum import Enum

from travel_tables.errors import ParseError
from travel_tables.parsing.delimited import FixedDelimParser

# Simplified calendar: every month has 31 days
DAYS_PER_MONTH = 31
MONTHS_PER_YEAR = 12
SECONDS_PER_DAY = 24 * 60 * 60

_DATE_RE = re.compile(r"([0-9]{4})/([0-9]{2})/([0-9]{2})")
_TIME_RE = re.compile(r"([0-9]{2}):([0-9]{2}):([0-9]{2})")
_DIGITS_RE = re.compile(r"[0-9]+")
_LETTERS2_RE = re.compile(r"[A-Za-z]{2}")
_LETTERS3_RE = re.compile(r"[A-Za-z]{3}")
_HOTEL_ID_RE = re.compile(r"HTL([0-9]{1,5})")
_RESERVATION_ID_RE = re.compile(r"Book([0-9]+)")

UINT16_MAX = 0xFFFF
UINT32_MAX = 0xFFFFFFFF


# Dates


def make_date(year: int, month: int, day: int) -> int:
    """Pack a date, validating its components."""
    if not 0 <= year <= 9999:
        raise ParseError(f"Year out of range: {year}")
    if not 1 <= month <= MONTHS_PER_YEAR:
        raise ParseError(f"Month out of range: {month}")
    if not 1 <= day <= DAYS_PER_MONTH:
        raise ParseError(f"Day out of range: {day}")
    return (year << 16) | (month << 8) | day


def parse_date(text: str) -> int:
    """Parse ``YYYY/MM/DD`` into a packed date."""
    match = _DATE_RE.fullmatch(text)
    if match is None:
        raise ParseError(f"Invalid date: {text!r}")
    year, month, day = (int(group) for group in match.groups())
    return make_date(year, month, day)


def date_year(date: int) -> int:
    return date >> 16


def date_month(date: int) -> int:
    return (date >> 8) & 0xFF


def date_day(date: int) -> int:
    return date & 0xFF


def date_ordinal(date: int) -> int:
    """Return the day number of a date in the simplified calendar."""
    return (
        date_year(date) * MONTHS_PER_YEAR * DAYS_PER_MONTH
        + date_month(date) * DAYS_PER_MONTH
        + date_day(date)
    )


def date_diff(a: int, b: int) -> int:
    """Return ``a - b`` in days."""
    return date_ordinal(a) - date_ordinal(b)


def format_date(date: int) -> str:
    return f"{date_year(date):04d}/{date_month(date):02d}/{date_day(date):02d}"


# Times of day


def make_time(hours: int, minutes: int, seconds: int) -> int:
    """Pack a time of day, validating its components."""
    if not (0 <= hours <= 23 and 0 <= minutes <= 59 and 0 <= seconds <= 59):
        raise ParseError(f"Invalid time: {hours}:{minutes}:{seconds}")
    return (hours << 16) | (minutes << 8) | seconds


def parse_time(text: str) -> int:
    """Parse ``HH:MM:SS`` into a packed time."""
    match = _TIME_RE.fullmatch(text)
    if match is None:
        raise ParseError(f"Invalid time: {text!r}")
    hours, minutes, seconds = (int(group) for group in match.groups())
    return make_time(hours, minutes, seconds)


def time_hours(time: int) -> int:
    return time >> 16


def time_minutes(time: int) -> int:
    return (time >> 8) & 0xFF


def time_seconds(time: int) -> int:
    return time & 0xFF


def time_to_seconds(time: int) -> int:
    """Return the number of seconds since midnight."""
    return time_hours(time) * 3600 + time_minutes(time) * 60 + time_seconds(time)


def format_time(time: int) -> str:
    return f"{time_hours(time):02d}:{time_minutes(time):02d}:{time_seconds(time):02d}"


# Date-times


def make_datetime(date: int, time: int = 0) -> int:
    return (date << 24) | time


def parse_datetime(text: str) -> int:
    """Parse ``YYYY/MM/DD HH:MM:SS`` into a packed date-time."""
    date_part, sep, time_part = text.partition(" ")
    if not sep:
        raise ParseError(f"Invalid date-time: {text!r}")
    return make_datetime(parse_date(date_part), parse_time(time_part))


def datetime_date(datetime: int) -> int:
    return datetime >> 24


def datetime_time(datetime: int) -> int:
    return datetime & 0xFFFFFF


def datetime_diff(a: int, b: int) -> int:
    """Return ``a - b`` in seconds."""
    days = date_diff(datetime_date(a), datetime_date(b))
    seconds = time_to_seconds(datetime_time(a)) - time_to_seconds(datetime_time(b))
    return days * SECONDS_PER_DAY + seconds


def format_datetime(datetime: int) -> str:
    return f"{format_date(datetime_date(datetime))} {format_time(datetime_time(datetime))}"


def age_at(birth_date: int, reference_date: int) -> int:
    """Return the age in whole years at the reference date."""
    age = date_year(reference_date) - date_year(birth_date)
    birthday = (date_month(birth_date), date_day(birth_date))
    if (date_month(reference_date), date_day(reference_date)) < birthday:
        age -= 1
    return age


# Location codes


def parse_country_code(text: str) -> int:
    """Parse a two letter country code (uppercased)."""
    if _LETTERS2_RE.fullmatch(text) is None:
        raise ParseError(f"Invalid country code: {text!r}")
    upper = text.upper()
    return (ord(upper[0]) << 8) | ord(upper[1])


def format_country_code(code: int) -> str:
    return chr(code >> 8) + chr(code & 0xFF)


def parse_airport_code(text: str) -> int:
    """Parse a three letter airport code (uppercased)."""
    if _LETTERS3_RE.fullmatch(text) is None:
        raise ParseError(f"Invalid airport code: {text!r}")
    upper = text.upper()
    return (ord(upper[0]) << 16) | (ord(upper[1]) << 8) | ord(upper[2])


def format_airport_code(code: int) -> str:
    return chr(code >> 16) + chr((code >> 8) & 0xFF) + chr(code & 0xFF)


# Identifiers


def parse_positive_int(text: str) -> int:
    """Parse a non-empty string of decimal digits."""
    if _DIGITS_RE.fullmatch(text) is None:
        raise ParseError(f"Invalid integer: {text!r}")
    return int(text)


def parse_hotel_id(text: str) -> int:
    """Parse ``HTL`` followed by up to five digits."""
    match = _HOTEL_ID_RE.fullmatch(text)
    if match is None or int(match.group(1)) > UINT16_MAX:
        raise ParseError(f"Invalid hotel id: {text!r}")
    return int(match.group(1))


def format_hotel_id(hotel_id: int) -> str:
    return f"HTL{hotel_id}"


def parse_reservation_id(text: str) -> int:
    """Parse ``Book`` followed by a decimal number."""
    match = _RESERVATION_ID_RE.fullmatch(text)
    if match is None or int(match.group(1)) > UINT32_MAX:
        raise ParseError(f"Invalid reservation id: {text!r}")
    return int(match.group(1))


def format_reservation_id(reservation_id: int) -> str:
    return f"Book{reservation_id:010d}"


def parse_flight_id(text: str) -> int:
    """Parse an all-digit flight id."""
    flight_id = parse_positive_int(text)
    if flight_id > UINT32_MAX:
        raise ParseError(f"Flight id out of range: {text!r}")
    return flight_id


def format_flight_id(flight_id: int) -> str:
    return f"{flight_id:010d}"


# Enumerations and flags


class Sex(Enum):
    """Sex of a user."""

    M = "M"
    F = "F"


def parse_sex(text: str) -> Sex:
    try:
        return Sex(text)
    except ValueError:
        raise ParseError(f"Invalid sex: {text!r}") from None


class AccountStatus(Enum):
    """Status of a user account."""

    ACTIVE = "active"
    INACTIVE = "inactive"


def parse_account_status(text: str) -> AccountStatus:
    """Parse ``active``/``inactive`` in any letter case."""
    try:
        return AccountStatus(text.lower())
    except ValueError:
        raise ParseError(f"Invalid account status: {text!r}") from None


_BREAKFAST_VALUES = {
    "": False,
    "0": False,
    "f": False,
    "false": False,
    "1": True,
    "t": True,
    "true": True,
}


def parse_includes_breakfast(text: str) -> bool:
    try:
        return _BREAKFAST_VALUES[text.lower()]
    except KeyError:
        raise ParseError(f"Invalid includes_breakfast value: {text!r}") from None


def format_includes_breakfast(value: bool) -> str:
    return "True" if value else "False"


# Free-form strings


def _email_user(_, token, __):
    if not token:
        raise ParseError("Empty email user")


def _email_domain_name(_, token, __):
    if not token:
        raise ParseError("Empty email domain")


def _email_tld(_, token, __):
    if len(token) < 2:
        raise ParseError(f"Email TLD too short: {token!r}")


_EMAIL_DOMAIN_PARSER = FixedDelimParser(".", (_email_domain_name, _email_tld))


def _email_domain(_, token, __):
    _EMAIL_DOMAIN_PARSER.parse(token)


_EMAIL_PARSER = FixedDelimParser("@", (_email_user, _email_domain))


def validate_email(text: str) -> str:
    """Validate ``user@domain.tld`` and return the address unchanged."""
    try:
        _EMAIL_PARSER.parse(text)
    except ParseError:
        raise ParseError(f"Invalid email: {text!r}") from None
    return text


def parse_phone(text: str) -> str:
    return require_non_empty(text, "phone")


def require_non_empty(text: str, field_name: str) -> str:
    if not text:
        raise ParseError(f"Empty {field_name}")
    return text
