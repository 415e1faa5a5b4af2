"""Materialize decoded SSIM records into dated flight occurrences."""

import logging
import re
from dataclasses import dataclass, fields
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

from ssim_parser.calendar import expand, parse_ssim_date, weekdays_from_mask
from ssim_parser.decoder import DecodedRecord
from ssim_parser.errors import BadTimeError, InvalidFlightNumberError

LOGGER = logging.getLogger(__name__)

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
UID_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"

_HHMM_RE = re.compile(r"^([0-9]{2})([0-9]{2})$")
_UTC_OFFSET_RE = re.compile(r"^([+-])([0-9]{2})([0-9]{2})$")
_LEADING_DIGITS_RE = re.compile(r"^[0-9]+")

MAX_UTC_OFFSET = timedelta(hours=14)


@dataclass(frozen=True)
class FlightOccurrence:
    """One concrete dated flight expanded from an SSIM record.

    Local datetimes are naive civil times at the respective station; UTC
    datetimes are timezone-aware.
    """

    uid: str
    airline_designator: str
    service_type: str
    flight_number: str
    departure_datetime: datetime
    arrival_datetime: datetime
    departure_utc_datetime: datetime
    arrival_utc_datetime: datetime
    departure_iata: str
    arrival_iata: str
    aircraft_type: str
    aircraft_configuration: str

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for item in fields(self):
            value = getattr(self, item.name)
            if isinstance(value, datetime):
                value = value.strftime(DATETIME_FORMAT)
            result[item.name] = value
        return result

    def to_db_params(self, run_id: Optional[str] = None) -> Dict[str, Any]:
        if not run_id:
            raise ValueError("run_id must be provided")
        params = {item.name: getattr(self, item.name) for item in fields(self)}
        params["run_id"] = run_id
        return params


OCCURRENCE_FIELDS: Tuple[str, ...] = tuple(item.name for item in fields(FlightOccurrence))


def parse_hhmm(value: str, field: str = "time") -> time:
    """Parse a four-digit ``HHMM`` wall-clock time."""
    match = _HHMM_RE.match(value or "")
    if not match:
        raise BadTimeError(field, value)
    hours, minutes = (int(part) for part in match.groups())
    if hours > 23 or minutes > 59:
        raise BadTimeError(field, value)
    return time(hours, minutes)


def parse_utc_offset(value: str, field: str = "utc_offset") -> timedelta:
    """Parse a signed ``+HHMM`` / ``-HHMM`` UTC offset."""
    match = _UTC_OFFSET_RE.match(value or "")
    if not match:
        raise BadTimeError(field, value)
    sign, hours, minutes = match.groups()
    if int(minutes) > 59:
        raise BadTimeError(field, value)
    offset = timedelta(hours=int(hours), minutes=int(minutes))
    if offset > MAX_UTC_OFFSET:
        raise BadTimeError(field, value)
    return -offset if sign == "-" else offset


def parse_date_variation(value: str) -> int:
    """Integer value of the leading digits; blank or non-numeric text is 0."""
    match = _LEADING_DIGITS_RE.match((value or "").strip())
    return int(match.group(0)) if match else 0


def normalize_flight_number(value: str) -> int:
    """Replace each letter by its alphabet position and read the result as an integer.

    ``"5D"`` becomes ``"54"`` -> 54 and ``"AB1"`` becomes ``"121"`` -> 121.
    """
    if not value:
        raise InvalidFlightNumberError(value)

    digits: List[str] = []
    for ch in value:
        if "0" <= ch <= "9":
            digits.append(ch)
        elif "A" <= ch <= "Z":
            digits.append(str(ord(ch) - ord("A") + 1))
        elif "a" <= ch <= "z":
            digits.append(str(ord(ch) - ord("a") + 1))
        else:
            raise InvalidFlightNumberError(value)
    return int("".join(digits))


def build_uid(local_departure: datetime, flight_number: str) -> str:
    return local_departure.strftime(UID_TIMESTAMP_FORMAT) + str(
        normalize_flight_number(flight_number)
    )


def _to_utc(local: datetime, offset: timedelta) -> datetime:
    return (local - offset).replace(tzinfo=timezone.utc)


def materialize(record: DecodedRecord, day: date) -> FlightOccurrence:
    """Build the occurrence of ``record`` departing on local date ``day``."""
    departure_time = parse_hhmm(record["aircraft_departure_time"], "aircraft_departure_time")
    arrival_time = parse_hhmm(record["aircraft_arrival_time"], "aircraft_arrival_time")
    departure_offset = parse_utc_offset(
        record["utc_local_departure_time_variant"], "utc_local_departure_time_variant"
    )
    arrival_offset = parse_utc_offset(
        record["utc_local_arrival_time_variant"], "utc_local_arrival_time_variant"
    )
    variation = parse_date_variation(record["date_variation"])

    local_departure = datetime.combine(day, departure_time)
    local_arrival = datetime.combine(day, arrival_time) + timedelta(days=variation)

    return FlightOccurrence(
        uid=build_uid(local_departure, record["flight_number"]),
        airline_designator=record["airline_designator"],
        service_type=record["service_type"],
        flight_number=record["flight_number"],
        departure_datetime=local_departure,
        arrival_datetime=local_arrival,
        departure_utc_datetime=_to_utc(local_departure, departure_offset),
        arrival_utc_datetime=_to_utc(local_arrival, arrival_offset),
        departure_iata=record["departure_station"],
        arrival_iata=record["arrival_station"],
        aircraft_type=record["aircraft_type"],
        aircraft_configuration=record["aircraft_configuration_version"],
    )


def expand_record(record: DecodedRecord) -> List[FlightOccurrence]:
    """Expand one decoded record into its occurrences, in calendar order."""
    start = parse_ssim_date(record["operation_start_date"], "operation_start_date")
    end = parse_ssim_date(record["operation_end_date"], "operation_end_date")
    weekdays = weekdays_from_mask(record["operation_days_of_week"])

    variation = parse_date_variation(record["date_variation"])
    if variation > 1:
        LOGGER.debug(
            "Unusual date variation %s for %s%s",
            variation,
            record["airline_designator"],
            record["flight_number"],
        )

    return [materialize(record, day) for day in expand(start, end, weekdays)]


__all__ = [
    "FlightOccurrence",
    "OCCURRENCE_FIELDS",
    "DATETIME_FORMAT",
    "parse_hhmm",
    "parse_utc_offset",
    "parse_date_variation",
    "normalize_flight_number",
    "build_uid",
    "materialize",
    "expand_record",
]
