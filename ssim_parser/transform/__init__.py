"""Transformation helpers turning decoded SSIM records into flight occurrences."""

from ssim_parser.transform.flights import (
    OCCURRENCE_FIELDS,
    FlightOccurrence,
    expand_record,
    materialize,
    normalize_flight_number,
)

__all__ = [
    "FlightOccurrence",
    "OCCURRENCE_FIELDS",
    "expand_record",
    "materialize",
    "normalize_flight_number",
]
