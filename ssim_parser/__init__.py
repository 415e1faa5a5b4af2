"""Decode IATA SSIM schedule records and expand them into dated flight occurrences."""

from ssim_parser.errors import (
    BadDateError,
    BadTimeError,
    DecodeError,
    EmptySourceError,
    InvalidFlightNumberError,
    LineFailedError,
    MaterializeError,
    SchemaError,
    SourceError,
    SsimError,
    TruncatedRecordError,
    UnknownSchemaError,
)
from ssim_parser.parser import ParseResult, SsimParser, parse_lines, parse_text
from ssim_parser.transform import FlightOccurrence

__version__ = "1.0.0"

__all__ = [
    "BadDateError",
    "BadTimeError",
    "DecodeError",
    "EmptySourceError",
    "FlightOccurrence",
    "InvalidFlightNumberError",
    "LineFailedError",
    "MaterializeError",
    "ParseResult",
    "SchemaError",
    "SourceError",
    "SsimError",
    "SsimParser",
    "TruncatedRecordError",
    "UnknownSchemaError",
    "parse_lines",
    "parse_text",
]
