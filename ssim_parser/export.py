"""Serialize flight occurrences as JSON or CSV."""

import csv
import json
from typing import Iterable, TextIO

from ssim_parser.transform.flights import OCCURRENCE_FIELDS, FlightOccurrence

FORMATS = ("json", "csv")


def write_json(occurrences: Iterable[FlightOccurrence], stream: TextIO) -> int:
    rows = [occurrence.to_dict() for occurrence in occurrences]
    json.dump(rows, stream, indent=2)
    stream.write("\n")
    return len(rows)


def write_csv(occurrences: Iterable[FlightOccurrence], stream: TextIO) -> int:
    writer = csv.DictWriter(stream, fieldnames=OCCURRENCE_FIELDS, lineterminator="\n")
    writer.writeheader()
    count = 0
    for occurrence in occurrences:
        writer.writerow(occurrence.to_dict())
        count += 1
    return count


def write_occurrences(occurrences: Iterable[FlightOccurrence], stream: TextIO, fmt: str = "json") -> int:
    """Write occurrences in ``fmt`` and return how many were written."""
    if fmt == "json":
        return write_json(occurrences, stream)
    if fmt == "csv":
        return write_csv(occurrences, stream)
    raise ValueError(f"Unsupported output format {fmt!r}; expected one of {FORMATS}")


__all__ = ["FORMATS", "write_csv", "write_json", "write_occurrences"]
