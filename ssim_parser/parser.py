"""Batch parsing of SSIM text into a sorted list of flight occurrences."""

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from ssim_parser.decoder import decode
from ssim_parser.errors import EmptySourceError, LineFailedError, SsimError
from ssim_parser.logging_utils import perf
from ssim_parser.schema.fields import Schema
from ssim_parser.schema.registry import SchemaRegistry, default_registry
from ssim_parser.sources import SourceClient, load_source
from ssim_parser.transform.flights import FlightOccurrence, expand_record

LOGGER = logging.getLogger(__name__)

DEFAULT_VERSION = 3
ON_ERROR_CHOICES = ("collect", "raise")

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")

# Outcome of one line: (matched, occurrences, failure)
_LineOutcome = Tuple[bool, List[FlightOccurrence], Optional[LineFailedError]]


@dataclass
class ParseResult:
    """Sorted occurrences plus the line failures collected along the way."""

    occurrences: List[FlightOccurrence] = field(default_factory=list)
    failures: List[LineFailedError] = field(default_factory=list)
    lines_read: int = 0
    records_matched: int = 0

    @property
    def ok(self) -> bool:
        return not self.failures

    def raise_for_failures(self) -> None:
        """Raise the first collected failure, if any."""
        if self.failures:
            raise self.failures[0]


def split_lines(text: str) -> List[str]:
    return _LINE_BREAK_RE.split(text)


def sort_occurrences(occurrences: Iterable[FlightOccurrence]) -> List[FlightOccurrence]:
    """Stable ascending sort by UTC departure."""
    return sorted(occurrences, key=lambda occurrence: occurrence.departure_utc_datetime)


def _process_line(schema: Schema, index: int, raw_line: str) -> _LineOutcome:
    line = raw_line.strip()
    if not line or line[0] != schema.record_type:
        return False, [], None
    try:
        record = decode(schema, line)
        return True, expand_record(record), None
    except SsimError as exc:
        return True, [], LineFailedError(index, line, exc)


@perf("parser.parse_lines", tags={"component": "parser"})
def parse_lines(
    lines: Iterable[str],
    *,
    version: int = DEFAULT_VERSION,
    registry: Optional[SchemaRegistry] = None,
    on_error: str = "collect",
    workers: int = 1,
) -> ParseResult:
    """Decode and expand every matching line, then sort by UTC departure.

    Lines are trimmed; blank lines and lines whose first character is not the
    schema's record type are skipped. A decode or materialize failure on a
    matching line becomes a ``LineFailedError``: with ``on_error="raise"`` the
    lowest-index one is raised, with ``"collect"`` all are returned on the
    result.
    """
    if on_error not in ON_ERROR_CHOICES:
        raise ValueError(f"on_error must be one of {ON_ERROR_CHOICES}, got {on_error!r}")
    if workers < 1:
        raise ValueError("workers must be a positive integer")

    raw_lines: Sequence[str] = list(lines)
    if not raw_lines or (len(raw_lines) == 1 and raw_lines[0] == ""):
        raise EmptySourceError("Data source cannot be empty.")

    schema = (registry or default_registry()).schema_for(version)

    if workers > 1 and len(raw_lines) > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            outcomes = list(
                executor.map(
                    lambda item: _process_line(schema, item[0], item[1]),
                    enumerate(raw_lines),
                )
            )
    else:
        outcomes = [_process_line(schema, index, line) for index, line in enumerate(raw_lines)]

    result = ParseResult(lines_read=len(raw_lines))
    collected: List[FlightOccurrence] = []
    for matched, occurrences, failure in outcomes:
        if matched:
            result.records_matched += 1
        if failure is not None:
            LOGGER.warning("Skipping SSIM line %s: %s", failure.index, failure.cause)
            result.failures.append(failure)
            continue
        collected.extend(occurrences)

    result.occurrences = sort_occurrences(collected)
    LOGGER.info(
        "Parsed SSIM version=%s lines=%s records=%s occurrences=%s failures=%s",
        version,
        result.lines_read,
        result.records_matched,
        len(result.occurrences),
        len(result.failures),
    )

    if on_error == "raise":
        result.raise_for_failures()
    return result


def parse_text(text: str, **kwargs) -> ParseResult:
    """Split raw SSIM text on any line terminator and parse it."""
    if not text:
        raise EmptySourceError("Data source cannot be empty.")
    return parse_lines(split_lines(text), **kwargs)


class SsimParser:
    """Load-then-parse facade over ``load_source`` and ``parse_lines``.

    Example:
        result = SsimParser().load("schedule.ssim").parse()
    """

    def __init__(
        self,
        version: int = DEFAULT_VERSION,
        *,
        registry: Optional[SchemaRegistry] = None,
        workers: int = 1,
        on_error: str = "collect",
    ) -> None:
        self._registry = registry or default_registry()
        self._workers = workers
        self._on_error = on_error
        self._lines: List[str] = []
        self.set_version(version)

    @property
    def version(self) -> int:
        return self._version

    def supported_versions(self) -> List[int]:
        return self._registry.versions()

    def set_version(self, version: int) -> "SsimParser":
        self._registry.schema_for(version)
        self._version = version
        return self

    def load(self, source: str, client: Optional[SourceClient] = None) -> "SsimParser":
        """Load SSIM text from a file path, URL or raw string."""
        self._lines = split_lines(load_source(source, client=client))
        return self

    def parse(self) -> ParseResult:
        if not self._lines:
            raise EmptySourceError("No data loaded; call load() first.")
        return parse_lines(
            self._lines,
            version=self._version,
            registry=self._registry,
            on_error=self._on_error,
            workers=self._workers,
        )


__all__ = [
    "ParseResult",
    "SsimParser",
    "parse_lines",
    "parse_text",
    "sort_occurrences",
    "split_lines",
]
