"""Job runner orchestrating source loading, parsing, and persistence."""

import logging
import uuid
from dataclasses import dataclass, field
from typing import List, Optional

from ssim_parser.config import AppConfig
from ssim_parser.db import DatabaseClient
from ssim_parser.errors import LineFailedError
from ssim_parser.logging_utils import perf, perf_span
from ssim_parser.parser import parse_text
from ssim_parser.persistence import ensure_occurrences_table, upsert_occurrences
from ssim_parser.sources import SourceClient, load_source
from ssim_parser.transform import FlightOccurrence

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunConfig:
    source: str
    version: int = 3
    workers: int = 1
    fail_fast: bool = False
    fetch_attempts: int = 3
    fetch_delay_seconds: float = 2.0
    persist: bool = False
    failure_threshold: int = 0


@dataclass
class JobResult:
    run_id: str
    occurrences: List[FlightOccurrence] = field(default_factory=list)
    failures: List[LineFailedError] = field(default_factory=list)
    persisted: int = 0
    degraded: bool = False


@perf("jobs.run_job", tags={"component": "jobs"})
def run_job(
    config: AppConfig,
    job_config: RunConfig,
    *,
    db_client: Optional[DatabaseClient] = None,
    source_client: Optional[SourceClient] = None,
) -> JobResult:
    """Load, parse and optionally persist one SSIM source.

    With ``fail_fast`` the first failing line aborts the run by raising
    ``LineFailedError``; otherwise failures are logged and counted against
    ``failure_threshold``.
    """
    run_id = str(uuid.uuid4())
    job_name = getattr(config, "app_name", "ssim-parser")
    LOGGER.info(
        "%s run %s started for source %s (version %s)",
        job_name,
        run_id,
        _describe_source(job_config.source),
        job_config.version,
    )

    with perf_span("jobs.load_source", tags={"component": "jobs"}, logger=LOGGER):
        text = load_source(
            job_config.source,
            client=source_client,
            attempts=job_config.fetch_attempts,
            delay_seconds=job_config.fetch_delay_seconds,
        )

    result = parse_text(
        text,
        version=job_config.version,
        workers=job_config.workers,
        on_error="raise" if job_config.fail_fast else "collect",
    )
    job_result = JobResult(
        run_id=run_id,
        occurrences=result.occurrences,
        failures=result.failures,
    )

    for failure in result.failures:
        LOGGER.warning("Line %s rejected (%s): %r", failure.index, failure.cause, failure.line)

    if job_config.persist:
        if db_client is None:
            LOGGER.warning("Persistence requested but no database client is configured")
        else:
            ensure_occurrences_table(db_client)
            job_result.persisted = upsert_occurrences(db_client, run_id, result.occurrences)

    job_result.degraded = len(result.failures) > job_config.failure_threshold
    LOGGER.log(
        logging.WARNING if job_result.degraded else logging.INFO,
        "Run summary: records=%s occurrences=%s failures=%s persisted=%s threshold=%s status=%s",
        result.records_matched,
        len(result.occurrences),
        len(result.failures),
        job_result.persisted,
        job_config.failure_threshold,
        "DEGRADED" if job_result.degraded else "OK",
    )
    LOGGER.info("%s run %s completed", job_name, run_id)
    return job_result


def _describe_source(source: str) -> str:
    """Short description of a source for logs; raw text is never logged whole."""
    if "\n" in source or "\r" in source or len(source) > 120:
        return f"<raw text, {len(source)} characters>"
    return source


__all__ = ["JobResult", "RunConfig", "run_job"]
