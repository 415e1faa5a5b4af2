"""Command-line interface for expanding an SSIM schedule into flight occurrences."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ssim_parser.config import DEFAULT_LOG_DIR, AppConfig, base_directory, load_config
from ssim_parser.errors import LineFailedError, SsimError
from ssim_parser.export import FORMATS, write_occurrences
from ssim_parser.jobs import RunConfig, run_job
from ssim_parser.logging_utils import configure_logging, perf_span
from ssim_parser.sources import SourceClient

LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_PARSE_ERROR = 2
EXIT_DEGRADED = 3


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be zero or more, got {value}")
    return number


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Decode an SSIM schedule and expand it into dated flight occurrences."
    )
    parser.add_argument(
        "source",
        help="SSIM file path, http(s) URL, or raw SSIM text.",
    )
    parser.add_argument(
        "--version",
        type=_positive_int,
        default=None,
        help="SSIM record version to decode (defaults to SSIM_VERSION or 3).",
    )
    parser.add_argument(
        "--workers",
        type=_positive_int,
        default=None,
        help="Worker threads used to expand lines (defaults to SSIM_WORKERS or 1).",
    )
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Abort on the first malformed record instead of reporting it and continuing.",
    )
    parser.add_argument(
        "--format",
        choices=FORMATS,
        default="json",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write occurrences to this file instead of stdout.",
    )
    parser.add_argument(
        "--persist",
        action="store_true",
        help="Upsert occurrences into PostgreSQL (requires DATABASE_URL).",
    )
    parser.add_argument(
        "--failure-threshold",
        type=_non_negative_int,
        default=0,
        help="Number of rejected lines tolerated before the run is reported as degraded (default: 0).",
    )
    parser.add_argument(
        "--fetch-attempts",
        type=_positive_int,
        default=3,
        help="Download attempts for URL sources (default: 3).",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    try:
        config = load_config(require_database=args.persist)
    except ValueError as exc:
        # Fall back to a default log location so failures are still captured per run.
        fallback = AppConfig(
            database_url=None,
            log_directory=base_directory() / DEFAULT_LOG_DIR,
            log_level="INFO",
        )
        configure_logging(fallback)
        LOGGER.error("Failed to load configuration: %s", exc)
        for handler in logging.getLogger().handlers:
            handler.flush()
        return EXIT_CONFIG_ERROR

    configure_logging(config)

    db_client = None
    if args.persist:
        from ssim_parser.db import DatabaseClient

        db_client = DatabaseClient(config.database_url)

    source_client = SourceClient(timeout=config.source_timeout)
    run_config = RunConfig(
        source=args.source,
        version=config.schema_version if args.version is None else args.version,
        workers=config.parse_workers if args.workers is None else args.workers,
        fail_fast=args.fail_fast,
        fetch_attempts=args.fetch_attempts,
        persist=args.persist,
        failure_threshold=args.failure_threshold,
    )

    try:
        with perf_span("job.total", tags={"app": config.app_name, "version": run_config.version}):
            result = run_job(config, run_config, db_client=db_client, source_client=source_client)
    except LineFailedError as exc:
        LOGGER.error("Aborting on line %s: %s", exc.index, exc.cause)
        return EXIT_PARSE_ERROR
    except SsimError as exc:
        LOGGER.error("Run failed: %s", exc)
        return EXIT_PARSE_ERROR
    finally:
        source_client.close()
        if db_client is not None:
            db_client.close()

    if args.output is not None:
        with args.output.open("w", encoding="utf-8", newline="") as handle:
            write_occurrences(result.occurrences, handle, args.format)
        LOGGER.info("Wrote %s occurrences to %s", len(result.occurrences), args.output)
    else:
        write_occurrences(result.occurrences, sys.stdout, args.format)

    return EXIT_DEGRADED if result.degraded else EXIT_OK


if __name__ == "__main__":  # pragma: no cover - module entrypoint
    raise SystemExit(main())
