"""Database persistence helpers for expanded flight occurrences."""

import logging
from typing import Iterable

from ssim_parser.db import DatabaseClient
from ssim_parser.logging_utils import perf
from ssim_parser.transform import FlightOccurrence

LOGGER = logging.getLogger(__name__)

# uid alone is not unique: it carries no airline, so two carriers with the same
# flight number and local departure would collide.
CREATE_OCCURRENCES_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS flight_occurrences (
    uid TEXT NOT NULL,
    run_id TEXT NOT NULL,
    airline_designator TEXT NOT NULL,
    service_type TEXT,
    flight_number TEXT NOT NULL,
    departure_datetime TIMESTAMP NOT NULL,
    arrival_datetime TIMESTAMP NOT NULL,
    departure_utc_datetime TIMESTAMPTZ NOT NULL,
    arrival_utc_datetime TIMESTAMPTZ NOT NULL,
    departure_iata TEXT NOT NULL,
    arrival_iata TEXT NOT NULL,
    aircraft_type TEXT,
    aircraft_configuration TEXT,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    PRIMARY KEY (uid, airline_designator, departure_iata)
)
"""

UPSERT_OCCURRENCE_SQL = """
    INSERT INTO flight_occurrences (
        uid,
        run_id,
        airline_designator,
        service_type,
        flight_number,
        departure_datetime,
        arrival_datetime,
        departure_utc_datetime,
        arrival_utc_datetime,
        departure_iata,
        arrival_iata,
        aircraft_type,
        aircraft_configuration
    )
    VALUES (
        %(uid)s,
        %(run_id)s,
        %(airline_designator)s,
        %(service_type)s,
        %(flight_number)s,
        %(departure_datetime)s,
        %(arrival_datetime)s,
        %(departure_utc_datetime)s,
        %(arrival_utc_datetime)s,
        %(departure_iata)s,
        %(arrival_iata)s,
        %(aircraft_type)s,
        %(aircraft_configuration)s
    )
    ON CONFLICT (uid, airline_designator, departure_iata)
    DO UPDATE SET
        run_id = EXCLUDED.run_id,
        service_type = EXCLUDED.service_type,
        arrival_datetime = EXCLUDED.arrival_datetime,
        departure_utc_datetime = EXCLUDED.departure_utc_datetime,
        arrival_utc_datetime = EXCLUDED.arrival_utc_datetime,
        arrival_iata = EXCLUDED.arrival_iata,
        aircraft_type = EXCLUDED.aircraft_type,
        aircraft_configuration = EXCLUDED.aircraft_configuration
"""

COUNT_FOR_RUN_SQL = """
    SELECT COUNT(*) AS total
    FROM flight_occurrences
    WHERE run_id = %(run_id)s
"""


def ensure_occurrences_table(db_client: DatabaseClient) -> None:
    db_client.execute(CREATE_OCCURRENCES_TABLE_SQL)


@perf("db.upsert_occurrences", tags={"component": "db"})
def upsert_occurrences(
    db_client: DatabaseClient,
    run_id: str,
    occurrences: Iterable[FlightOccurrence],
) -> int:
    """Persist occurrences, updating rows that already exist for the same flight."""
    params_list = [occurrence.to_db_params(run_id) for occurrence in occurrences]
    if not params_list:
        return 0

    written = db_client.executemany(UPSERT_OCCURRENCE_SQL, params_list)
    LOGGER.info("Upserted %s flight occurrences for run %s", written, run_id)
    return written


def count_occurrences(db_client: DatabaseClient, run_id: str) -> int:
    row = db_client.fetch_one(COUNT_FOR_RUN_SQL, {"run_id": run_id}) or {}
    return int(row.get("total") or 0)


__all__ = [
    "CREATE_OCCURRENCES_TABLE_SQL",
    "count_occurrences",
    "ensure_occurrences_table",
    "upsert_occurrences",
]
