import pytest

from ssim_parser.jobs import RunConfig, run_job
from ssim_parser.persistence import (
    count_occurrences,
    ensure_occurrences_table,
    upsert_occurrences,
)
from ssim_parser.parser import parse_text


def _line(flight_number: str, departure: str, days: str = "1234567") -> str:
    fields = [
        ("3", 1),
        ("", 1),
        ("XYZ", 3),
        (flight_number, 4),
        ("01", 2),
        ("01", 2),
        ("J", 1),
        ("01MAR24", 7),
        ("07MAR24", 7),
        (days, 7),
        ("", 1),
        ("JFK", 3),
        (departure, 4),
        (departure, 4),
        ("-0500", 5),
        ("", 2),
        ("LHR", 3),
        ("0930", 4),
        ("0930", 4),
        ("+0000", 5),
        ("", 2),
        ("77W", 3),
    ]
    head = "".join(value.ljust(length) for value, length in fields)
    # Remaining fields up to the date variation are left blank.
    return head.ljust(192) + "01" + "000001"


@pytest.mark.integration
def test_upsert_round_trip(db_client):
    ensure_occurrences_table(db_client)
    result = parse_text(_line("100", "2130"))
    assert len(result.occurrences) == 7

    written = upsert_occurrences(db_client, "run-a", result.occurrences)
    assert written == 7
    assert count_occurrences(db_client, "run-a") == 7

    # Re-running the same schedule updates rows in place.
    upsert_occurrences(db_client, "run-b", result.occurrences)
    assert count_occurrences(db_client, "run-a") == 0
    assert count_occurrences(db_client, "run-b") == 7

    row = db_client.fetch_one(
        "SELECT departure_utc_datetime, arrival_datetime FROM flight_occurrences WHERE uid = %(uid)s",
        {"uid": result.occurrences[0].uid},
    )
    assert row["departure_utc_datetime"] == result.occurrences[0].departure_utc_datetime
    assert row["arrival_datetime"] == result.occurrences[0].arrival_datetime


@pytest.mark.integration
def test_run_job_persists(app_config, db_client):
    text = "\n".join([_line("200", "0800", "1 3 5  "), _line("201", "1000", "     6 ")])

    job = run_job(app_config, RunConfig(source=text, persist=True), db_client=db_client)

    assert job.persisted == len(job.occurrences) == 4
    assert count_occurrences(db_client, job.run_id) == 4
