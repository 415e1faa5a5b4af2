"""Shared pytest fixtures for the ssim_parser package tests.

Provides a fixed-width line builder, fake database objects and configuration
objects so tests stay deterministic and never touch network or a database.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Dict, Generator

import pytest

from ssim_parser.config import AppConfig
from ssim_parser.schema import VERSION_3, Schema

BASE_RECORD: Dict[str, str] = {
    "record_type": "3",
    "operational_suffix": "",
    "airline_designator": "ABC",
    "flight_number": "1234",
    "itinerary_variation_identifier": "01",
    "leg_sequence_number": "01",
    "service_type": "J",
    "operation_start_date": "01JAN24",
    "operation_end_date": "14JAN24",
    "operation_days_of_week": "1",
    "frequency_rate": "",
    "departure_station": "LHR",
    "passenger_departure_time": "0800",
    "aircraft_departure_time": "0800",
    "utc_local_departure_time_variant": "+0000",
    "passenger_terminal_departure": "5",
    "arrival_station": "CDG",
    "passenger_arrival_time": "0915",
    "aircraft_arrival_time": "0915",
    "utc_local_arrival_time_variant": "+0000",
    "passenger_terminal_arrival": "2E",
    "aircraft_type": "320",
    "aircraft_configuration_version": "Y180",
    "date_variation": "00",
    "record_serial_number": "000001",
}


def build_line(schema: Schema = VERSION_3, **values: str) -> str:
    """Lay out a fixed-width record: each value left-justified in its field.

    Fields without a value (including internal filler) are blank.
    """
    merged = dict(BASE_RECORD)
    merged.update(values)
    parts = []
    for spec in schema.fields:
        value = merged.get(spec.name, "")
        if len(value) > spec.length:
            raise ValueError(f"{spec.name}={value!r} exceeds {spec.length} characters")
        parts.append(value.ljust(spec.length))
    return "".join(parts)


@pytest.fixture
def ssim_line() -> Callable[..., str]:
    """Factory building a valid version-3 line with field overrides."""
    return build_line


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
    """Application config fixture.

    Points logging to a temporary directory; no database is configured.
    """
    return AppConfig(
        database_url=None,
        log_directory=tmp_path,
        log_level="INFO",
    )


class FakeCursor:
    def __init__(self) -> None:
        self.executed = []

    def execute(self, query, params=None):
        self.executed.append(("execute", query, params))

    def executemany(self, query, params_seq):
        self.executed.append(("executemany", query, list(params_seq)))

    def fetchone(self):
        return {"total": 2}

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


class FakeTransaction:
    def __init__(self, conn):
        self.conn = conn
        self.entered = False
        self.exited = False

    def __enter__(self):
        self.entered = True
        return self.conn

    def __exit__(self, exc_type, exc, tb):
        self.exited = True
        return False


class FakeConnection:
    def __init__(self):
        self.cursors = []
        self.cursor_kwargs = []
        self.transaction_calls = []
        self.last_transaction = None

    def cursor(self, *_, **kwargs):
        cursor = FakeCursor()
        self.cursors.append(cursor)
        self.cursor_kwargs.append(kwargs)
        return cursor

    def transaction(self):
        txn = FakeTransaction(self)
        self.last_transaction = txn
        self.transaction_calls.append(txn)
        return txn


class FakePool:
    def __init__(self, conn):
        self.conn = conn
        self.request_count = 0
        self.closed = False

    @contextmanager
    def connection(self):
        self.request_count += 1
        yield self.conn

    def close(self):
        self.closed = True


@pytest.fixture
def fake_conn() -> FakeConnection:
    """In-memory fake DB connection used by db client tests."""
    return FakeConnection()


@pytest.fixture
def fake_pool(fake_conn: FakeConnection) -> Generator[FakePool, None, None]:
    """In-memory fake connection pool wrapping ``fake_conn``."""
    yield FakePool(fake_conn)
