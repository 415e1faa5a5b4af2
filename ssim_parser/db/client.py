"""PostgreSQL access for persisting expanded schedules.

``DatabaseClient`` owns a psycopg connection pool and exposes the handful of
operations the persistence layer needs: transactional writes, batched writes
and single-row reads.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Generator, Iterable, Optional

import psycopg
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from ssim_parser.logging_utils import perf

LOGGER = logging.getLogger(__name__)


class DatabaseClient:
    """Pooled PostgreSQL client."""

    def __init__(
        self,
        dsn: str,
        *,
        min_size: int = 1,
        max_size: int = 5,
        connection_config: Optional[Dict[str, Any]] = None,
    ) -> None:
        if not dsn:
            raise ValueError("A database DSN is required.")
        if min_size < 1 or max_size < min_size:
            raise ValueError("Pool size must be positive and min_size <= max_size.")

        self._pool = ConnectionPool(
            conninfo=dsn,
            min_size=min_size,
            max_size=max_size,
            kwargs=connection_config or {},
        )
        LOGGER.debug("Opened connection pool min=%s max=%s", min_size, max_size)

    @contextmanager
    def connection(self) -> Generator[psycopg.Connection, None, None]:
        with self._pool.connection() as conn:
            yield conn

    @contextmanager
    def transaction(self) -> Generator[psycopg.Connection, None, None]:
        """Yield a pooled connection inside a transaction block."""
        with self.connection() as conn:
            with conn.transaction():
                yield conn

    @perf("db.execute", tags={"component": "db"})
    def execute(self, query: str, params: Optional[Dict[str, Any]] = None) -> None:
        with self.transaction() as conn:
            with conn.cursor() as cur:
                cur.execute(query, params or {})

    @perf("db.executemany", tags={"component": "db"})
    def executemany(self, query: str, param_list: Iterable[Dict[str, Any]]) -> int:
        """Run ``query`` once per parameter set in a single transaction; return the row count."""
        params = list(param_list)
        if not params:
            LOGGER.debug("Skipping empty batch statement")
            return 0

        with self.transaction() as conn:
            with conn.cursor() as cur:
                LOGGER.debug("Executing batch statement rows=%s", len(params))
                cur.executemany(query, params)
        return len(params)

    def fetch_one(
        self,
        query: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> Optional[Dict[str, Any]]:
        with self.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(query, params or {})
                return cur.fetchone()

    def close(self) -> None:
        LOGGER.debug("Closing connection pool")
        self._pool.close()

    def __enter__(self) -> "DatabaseClient":
        return self

    def __exit__(self, exc_type, exc, exc_tb) -> None:
        self.close()


__all__ = ["DatabaseClient"]
