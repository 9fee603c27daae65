"""
db/connection.py
----------------
Manages the PostgreSQL connection pool.
Uses psycopg2's SimpleConnectionPool for efficient connection reuse.

Repositories receive a ConnectionProvider instead of reaching for a
global pool, so tests can hand them a double and deployments can swap
the pooling strategy. A process-wide default provider is kept for
callers that do not care.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

import psycopg2
from psycopg2 import pool

from config import DATABASE_URL, DB_POOL_MAX_CONN, DB_POOL_MIN_CONN
from utils.logger import get_logger

logger = get_logger(__name__)


class ConnectionProvider:
    """Acquire/release access to pooled psycopg2 connections."""

    def __init__(
        self,
        dsn: str = DATABASE_URL,
        min_conn: int = DB_POOL_MIN_CONN,
        max_conn: int = DB_POOL_MAX_CONN,
    ):
        self.dsn = dsn
        self.min_conn = min_conn
        self.max_conn = max_conn
        self._pool: Optional[pool.SimpleConnectionPool] = None

    @property
    def is_open(self) -> bool:
        return self._pool is not None

    def open(self) -> None:
        """
        Initialize the database connection pool.

        Raises:
            psycopg2.OperationalError: If the database is unreachable.
        """
        if self._pool is not None:
            return
        try:
            self._pool = pool.SimpleConnectionPool(self.min_conn, self.max_conn, self.dsn)
            logger.info("Database connection pool initialized successfully.")
        except psycopg2.OperationalError as e:
            logger.error(f"Failed to initialize database pool: {e}")
            raise

    def acquire(self):
        """
        Get a connection from the pool.

        Returns:
            A psycopg2 connection object.

        Raises:
            RuntimeError: If the pool has not been initialized.
            psycopg2.pool.PoolError: If the pool is exhausted.
        """
        if self._pool is None:
            raise RuntimeError("Database pool not initialized. Call open() first.")
        return self._pool.getconn()

    def release(self, conn) -> None:
        """Return a connection back to the pool."""
        if self._pool is not None:
            self._pool.putconn(conn)

    def close(self) -> None:
        """Close all connections in the pool."""
        if self._pool is not None:
            self._pool.closeall()
            self._pool = None
            logger.info("Database connection pool closed.")

    @contextmanager
    def connection(self) -> Iterator:
        """
        Scoped acquisition: yields a connection and always releases it.

        If the body raises, the open transaction is rolled back before the
        exception continues. Failures during rollback or release are logged
        and never replace the body's own outcome.
        """
        conn = self.acquire()
        try:
            yield conn
        except Exception:
            try:
                conn.rollback()
            except Exception as e:
                logger.warning(f"Rollback failed: {e}")
            raise
        finally:
            try:
                self.release(conn)
            except Exception as e:
                logger.warning(f"Failed to release connection: {e}")


_default_provider: Optional[ConnectionProvider] = None


def get_default_provider() -> ConnectionProvider:
    """Return the process-wide provider, creating it (unopened) on first use."""
    global _default_provider
    if _default_provider is None:
        _default_provider = ConnectionProvider()
    return _default_provider


def init_pool(min_conn: int = DB_POOL_MIN_CONN, max_conn: int = DB_POOL_MAX_CONN) -> ConnectionProvider:
    """Open the default provider's pool and return the provider."""
    provider = get_default_provider()
    provider.min_conn = min_conn
    provider.max_conn = max_conn
    provider.open()
    return provider


def close_pool() -> None:
    """Close the default provider's pool, if one was opened."""
    if _default_provider is not None:
        _default_provider.close()
