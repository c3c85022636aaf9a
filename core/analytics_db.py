"""
Analytics database lifecycle management.

This module owns the SQLite connection that backs the submission log.
The database is opened once at application startup and closed on shutdown.
It is constructed explicitly and injected into SubmissionRecorder; there is
no module-level instance.

FAIL FAST BEHAVIOR:
    - If the database file cannot be opened: sqlite3.Error propagates
    - Using the connection before initialize(): raises DatabaseNotReadyError

Usage:
    # At application startup
    database = AnalyticsDatabase(Path("data/analytics.db"))
    database.initialize()

    recorder = SubmissionRecorder(database)

    # At application shutdown
    database.close()
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from .exceptions import DatabaseNotReadyError


MEMORY_DATABASE = ":memory:"

SCHEMA = """
CREATE TABLE IF NOT EXISTS submissions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    timestamp TEXT NOT NULL DEFAULT (datetime('now', 'localtime')),
    channel TEXT NOT NULL DEFAULT 'discord',
    customer_reference TEXT,
    scenario TEXT,
    total_items INTEGER NOT NULL,
    items_with_values INTEGER NOT NULL,
    channel_success INTEGER NOT NULL DEFAULT 1
);

CREATE TABLE IF NOT EXISTS submission_items (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    submission_id INTEGER NOT NULL,
    item_name TEXT NOT NULL,
    count INTEGER NOT NULL,
    FOREIGN KEY (submission_id) REFERENCES submissions(id) ON DELETE CASCADE
);

CREATE INDEX IF NOT EXISTS idx_submissions_timestamp ON submissions(timestamp);
CREATE INDEX IF NOT EXISTS idx_submissions_channel ON submissions(channel);
CREATE INDEX IF NOT EXISTS idx_submissions_customer ON submissions(customer_reference);
CREATE INDEX IF NOT EXISTS idx_submission_items_submission_id ON submission_items(submission_id);
CREATE INDEX IF NOT EXISTS idx_submission_items_item_name ON submission_items(item_name);
"""


class AnalyticsDatabase:
    """
    Manages the analytics SQLite database lifecycle.

    This class is responsible for:
    1. Creating the data directory and opening the connection
    2. Creating the schema (idempotent)
    3. Providing the connection and a transaction helper to the recorder
    4. Closing the connection at application shutdown

    Flask may serve requests from several threads, so the connection is
    opened with check_same_thread=False and every statement runs under a
    lock.

    Attributes:
        db_path: Path to the database file (or ":memory:")
        is_initialized: True if the connection is open
    """

    def __init__(self, db_path: str | Path, logger: Optional[logging.Logger] = None):
        """
        Initialize database manager.

        Args:
            db_path: Path to the SQLite file, or ":memory:" for tests
            logger: Logger instance (optional, creates default if not provided)

        Note:
            This does NOT open the database - call initialize() to do that.
        """
        self._db_path = str(db_path)
        self._logger = logger or logging.getLogger("laundry_counter_web.core.analytics_db")
        self._connection: Optional[sqlite3.Connection] = None
        self._lock = threading.RLock()

    @property
    def db_path(self) -> str:
        """Path to the database file."""
        return self._db_path

    @property
    def is_initialized(self) -> bool:
        """True if the connection is open."""
        return self._connection is not None

    @property
    def connection(self) -> sqlite3.Connection:
        """
        Open SQLite connection.

        Raises:
            DatabaseNotReadyError: If initialize() has not been called
        """
        if self._connection is None:
            raise DatabaseNotReadyError()
        return self._connection

    def initialize(self) -> None:
        """
        Open the database and create the schema.

        Raises:
            RuntimeError: If called when already initialized
            sqlite3.Error: If the database cannot be opened
        """
        if self._connection is not None:
            raise RuntimeError("Analytics database already initialized")

        self._logger.info(f"Opening analytics database: {self._db_path}")

        if self._db_path != MEMORY_DATABASE:
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)

        connection = sqlite3.connect(self._db_path, check_same_thread=False)
        connection.row_factory = sqlite3.Row
        connection.execute("PRAGMA foreign_keys = ON")
        if self._db_path != MEMORY_DATABASE:
            connection.execute("PRAGMA journal_mode = WAL")
        connection.executescript(SCHEMA)
        connection.commit()

        self._connection = connection
        self._logger.info("Analytics database ready")

    def close(self) -> None:
        """
        Close the connection.

        Safe to call multiple times (idempotent).
        """
        with self._lock:
            if self._connection is None:
                self._logger.debug("Analytics database not open, nothing to close")
                return
            try:
                self._connection.close()
                self._logger.info("Analytics database closed")
            except sqlite3.Error as e:
                self._logger.error(f"Error closing analytics database: {e}")
            finally:
                self._connection = None

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """
        Run a block of writes atomically.

        Commits when the block exits normally, rolls back on any exception
        and re-raises it.
        """
        with self._lock:
            connection = self.connection
            try:
                yield connection
                connection.commit()
            except Exception:
                connection.rollback()
                raise

    def query(self, sql: str, params: tuple = ()) -> list:
        """Execute a read-only statement and return all rows."""
        with self._lock:
            return self.connection.execute(sql, params).fetchall()

    def __enter__(self) -> "AnalyticsDatabase":
        """Context manager entry - open database."""
        self.initialize()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - close database."""
        self.close()
