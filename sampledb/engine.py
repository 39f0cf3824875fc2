"""Embedded SQLite engine that serves the provisioned sample database."""

from __future__ import annotations

import logging
import sqlite3
from threading import RLock
from urllib.parse import quote

from .constants import SAMPLE_DB_SCHEMA, SQLITE_SCHEME

logger = logging.getLogger(__name__)


class SampleEngine:
    """Open connections against a descriptor and close them all on shutdown."""

    def __init__(self) -> None:
        self._connections: list[sqlite3.Connection] = []
        self._lock = RLock()

    @property
    def open_connections(self) -> int:
        with self._lock:
            return len(self._connections)

    def connect(self, descriptor: str, user: str = SAMPLE_DB_SCHEMA) -> sqlite3.Connection:
        """Open a connection for a ``sqlite:///`` descriptor."""

        if not descriptor.startswith(SQLITE_SCHEME):
            raise ValueError(f"Unsupported descriptor: {descriptor}")

        path = descriptor[len(SQLITE_SCHEME):]
        logger.debug(f"Opening SampleDB connection. User={user}, Url={descriptor}")
        # mode=rw refuses to create a database that is not already there.
        conn = sqlite3.connect(f"file:{quote(path)}?mode=rw", uri=True, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        with self._lock:
            self._connections.append(conn)
        return conn

    def close(self, conn: sqlite3.Connection) -> None:
        """Close one connection and stop tracking it."""

        with self._lock:
            if conn in self._connections:
                self._connections.remove(conn)
        conn.close()

    def shutdown(self) -> None:
        """Close every connection opened through this engine."""

        with self._lock:
            connections, self._connections = self._connections, []

        errors: list[sqlite3.Error] = []
        for conn in connections:
            try:
                conn.close()
            except sqlite3.Error as exc:
                errors.append(exc)
        logger.debug(f"SampleDB engine closed {len(connections) - len(errors)} connection(s)")
        if errors:
            raise errors[0]


def list_tables(conn: sqlite3.Connection) -> list[str]:
    """Return table names of the connected database in alphabetical order."""

    rows = conn.execute("SELECT name FROM sqlite_master WHERE type = 'table' ORDER BY name").fetchall()
    return [row["name"] for row in rows]
