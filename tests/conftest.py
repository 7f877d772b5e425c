"""Shared test fixtures — throwaway SQLite databases and migration sources."""

from __future__ import annotations

import sqlite3

import pytest

from migrun.applier import MigrationApplier
from migrun.sources import InMemorySource


def trace_sql(version: int) -> str:
    """Migration body that leaves a visible mark in the trace table."""
    return f"INSERT INTO trace (version) VALUES ({version});"


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "test.db"


@pytest.fixture
def conn(db_path):
    """Connection with a `trace` table that migrations write into."""
    connection = sqlite3.connect(str(db_path))
    connection.execute("CREATE TABLE trace (seq INTEGER PRIMARY KEY AUTOINCREMENT, version INTEGER)")
    connection.commit()
    yield connection
    connection.close()


@pytest.fixture
def make_applier(conn):
    def _factory(entries, table: str = "migrations") -> MigrationApplier:
        return MigrationApplier(conn, InMemorySource(entries), table=table)
    return _factory


def traced(conn: sqlite3.Connection) -> list[int]:
    """Versions written to the trace table, in execution order."""
    return [row[0] for row in conn.execute("SELECT version FROM trace ORDER BY seq")]


def recorded(conn: sqlite3.Connection, table: str = "migrations") -> list[tuple[int, str]]:
    return [tuple(row) for row in conn.execute(f"SELECT version, name FROM {table} ORDER BY version")]
