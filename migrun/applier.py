"""Migration applier — brings a database up to the latest schema version.

One linear pass: make sure the bookkeeping table exists, read which
versions are recorded, load every migration from the source in
ascending version order, and apply the ones that are missing. Each
migration runs in its own transaction together with the insert that
records it, so a migration is either applied and recorded or neither.

The first failure stops the run. Migrations applied before it stay
committed; later ones are never attempted, since they may depend on
the schema the failed one was supposed to produce.

The connection belongs to the caller. It must use sqlite3's default
transaction handling, and migration bodies must not contain their own
BEGIN/COMMIT statements.
"""

from __future__ import annotations

import logging
import re
import sqlite3

from migrun.exceptions import (
    AppliedVersionsQueryError,
    BookkeepingError,
    MigrationExecutionError,
    MigrationLoadError,
    MigrationRecordError,
)
from migrun.sources.base import MigrationSource
from migrun.types import AppliedRecord, Migration, MigrationStatus, RunResult

_logger = logging.getLogger(__name__)

DEFAULT_TABLE = "migrations"
_IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


class MigrationApplier:
    """Applies pending migrations from a source to a SQLite connection.

    `ensure_table`, `pending`, `apply` and `run` commit on the caller's
    connection, so any transaction the caller left open is committed
    along with them. Finish or roll back your own work first.
    """

    def __init__(
        self,
        conn: sqlite3.Connection,
        source: MigrationSource,
        table: str = DEFAULT_TABLE,
    ):
        if not _IDENTIFIER_RE.fullmatch(table):
            raise ValueError(f"invalid bookkeeping table name: {table!r}")
        self._conn = conn
        self._source = source
        self._table = table

    @property
    def table(self) -> str:
        return self._table

    # ── Bookkeeping ─────────────────────────────────────────────────

    def ensure_table(self) -> None:
        """Create the bookkeeping table if it doesn't exist."""
        try:
            self._conn.execute(
                f"CREATE TABLE IF NOT EXISTS {self._table} ("
                "version INTEGER PRIMARY KEY, "
                "name TEXT NOT NULL, "
                "applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP)"
            )
            self._conn.commit()
        except sqlite3.Error as e:
            raise BookkeepingError(
                f"failed to initialize migration table {self._table}: {e}"
            ) from e

    def applied_versions(self) -> set[int]:
        """Versions already recorded in the bookkeeping table."""
        try:
            cursor = self._conn.execute(f"SELECT version FROM {self._table}")
            return {row[0] for row in cursor.fetchall()}
        except sqlite3.Error as e:
            raise AppliedVersionsQueryError(f"failed to get applied migrations: {e}") from e

    def applied_records(self) -> list[AppliedRecord]:
        """All bookkeeping rows, ordered by version."""
        try:
            cursor = self._conn.execute(
                f"SELECT version, name, applied_at FROM {self._table} ORDER BY version"
            )
            rows = cursor.fetchall()
        except sqlite3.Error as e:
            raise AppliedVersionsQueryError(f"failed to get applied migrations: {e}") from e
        return [
            AppliedRecord(version=row[0], name=row[1], applied_at=row[2])
            for row in rows
        ]

    # ── Discovery ───────────────────────────────────────────────────

    def load_migrations(self) -> list[Migration]:
        """Every migration the source knows about, ascending by version."""
        try:
            return self._source.load()
        except OSError as e:
            raise MigrationLoadError(f"failed to load migrations: {e}") from e

    def pending(self) -> list[Migration]:
        """Migrations not yet recorded, in the order they would be applied."""
        self.ensure_table()
        applied = self.applied_versions()
        return [m for m in self.load_migrations() if m.version not in applied]

    def status(self) -> list[MigrationStatus]:
        """One entry per known migration, with its record if applied.

        Read-only: a missing bookkeeping table means nothing is applied.
        """
        records = {}
        if self._table_exists():
            records = {r.version: r for r in self.applied_records()}
        return [
            MigrationStatus(migration=m, record=records.get(m.version))
            for m in self.load_migrations()
        ]

    # ── Applying ────────────────────────────────────────────────────

    def apply(self, migration: Migration) -> None:
        """Run one migration and record it, in a single transaction."""
        try:
            self._conn.executescript(f"BEGIN;\n{migration.body}\n;")
        except sqlite3.Error as e:
            self._rollback(migration)
            raise MigrationExecutionError(migration.version, migration.name, e) from e

        try:
            self._conn.execute(
                f"INSERT INTO {self._table} (version, name) VALUES (?, ?)",
                (migration.version, migration.name),
            )
            self._conn.commit()
        except (sqlite3.Error, OverflowError) as e:
            self._rollback(migration)
            raise MigrationRecordError(migration.version, migration.name, e) from e

        _logger.info("Applied migration %d: %s", migration.version, migration.name)

    def run(self) -> RunResult:
        """Apply all pending migrations in ascending version order."""
        self.ensure_table()
        applied = self.applied_versions()
        migrations = self.load_migrations()

        result = RunResult()
        for migration in migrations:
            if migration.version in applied:
                result.skipped.append(migration.version)
                continue
            self.apply(migration)
            result.applied.append(migration)

        if not result.applied:
            _logger.info("No pending migrations to apply")
        else:
            _logger.info("Applied %d migrations successfully", len(result.applied))
        return result

    def _table_exists(self) -> bool:
        try:
            row = self._conn.execute(
                "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?",
                (self._table,),
            ).fetchone()
        except sqlite3.Error as e:
            raise AppliedVersionsQueryError(f"failed to get applied migrations: {e}") from e
        return row is not None

    def _rollback(self, migration: Migration) -> None:
        try:
            self._conn.rollback()
        except sqlite3.Error:
            _logger.exception(
                "Rollback failed after migration %d (%s)",
                migration.version, migration.name,
            )
