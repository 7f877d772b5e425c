"""Tests for environment-driven settings."""

from pathlib import Path

from migrun.config import MigrunSettings


def test_defaults():
    s = MigrunSettings()
    assert s.db_path == Path("migrun.db")
    assert s.migrations_dir == Path("migrations")
    assert s.table_name == "migrations"
    assert s.log_level == "WARNING"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("MIGRUN_DB_PATH", "/tmp/other.db")
    monkeypatch.setenv("MIGRUN_MIGRATIONS_DIR", "db/migrations")
    monkeypatch.setenv("MIGRUN_TABLE_NAME", "schema_log")

    s = MigrunSettings()
    assert s.db_path == Path("/tmp/other.db")
    assert s.migrations_dir == Path("db/migrations")
    assert s.table_name == "schema_log"


def test_log_level_override(monkeypatch):
    monkeypatch.setenv("MIGRUN_LOG_LEVEL", "debug")
    assert MigrunSettings().log_level == "debug"
