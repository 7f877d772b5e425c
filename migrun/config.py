"""Global configuration — loaded from environment variables."""

from pathlib import Path

from pydantic_settings import BaseSettings


class MigrunSettings(BaseSettings):
    db_path: Path = Path("migrun.db")
    migrations_dir: Path = Path("migrations")
    table_name: str = "migrations"  # bookkeeping table
    log_level: str = "WARNING"  # the CLI prints progress itself

    model_config = {"env_prefix": "MIGRUN_"}


settings = MigrunSettings()
