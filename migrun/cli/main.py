"""migrun CLI — apply migrations and inspect their status.

`migrun migrate` brings the database up to date.
`migrun status` lists every known migration and whether it's applied.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import closing
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from migrun.applier import MigrationApplier
from migrun.config import settings
from migrun.exceptions import MigrunError
from migrun.sources import DirectorySource

console = Console()

app = typer.Typer(
    name="migrun",
    help="migrun -- versioned SQL migrations for SQLite.",
    no_args_is_help=True,
)

_DbOption = typer.Option(None, "--db", help="SQLite database file")
_DirOption = typer.Option(None, "--dir", "-d", help="Directory holding NNN_name.sql files")
_TableOption = typer.Option(None, "--table", help="Bookkeeping table name")


def _configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _connect(db: Path) -> sqlite3.Connection:
    db.parent.mkdir(parents=True, exist_ok=True)
    return sqlite3.connect(str(db))


def _applier(conn: sqlite3.Connection, migrations_dir: Path, table: str) -> MigrationApplier:
    return MigrationApplier(conn, DirectorySource(migrations_dir), table=table)


@app.command("migrate")
def migrate(
    db: Optional[Path] = _DbOption,
    migrations_dir: Optional[Path] = _DirOption,
    table: Optional[str] = _TableOption,
):
    """Apply all pending migrations."""
    _configure_logging()
    db = db or settings.db_path
    migrations_dir = migrations_dir or settings.migrations_dir

    try:
        with closing(_connect(db)) as conn:
            result = _applier(conn, migrations_dir, table or settings.table_name).run()
    except (MigrunError, ValueError, OSError, sqlite3.Error) as e:
        console.print(f"[red]Migration failed:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    for m in result.applied:
        console.print(f"  [green]Applied[/green] {m.version:03d}_{m.name}")
    if result.applied:
        console.print(f"[green]Applied {len(result.applied)} migrations successfully[/green]")
    else:
        console.print("[dim]No pending migrations to apply[/dim]")


@app.command("status")
def status(
    db: Optional[Path] = _DbOption,
    migrations_dir: Optional[Path] = _DirOption,
    table: Optional[str] = _TableOption,
):
    """Show every migration and whether it has been applied."""
    _configure_logging()
    db = db or settings.db_path
    migrations_dir = migrations_dir or settings.migrations_dir

    try:
        with closing(_connect(db)) as conn:
            entries = _applier(conn, migrations_dir, table or settings.table_name).status()
    except (MigrunError, ValueError, OSError, sqlite3.Error) as e:
        console.print(f"[red]Status failed:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if not entries:
        console.print(f"[dim]No migrations found in {migrations_dir}[/dim]")
        return

    table_view = Table(title=f"Migrations in {db}")
    table_view.add_column("Version", style="cyan", justify="right")
    table_view.add_column("Name", style="white")
    table_view.add_column("Applied", style="dim", no_wrap=True)

    for entry in entries:
        applied = (
            str(entry.applied_at or "-") if entry.applied else "[yellow]pending[/yellow]"
        )
        table_view.add_row(str(entry.migration.version), entry.migration.name, applied)

    console.print(table_view)
    pending = sum(1 for e in entries if not e.applied)
    console.print(f"{len(entries) - pending} applied, {pending} pending")


@app.command("version")
def version():
    """Show the migrun version."""
    from migrun import __version__
    console.print(f"migrun {__version__}")


def main():
    app()


if __name__ == "__main__":
    main()
