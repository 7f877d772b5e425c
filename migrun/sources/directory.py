"""Filesystem source — `<version>_<name>.sql` files in one directory."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

from migrun.exceptions import MigrationLoadError
from migrun.sources.base import MigrationSource, SourceEntry

_logger = logging.getLogger(__name__)


class DirectorySource(MigrationSource):
    """Reads migrations matching `pattern` from a single directory.

    Subdirectories are not searched. A directory that does not exist
    simply holds no migrations.
    """

    def __init__(self, path: str | Path, pattern: str = "*.sql"):
        self.path = Path(path)
        self.pattern = pattern

    def entries(self) -> Iterator[SourceEntry]:
        if not self.path.exists():
            _logger.warning("Migrations directory %s does not exist", self.path)
            return
        if not self.path.is_dir():
            raise MigrationLoadError(f"migrations path {self.path} is not a directory")

        for file in sorted(self.path.glob(self.pattern)):
            if not file.is_file():
                continue
            try:
                body = file.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise MigrationLoadError(
                    f"failed to read migration file {file}: {e}"
                ) from e
            yield SourceEntry(identifier=file.name, body=body)

    def __repr__(self) -> str:
        return f"DirectorySource({str(self.path)!r}, pattern={self.pattern!r})"
