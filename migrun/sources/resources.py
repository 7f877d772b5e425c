"""Package source — migrations shipped as package data."""

from __future__ import annotations

from importlib import resources
from typing import Iterator

from migrun.exceptions import MigrationLoadError
from migrun.sources.base import SQL_SUFFIX, MigrationSource, SourceEntry


class PackageSource(MigrationSource):
    """Reads `*.sql` resources from `package`/`subdirectory`.

    Works for installed wheels and zipped packages alike, since it
    goes through importlib.resources rather than the filesystem.
    """

    def __init__(self, package: str, subdirectory: str = "migrations"):
        self.package = package
        self.subdirectory = subdirectory

    def entries(self) -> Iterator[SourceEntry]:
        try:
            root = resources.files(self.package)
        except ModuleNotFoundError as e:
            raise MigrationLoadError(f"package {self.package!r} not found") from e

        folder = root.joinpath(self.subdirectory) if self.subdirectory else root
        if not folder.is_dir():
            raise MigrationLoadError(
                f"no migrations folder {self.subdirectory!r} in package {self.package!r}"
            )

        for item in sorted(folder.iterdir(), key=lambda t: t.name):
            if not item.is_file() or not item.name.endswith(SQL_SUFFIX):
                continue
            try:
                body = item.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise MigrationLoadError(
                    f"failed to read migration resource {item.name}: {e}"
                ) from e
            yield SourceEntry(identifier=item.name, body=body)
