"""Migration sources — where migration definitions come from.

A source yields raw `(identifier, body)` entries. Turning those into
an ordered list of Migration objects is shared by every source: parse
the identifier, skip what doesn't parse, reject duplicate versions,
sort ascending.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable

from migrun.exceptions import DuplicateMigrationError
from migrun.types import Migration

_logger = logging.getLogger(__name__)

SQL_SUFFIX = ".sql"
_VERSION_RE = re.compile(r"[0-9]+")
MAX_VERSION = 2**63 - 1  # SQLite INTEGER


@dataclass(frozen=True)
class SourceEntry:
    """A raw migration as found in a source, before parsing."""

    identifier: str  # e.g. "001_add_starred_column.sql"
    body: str


def parse_identifier(identifier: str) -> tuple[int, str] | None:
    """Split `<version>_<name>[.sql]` into (version, name).

    Returns None when the identifier has no `_` separator or the prefix
    is not a non-negative integer that fits a SQLite INTEGER.
    """
    prefix, sep, rest = identifier.partition("_")
    if not sep or not _VERSION_RE.fullmatch(prefix):
        return None
    if len(prefix.lstrip("0")) > len(str(MAX_VERSION)):
        return None
    version = int(prefix)
    if version > MAX_VERSION:
        return None
    name = rest[: -len(SQL_SUFFIX)] if rest.endswith(SQL_SUFFIX) else rest
    return version, name


class MigrationSource(ABC):
    """Abstract provider of migration definitions."""

    @abstractmethod
    def entries(self) -> Iterable[SourceEntry]:
        """Yield raw entries. Raise MigrationLoadError on I/O failure."""
        ...

    def load(self) -> list[Migration]:
        """Parse all entries into migrations sorted by version."""
        by_version: dict[int, tuple[str, Migration]] = {}
        for entry in self.entries():
            parsed = parse_identifier(entry.identifier)
            if parsed is None:
                _logger.debug("Skipping unrecognised migration source %r", entry.identifier)
                continue
            version, name = parsed
            if version in by_version:
                raise DuplicateMigrationError(
                    version, sorted([by_version[version][0], entry.identifier]),
                )
            by_version[version] = (
                entry.identifier,
                Migration(version=version, name=name, body=entry.body),
            )
        return [by_version[v][1] for v in sorted(by_version)]
