"""Migration source providers."""

from migrun.sources.base import MigrationSource, SourceEntry, parse_identifier
from migrun.sources.directory import DirectorySource
from migrun.sources.memory import InMemorySource
from migrun.sources.resources import PackageSource

__all__ = [
    "MigrationSource",
    "SourceEntry",
    "parse_identifier",
    "DirectorySource",
    "InMemorySource",
    "PackageSource",
]
