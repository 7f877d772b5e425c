"""In-memory source — migrations handed over directly, mostly for tests."""

from __future__ import annotations

from typing import Iterable, Iterator, Mapping

from migrun.sources.base import MigrationSource, SourceEntry


class InMemorySource(MigrationSource):
    """Holds `(identifier, body)` pairs in the order given."""

    def __init__(self, entries: Mapping[str, str] | Iterable[tuple[str, str]] = ()):
        items = entries.items() if isinstance(entries, Mapping) else entries
        self._entries = [SourceEntry(identifier=i, body=b) for i, b in items]

    def add(self, identifier: str, body: str) -> None:
        self._entries.append(SourceEntry(identifier=identifier, body=body))

    def entries(self) -> Iterator[SourceEntry]:
        return iter(list(self._entries))
